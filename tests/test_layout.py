"""Tests for the relayout pass."""

from conftest import make_letter_tree, make_simple_tree
from dataknobs_treedraw import Node, relayout


def test_row_order_is_preorder():
    tree = make_letter_tree()
    layout = relayout(tree)
    assert [entry.node.label for entry in layout] == ["a", "b", "d", "e", "h", "c", "f", "g", "i"]
    assert [entry.index for entry in layout] == list(range(9))
    assert layout.nodes[0] is tree
    assert len(layout) == 9


def test_sibling_flags():
    root = make_simple_tree()
    layout = relayout(root)
    flags = [(e.node.label, e.sibnum, e.is_sibling, e.is_last_sibling) for e in layout]
    assert flags == [
        ("root", 0, False, True),
        ("child1", 0, True, False),
        ("child2", 1, True, False),
        ("child3", 2, True, True),
        ("grandchild1", 0, True, True),
    ]


def test_root_flags():
    root = make_simple_tree()
    layout = relayout(root)
    assert layout[root].is_root
    assert not layout[root].parent_is_root
    assert all(layout[child].parent_is_root for child in root.children)
    assert not layout[root.get_child(2).get_child(0)].parent_is_root


def test_anchors():
    tree = make_letter_tree()
    layout = relayout(tree)
    assert {e.node.label: e.anchor for e in layout} == {
        "a": 0, "b": 0, "c": 0, "d": 4, "e": 4, "f": 4, "g": 4, "h": 8, "i": 8,
    }


def test_anchor_uses_padding_width():
    root = make_simple_tree()
    root.set_padding_all("-")
    grandchild = root.get_child(2).get_child(0)
    assert relayout(root)[grandchild].anchor == 2


def test_base_column_shifts_every_anchor():
    root = make_simple_tree()
    shifted = {e.node.label: e.anchor for e in relayout(root, base_column=2)}
    plain = {e.node.label: e.anchor for e in relayout(root)}
    assert shifted == {label: anchor + 2 for label, anchor in plain.items()}


def test_lineage():
    tree = make_letter_tree()
    h = tree.find_nodes(lambda n: n.label == "h")[0]
    layout = relayout(tree)
    assert [ancestor.node.label for ancestor in layout[h].lineage] == ["a", "b", "e"]
    assert layout[tree].lineage == ()


def test_depth_is_relative_to_render_root():
    tree = make_letter_tree()
    b = tree.get_child(0)
    layout = relayout(b)
    assert [e.depth for e in layout] == [0, 1, 1, 2]
    assert layout[b].is_root
    h = b.get_child(1).get_child(0)
    assert layout[h].depth == 2
    assert h.depth == 3


def test_canvas_width():
    assert relayout(make_simple_tree()).canvas_width() == 18
    assert relayout(Node("root")).canvas_width() == 3
    assert relayout(Node("")).canvas_width() == 0


def test_truncated_labels():
    root = Node("root")
    child = root.new_child("abcdefghij")
    entry = relayout(root, max_label_width=4)[child]
    assert entry.label == "abc…"
    assert entry.label_width == 4


def test_layout_does_not_touch_nodes():
    root = make_simple_tree()
    before = root.as_string()
    relayout(root, base_column=7, max_label_width=2)
    assert root.as_string() == before
    assert root.get_child(1).label == "child2"


def test_contains():
    root = make_simple_tree()
    layout = relayout(root)
    assert root.get_child(0) in layout
    assert Node("stranger") not in layout


def test_describe():
    root = make_simple_tree()
    description = relayout(root).describe(root.get_child(1))
    assert "label: 'child2'" in description
    assert "sibnum: 1" in description
    assert "is_last_sibling: False" in description
    assert "padding: '   ' (3 cells)" in description
