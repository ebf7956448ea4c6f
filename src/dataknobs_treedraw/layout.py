"""Relayout pass: per-render geometry for every node of a tree.

The relayout pass walks the tree from the render root in pre-order and
derives, for each node, its row index, sibling rank, anchor column and
lineage. The results live in a ``TreeLayout`` keyed by node identity and are
thrown away after the render, so nothing on the nodes themselves can go
stale between renders.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, Iterator, List, Tuple

from dataknobs_treedraw.styles import truncate, visible_width

if TYPE_CHECKING:
    from dataknobs_treedraw.tree import Node

logger = logging.getLogger(__name__)


@dataclass
class NodeLayout:
    """Layout of a single node for one render.

    Attributes:
        node: The node this layout describes.
        index: Row of this node in the diagram (the render root is row 0).
        depth: Levels below the render root.
        sibnum: 0-based position among the parent's children.
        is_sibling: True for every node except the render root.
        is_last_sibling: True if this is the parent's last child (or the root).
        is_root: True for the render root.
        parent_is_root: True if the parent is the render root.
        anchor: Column where this node's connector (or the root's label) starts.
        label: Label text to display, after any truncation.
        label_width: Visible width of ``label`` in cells.
        padding_width: Visible width of the node's padding unit.
        lineage: Layouts of all ancestors, from the render root to the parent.
    """

    node: Node
    index: int
    depth: int
    sibnum: int
    is_sibling: bool
    is_last_sibling: bool
    is_root: bool
    parent_is_root: bool
    anchor: int
    label: str
    label_width: int
    padding_width: int
    lineage: Tuple[NodeLayout, ...] = field(default=(), repr=False)

    @property
    def extent(self) -> int:
        """Last column this node's row needs with a default decorator."""
        if self.is_root:
            return self.anchor + self.label_width - 1
        return self.anchor + self.label_width + self.padding_width


class TreeLayout:
    """The layouts of every node under a render root, in row order."""

    def __init__(self, root: Node):
        self.root = root
        self._entries: Dict[int, NodeLayout] = {}

    def _add(self, entry: NodeLayout) -> None:
        self._entries[id(entry.node)] = entry

    def __getitem__(self, node: Node) -> NodeLayout:
        return self._entries[id(node)]

    def __contains__(self, node: object) -> bool:
        entry = self._entries.get(id(node))
        return entry is not None and entry.node is node

    def __iter__(self) -> Iterator[NodeLayout]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def nodes(self) -> List[Node]:
        """All nodes in row order, starting with the render root."""
        return [entry.node for entry in self._entries.values()]

    def canvas_width(self) -> int:
        """Index of the last column of the canvas.

        Every row has ``canvas_width() + 1`` cells. Descendants need room for
        their anchor, label and padding; the root needs room for its label.
        """
        return max([0] + [entry.extent for entry in self])

    def describe(self, node: Node) -> str:
        """Human readable dump of a node's layout fields, for debugging renders."""
        entry = self[node]
        lines = [
            f"label: {node.label!r}",
            f"id: {node.node_id}",
            f"index: {entry.index}",
            f"depth: {entry.depth}",
            f"sibnum: {entry.sibnum}",
            f"is_root: {entry.is_root}",
            f"is_sibling: {entry.is_sibling}",
            f"is_last_sibling: {entry.is_last_sibling}",
            f"parent_is_root: {entry.parent_is_root}",
            f"anchor: {entry.anchor}",
            f"extent: {entry.extent}",
            f"label_width: {entry.label_width}",
            f"padding: {node.padding!r} ({entry.padding_width} cells)",
            f"lineage: {[ancestor.node.label for ancestor in entry.lineage]}",
        ]
        return "\n".join(lines)


def relayout(
    root: Node,
    base_column: int = 0,
    max_label_width: int | None = None,
) -> TreeLayout:
    """Compute the layout of ``root`` and all of its descendants.

    Args:
        root: The node to treat as the root of the diagram.
        base_column: Anchor column of the root.
        max_label_width: Optional label width limit in cells; longer labels
            are truncated with an ellipsis.

    Returns:
        A TreeLayout whose iteration order is the diagram's row order.
    """
    layout = TreeLayout(root)
    stack: List[Tuple[Node, NodeLayout | None, int, bool]] = [(root, None, 0, True)]
    index = 0
    truncated = 0
    while stack:
        node, parent, sibnum, is_last = stack.pop()
        label = truncate(node.label, max_label_width)
        if label != node.label:
            truncated += 1
        padding_width = visible_width(node.padding)
        if parent is None:
            anchor = base_column
            lineage: Tuple[NodeLayout, ...] = ()
        else:
            # children of the root hang directly below its label
            anchor = parent.anchor if parent.is_root else parent.anchor + padding_width + 1
            lineage = parent.lineage + (parent,)
        entry = NodeLayout(
            node=node,
            index=index,
            depth=len(lineage),
            sibnum=sibnum,
            is_sibling=parent is not None,
            is_last_sibling=is_last,
            is_root=parent is None,
            parent_is_root=parent is not None and parent.is_root,
            anchor=anchor,
            label=label,
            label_width=visible_width(label),
            padding_width=padding_width,
            lineage=lineage,
        )
        layout._add(entry)
        index += 1
        children = node.children
        last = len(children) - 1
        for pos in range(last, -1, -1):
            stack.append((children[pos], entry, pos, pos == last))
    logger.debug(
        "Laid out %d nodes under %r (base column %d, %d labels truncated)",
        len(layout), root.label, base_column, truncated,
    )
    return layout
