"""Tree model with owned children and weak parent links.

This module provides the ``Node`` class, a labeled tree node that owns an
ordered list of children and keeps a non-owning (weak) reference back to its
parent. Depths are maintained eagerly: every attach walks up from the node
gaining the child to find its true depth and pushes the result down through
the whole receiving subtree, so grafted subtrees are re-based immediately.

The Node class supports:
- Fluent construction (``new_child`` and ``add_child`` return the child)
- Grafting independently built trees under any node
- Structural queries (descendants, generations, maximum depth)
- Padding and label styling used by the renderer
- Rendering to a box-drawing diagram via ``draw()``

Typical usage example:

    ```python
    from dataknobs_treedraw import Node

    root = Node("root")
    root.new_child("child1")
    root.new_child("child2")
    root.new_child("child3").new_child("grandchild1")
    print(root.draw())
    ```

Displays:

    ```
    root
    ├── child1
    ├── child2
    └── child3
        └── grandchild1
    ```
"""

from __future__ import annotations

import logging
import uuid
import weakref
from collections import deque
from collections.abc import Callable
from typing import Any, Deque, List, Union

from rich.style import Style

from dataknobs_treedraw.exceptions import CycleError, StructuralError, ValidationError
from dataknobs_treedraw.layout import relayout
from dataknobs_treedraw.render import DrawOptions, draw
from dataknobs_treedraw.styles import apply_styles, parse_style

logger = logging.getLogger(__name__)

DEFAULT_PADDING = "   "


class Node:
    """A labeled tree node that exclusively owns its ordered children.

    Each Node maintains:
    - A display label, plus optional styles rendered around it
    - An ordered list of child nodes (duplicate labels are allowed)
    - A weak reference to its parent (None for a root)
    - Its depth, recomputed whenever the structure above or below changes
    - A padding unit controlling indentation when rendered

    Attributes:
        label: The plain display text of this node.
        children: Copy of the ordered list of child nodes.
        parent: Parent node, or None if this is a root (or the parent is gone).
        root: The root node of this tree.
        depth: Number of hops from the root to this node (root has depth 0).
        padding: The padding unit used to indent this node's row.

    Example:
        ```python
        root = Node("root")
        child = root.new_child("child")
        grandchild = child.new_child("grandchild")

        print(grandchild.root.label)  # "root"
        print(grandchild.depth)       # 2
        print(root.num_children)      # 1
        ```

    Note:
        The parent link is weak. A caller must keep a reference to the root
        of any tree it wants to keep; children keep no ancestor alive. A node
        whose parent is collected becomes a root, and the depths of its
        subtree are re-based from 0.
    """

    def __init__(self, label: Any, padding: str = DEFAULT_PADDING):
        """Initialize an unattached node.

        Args:
            label: The text to display. Non-string values are converted with
                ``str()``. Do not pass pre-styled text; use ``set_color``.
            padding: The padding unit for this node. Defaults to three spaces.

        Raises:
            ValidationError: If padding is empty.
        """
        self._label = str(label)
        self._styles: List[Style] = []
        self._children: List[Node] = []
        self._parent: weakref.ReferenceType[Node] | None = None
        self._depth = 0
        self._id: str | None = None
        self._padding = DEFAULT_PADDING
        self.set_padding(padding)

    def __repr__(self) -> str:
        """Multi-line parenthesized representation of this subtree."""
        return self.as_string(delim="  ", multiline=True)

    def __str__(self) -> str:
        return self._label

    @property
    def label(self) -> str:
        """The plain (unstyled) display text."""
        return self._label

    @label.setter
    def label(self, label: Any) -> None:
        self._label = str(label)

    @property
    def styled_label(self) -> str:
        """The label wrapped in the escape codes of every applied style."""
        return apply_styles(self._label, self._styles)

    @property
    def styles(self) -> List[Style]:
        """The applied styles, innermost first."""
        return list(self._styles)

    @property
    def is_styled(self) -> bool:
        return bool(self._styles)

    @property
    def node_id(self) -> str:
        """A unique identifier, assigned on first use.

        Useful for telling apart nodes that share the same label.
        """
        self._ensure_id()
        return self._id  # type: ignore[return-value]

    def _ensure_id(self) -> None:
        if self._id is None:
            self._id = str(uuid.uuid4())

    @property
    def children(self) -> List[Node]:
        """This node's children as an ordered list (a copy)."""
        return list(self._children)

    @property
    def parent(self) -> Node | None:
        """This node's parent, or None for a root."""
        return self._parent() if self._parent is not None else None

    @property
    def root(self) -> Node:
        """The root node of this tree, found by walking up the parent chain."""
        root = self
        parent = root.parent
        while parent is not None:
            root = parent
            parent = root.parent
        return root

    @property
    def depth(self) -> int:
        """Depth of this node in its tree (0 for a root).

        Maintained on every attach, and re-based when an ancestor link is
        collected, so it is valid without rendering first.
        """
        return self._depth

    @property
    def num_children(self) -> int:
        """Number of direct children."""
        return len(self._children)

    @property
    def sibnum(self) -> int:
        """0-based position among the parent's children, or 0 for a root."""
        parent = self.parent
        if parent is None:
            return 0
        for idx, sibling in enumerate(parent._children):
            if sibling is self:
                return idx
        return 0

    @property
    def padding(self) -> str:
        return self._padding

    def has_children(self) -> bool:
        return len(self._children) > 0

    def has_parent(self) -> bool:
        return self.parent is not None

    def set_padding(self, padding: str) -> None:
        """Set the padding unit for this node only.

        Setting padding on individual nodes can produce odd looking diagrams;
        prefer ``set_padding_all`` on the root.

        Args:
            padding: Non-empty padding string. Its visible width sets the
                indentation step and its first character fills empty cells.

        Raises:
            ValidationError: If padding is empty or not a string.
        """
        if not isinstance(padding, str) or len(padding) < 1:
            raise ValidationError(
                "padding must be at least one character",
                context={"node": self._label, "padding": padding},
            )
        self._padding = padding

    def set_padding_all(self, padding: str) -> None:
        """Set the padding unit for this node and all of its descendants.

        Raises:
            ValidationError: If padding is empty. No node is modified.
        """
        self.set_padding(padding)
        for node in self.get_all_descendants():
            node.set_padding(padding)

    def set_color(self, style: Union[str, Style]) -> Node:
        """Style this node's label.

        Styles stack: each call wraps the result of earlier calls.

        Args:
            style: A ``rich`` Style or style definition, e.g. ``"red"``,
                ``"bold magenta"``, ``"white on blue"``.

        Returns:
            This node, for chaining.

        Raises:
            ValidationError: If the style definition cannot be parsed.
        """
        self._styles.append(style if isinstance(style, Style) else parse_style(style))
        return self

    def set_color_red(self) -> Node:
        return self.set_color("red")

    def set_color_magenta(self) -> Node:
        return self.set_color("magenta")

    def set_color_yellow(self) -> Node:
        return self.set_color("yellow")

    def clear_style(self) -> Node:
        """Remove all styles from this node's label."""
        self._styles = []
        return self

    def new_child(self, label: Any) -> Node:
        """Create a node with the given label and attach it as the last child.

        Returns:
            The new child, so calls can be chained to build lineages:

            ```python
            root.new_child("a").new_child("b").new_child("c")
            ```
        """
        return self.add_child(Node(label))

    def add_child(self, child: Node) -> Node:
        """Attach a node (and its whole subtree) as the last child.

        This grafts independently built trees: depths of every node in the
        receiving subtree, including the graft, are recomputed relative to
        this tree's root. A node that already has a parent is detached from
        it first, so a node is never owned twice.

        Args:
            child: The node to attach.

        Returns:
            The attached child.

        Raises:
            StructuralError: If child is not a Node.
            CycleError: If child is this node or one of its ancestors.

        Example:
            ```python
            branch = Node("branch")
            branch.new_child("leaf")

            root = Node("root")
            root.new_child("trunk").add_child(branch)
            print(branch.depth)                 # 2
            print(branch.get_child(0).depth)    # 3
            ```
        """
        if not isinstance(child, Node):
            raise StructuralError(
                "only Node instances can be attached",
                context={"parent": self._label, "child_type": type(child).__name__},
            )
        if child.is_ancestor(self, self_is_ancestor=True):
            raise CycleError(
                "cannot attach a node beneath itself or its descendants",
                context={"parent": self._label, "child": child.label},
            )
        former_parent = child._detach()
        if former_parent is not None:
            logger.debug("Moving %r from %r to %r", child.label, former_parent.label, self._label)
        self._ensure_id()
        child._parent = weakref.ref(self, _rebase_when_orphaned(child))
        self._children.append(child)
        self._update_depths()
        return child

    def _detach(self) -> Node | None:
        """Remove this node from its parent's children, returning the former parent."""
        parent = self.parent
        if parent is not None:
            parent._children = [sibling for sibling in parent._children if sibling is not self]
        self._parent = None
        self._depth = 0
        return parent

    def _update_depths(self) -> None:
        depth = 0
        parent = self.parent
        while parent is not None:
            depth += 1
            parent = parent.parent
        stack = [(self, depth)]
        while stack:
            node, node_depth = stack.pop()
            node._depth = node_depth
            stack.extend((child, node_depth + 1) for child in node._children)

    def get_child(self, index: int) -> Node | None:
        """Get the child at the given 0-based position.

        Returns:
            The child, or None if the index is out of range. Negative
            indices are out of range.
        """
        if 0 <= index < len(self._children):
            return self._children[index]
        return None

    def get_all_descendants(self) -> List[Node]:
        """Get every descendant of this node (not the node itself).

        Returns:
            Descendants in pre-order, which is the row order of a diagram
            drawn from this node.
        """
        return self.find_nodes(lambda _n: True, traversal="dfs", include_self=False)

    def get_generation(self, generation: int) -> List[Node]:
        """Get all nodes exactly ``generation`` levels below this node.

        Args:
            generation: Levels below this node; 0 is the node itself.

        Returns:
            The nodes at that level in diagram order, or an empty list if the
            subtree is not that deep.

        Raises:
            ValidationError: If generation is negative.

        Example:
            ```python
            root = Node("root")
            root.new_child("a").new_child("a1")
            root.new_child("b").new_child("b1")
            [n.label for n in root.get_generation(2)]  # ["a1", "b1"]
            ```
        """
        if generation < 0:
            raise ValidationError(
                "generation must not be negative",
                context={"node": self._label, "generation": generation},
            )
        found: List[Node] = [self]
        for _ in range(generation):
            found = [child for node in found for child in node._children]
            if not found:
                break
        return found

    def max_depth(self) -> int:
        """Length of the longest path from this node down to a leaf (0 for a leaf)."""
        deepest = 0
        stack = [(self, 0)]
        while stack:
            node, level = stack.pop()
            deepest = max(deepest, level)
            stack.extend((child, level + 1) for child in node._children)
        return deepest

    def find_nodes(
        self,
        accept_node_fn: Callable[[Node], bool],
        traversal: str = "dfs",
        include_self: bool = True,
        only_first: bool = False,
    ) -> List[Node]:
        """Find nodes matching a condition using depth-first or breadth-first search.

        Args:
            accept_node_fn: Function returning True for nodes to include.
            traversal: Either 'dfs' (depth-first) or 'bfs' (breadth-first).
            include_self: If True, considers this node in the search.
            only_first: If True, stops after the first match.

        Returns:
            The matching nodes in traversal order.
        """
        queue: Deque[Node] = deque()
        found: List[Node] = []
        if include_self:
            queue.append(self)
        else:
            queue.extend(self._children)
        while queue:
            item = queue.popleft()
            if accept_node_fn(item):
                found.append(item)
                if only_first:
                    break
            if traversal == "dfs":
                queue.extendleft(reversed(item._children))
            elif traversal == "bfs":
                queue.extend(item._children)
        return found

    def collect_terminal_nodes(self) -> List[Node]:
        """Collect all leaf nodes under (or including) this node, left to right."""
        return self.find_nodes(lambda n: not n.has_children())

    def get_path(self) -> List[Node]:
        """Ordered list of nodes from the root down to this node (inclusive)."""
        path: Deque[Node] = deque()
        node: Node | None = self
        while node is not None:
            path.appendleft(node)
            node = node.parent
        return list(path)

    def is_ancestor(self, other: Node, self_is_ancestor: bool = False) -> bool:
        """Check if this node is an ancestor of another node.

        Args:
            other: The potential descendant.
            self_is_ancestor: If True, a node counts as its own ancestor.
        """
        parent = other if self_is_ancestor else other.parent
        while parent is not None:
            if parent is self:
                return True
            parent = parent.parent
        return False

    def as_string(self, delim: str = " ", multiline: bool = False) -> str:
        """Get a parenthesized representation of this subtree.

        Labels containing whitespace, parentheses or quotes are quoted (with
        backslash escapes for quotes, backslashes and line breaks), so the
        result can be parsed back with ``build_tree_from_string``.

        Example:
            ```python
            root = Node("root")
            root.new_child("child1").new_child("leaf1")
            root.new_child("child2")

            root.as_string()  # '(root (child1 leaf1) child2)'
            ```
        """
        return self._as_string(delim, multiline, 0)

    def _as_string(self, delim: str, multiline: bool, level: int) -> str:
        text = _quote(self._label)
        if not self._children:
            return text
        btwn = "\n" if multiline else ""
        result = "(" + text
        for child in self._children:
            d = ((level + 1) if multiline else 1) * delim
            result += btwn + d + child._as_string(delim, multiline, level + 1)
        return result + ")"

    def draw(self) -> str:
        """Render this node and its descendants with default options."""
        return draw(self)

    def draw_options(self, **kwargs: Any) -> str:
        """Render with options; see ``DrawOptions`` for the accepted keywords."""
        return draw(self, DrawOptions(**kwargs))

    def debug(self) -> str:
        """Describe the layout this node would get when its tree is drawn from the root."""
        return relayout(self.root).describe(self)


def _quote(label: str) -> str:
    if label and not any(c.isspace() or c in "()\"'\\" for c in label):
        return label
    escaped = label.replace("\\", "\\\\").replace('"', '\\"')
    return '"' + escaped.replace("\n", "\\n").replace("\r", "\\r") + '"'


def _rebase_when_orphaned(child: Node) -> Callable[[weakref.ReferenceType[Node]], None]:
    """Weakref callback making ``child`` a root once its parent is collected."""
    child_ref = weakref.ref(child)

    def rebase(dead_parent: weakref.ReferenceType[Node]) -> None:
        orphan = child_ref()
        if orphan is not None and orphan._parent is dead_parent:
            orphan._parent = None
            orphan._update_depths()

    return rebase
