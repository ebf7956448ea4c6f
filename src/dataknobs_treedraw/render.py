"""Render a tree as a box-drawing diagram.

Rendering runs in two passes over the tree:

1. **Relayout** (``layout.relayout``) assigns every node its row, sibling
   rank, anchor column and lineage.
2. **Composite** builds one fixed width row per node: continuation bars for
   ancestors that still have siblings below, the node's connector and label
   at its anchor, and the padding's fill character everywhere else.

An optional third pass right-aligns labels by stretching connectors.

Example:
    ```python
    from dataknobs_treedraw import DrawOptions, Node, draw

    root = Node("root")
    root.new_child("child1")
    root.new_child("child2").new_child("grandchild1")

    print(draw(root, DrawOptions(border=True)))
    ```
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, fields
from typing import TYPE_CHECKING, Any, Dict, List

from dataknobs_treedraw.canvas import ELBOW, HBAR, TEE, VBAR, Row, bottom_rule, ruler, top_rule
from dataknobs_treedraw.exceptions import ConfigurationError, ValidationError
from dataknobs_treedraw.layout import NodeLayout, TreeLayout, relayout
from dataknobs_treedraw.styles import fill_char, split_cells, style_wrappers

if TYPE_CHECKING:
    from dataknobs_treedraw.tree import Node

logger = logging.getLogger(__name__)

BORDER_MARGIN = 2


@dataclass
class DrawOptions:
    """Options for ``draw``. All options are independent and combinable.

    Implements the dataknobs ``Serializable`` protocol, so options round-trip
    through ``dataknobs_common.serialization.serialize`` and ``deserialize``.

    Attributes:
        border: Frame the diagram with box-drawing rules.
        debug: Append a column ruler below the diagram.
        padding: Padding unit applied to every node before drawing. Empty
            keeps each node's own padding. Note that this persists on the
            nodes after the render.
        align_right: Stretch connectors so that every label below the root
            ends on the same column.
        max_label_width: Truncate labels wider than this many cells.
    """

    border: bool = False
    debug: bool = False
    padding: str = ""
    align_right: bool = False
    max_label_width: int | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.padding, str):
            raise ValidationError("padding must be a string", context={"padding": self.padding})
        if self.max_label_width is not None and (
            isinstance(self.max_label_width, bool)
            or not isinstance(self.max_label_width, int)
            or self.max_label_width < 1
        ):
            raise ValidationError(
                "max_label_width must be a positive integer",
                context={"max_label_width": self.max_label_width},
            )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> DrawOptions:
        """Create options from a dictionary, e.g. a loaded YAML or JSON file.

        Raises:
            ConfigurationError: If the dictionary has unknown keys or invalid values.
        """
        if not isinstance(data, dict):
            raise ConfigurationError(
                "draw options must be a mapping", context={"type": type(data).__name__}
            )
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError(
                f"unknown draw options: {', '.join(unknown)}",
                context={"unknown": unknown, "known": sorted(known)},
            )
        for name in ("border", "debug", "align_right"):
            if name in data and not isinstance(data[name], bool):
                raise ConfigurationError(
                    f"draw option '{name}' must be true or false",
                    context={"option": name, "value": data[name]},
                )
        try:
            return cls(**data)
        except ValidationError as e:
            raise ConfigurationError(str(e), context=e.context) from e


def draw(node: Node, options: DrawOptions | None = None) -> str:
    """Render ``node`` and its descendants, treating ``node`` as the root.

    Args:
        node: The render root.
        options: Draw options; defaults to an unbordered, undecorated diagram.

    Returns:
        The diagram. Every row, including the last, ends with a newline.
        Rows are padded with the fill character to a common width.

    Note:
        Not safe to call concurrently with mutations of the same tree.
    """
    options = options or DrawOptions()
    if options.padding:
        node.set_padding_all(options.padding)
    layout = _layout(node, options)
    width = _canvas_width(layout, options)
    align_edge = width - 1 if options.border else width

    lines: List[str] = []
    if options.border:
        lines.append(top_rule(width))
    for entry in layout:
        lines.append(_composite_row(entry, width, options, align_edge))
    if options.border:
        lines.append(bottom_rule(width))

    rendering = "".join(line + "\n" for line in lines)
    if options.debug:
        rendering += ruler(width)
    logger.debug("Rendered %r: %d rows, canvas width %d", node.label, len(layout), width)
    return rendering


def draw_options(node: Node, **kwargs: Any) -> str:
    """Render with options given as keywords, e.g. ``draw_options(root, border=True)``."""
    return draw(node, DrawOptions(**kwargs))


def canvas_width(node: Node, options: DrawOptions | None = None) -> int:
    """Index of the last column ``draw(node, options)`` would produce.

    Unlike ``draw``, this does not apply a padding override.
    """
    options = options or DrawOptions()
    return _canvas_width(_layout(node, options), options)


def _layout(node: Node, options: DrawOptions) -> TreeLayout:
    return relayout(
        node,
        base_column=BORDER_MARGIN if options.border else 0,
        max_label_width=options.max_label_width,
    )


def _canvas_width(layout: TreeLayout, options: DrawOptions) -> int:
    width = layout.canvas_width()
    if options.border:
        # the shifted content already holds the left margin; add the right bar
        width += 1
    return width


def _decorator(entry: NodeLayout, run: int) -> str:
    if entry.is_root:
        return ""
    connector = ELBOW if entry.is_last_sibling else TEE
    return connector + HBAR * run + " "


def _composite_row(entry: NodeLayout, width: int, options: DrawOptions, align_edge: int) -> str:
    row = Row(width)
    if options.border:
        row.set_cell(0, VBAR, override=True)
        row.set_cell(width, VBAR, override=True)
    for ancestor in entry.lineage:
        if not ancestor.is_root and not ancestor.is_last_sibling:
            row.set_cell(ancestor.anchor, VBAR)

    run = entry.padding_width - 1
    if options.align_right and not entry.is_root:
        run = max(run, align_edge - entry.anchor - entry.label_width - 1)

    label_cells = split_cells(entry.label)
    if entry.node.is_styled and label_cells:
        prefix, suffix = style_wrappers(entry.node.styles)
        label_cells[0] = prefix + label_cells[0]
        label_cells[-1] = label_cells[-1] + suffix
    row.write(entry.anchor, split_cells(_decorator(entry, run)) + label_cells)
    row.fill(fill_char(entry.node.padding))
    return str(row)
