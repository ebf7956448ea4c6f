"""Label styling and visible width measurement.

Styled labels carry terminal escape codes that occupy bytes but no columns,
and East Asian wide characters occupy two columns per character. Layout
must therefore work in *cells* (visible terminal columns) rather than string
length. Width measurement and style rendering are delegated to ``rich``.
"""

from __future__ import annotations

from typing import List, Sequence, Tuple

from rich.cells import cell_len, get_character_cell_size, set_cell_size
from rich.errors import StyleSyntaxError
from rich.style import Style

from dataknobs_treedraw.exceptions import ValidationError

ELLIPSIS = "…"

_MARKER = "\x00"


def parse_style(definition: str) -> Style:
    """Parse a rich style definition such as ``"bold red on white"``.

    Args:
        definition: The style definition string.

    Returns:
        The parsed Style.

    Raises:
        ValidationError: If the definition is empty or cannot be parsed.
    """
    if not definition or not definition.strip():
        raise ValidationError("style definition must not be empty", context={"style": definition})
    try:
        return Style.parse(definition)
    except StyleSyntaxError as e:
        raise ValidationError(
            f"invalid style definition: {definition!r}",
            context={"style": definition, "error": str(e)},
        ) from e


def apply_styles(text: str, styles: Sequence[Style]) -> str:
    """Wrap text in the escape codes of each style, innermost first."""
    for style in styles:
        text = style.render(text)
    return text


def style_wrappers(styles: Sequence[Style]) -> Tuple[str, str]:
    """The escape codes styles put before and after a text, as a pair."""
    prefix, _, suffix = apply_styles(_MARKER, styles).partition(_MARKER)
    return prefix, suffix


def visible_width(text: str) -> int:
    """Number of terminal cells the text occupies."""
    return cell_len(text)


def split_cells(text: str) -> List[str]:
    """Split text into one string per visible cell.

    Wide characters are followed by an empty continuation cell, and zero
    width characters (combining marks, joiners) ride along with the cell
    they modify, so ``len(split_cells(text)) == visible_width(text)``.
    """
    cells: List[str] = []
    pending = ""
    for char in text:
        size = get_character_cell_size(char)
        if size == 0:
            if cells:
                cells[-1] += char
            else:
                pending += char
            continue
        cells.append(pending + char)
        pending = ""
        if size == 2:
            cells.append("")
    if pending and cells:
        cells[-1] += pending
    return cells


def truncate(text: str, max_width: int | None) -> str:
    """Truncate text to at most ``max_width`` cells, marking the cut with an ellipsis."""
    if max_width is None or cell_len(text) <= max_width:
        return text
    if max_width < 1:
        raise ValidationError("max_width must be positive", context={"max_width": max_width})
    return set_cell_size(text, max_width - 1) + ELLIPSIS


def fill_char(padding: str) -> str:
    """The fill character for a padding string: its first character, or a space."""
    return padding[0] if padding else " "
