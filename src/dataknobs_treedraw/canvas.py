"""Fixed width character rows and the rules drawn around them."""

from __future__ import annotations

from typing import Iterable, List

VBAR = "│"
HBAR = "─"
TEE = "├"
ELBOW = "└"
TOP_LEFT = "┌"
TOP_RIGHT = "┐"
BOTTOM_LEFT = "└"
BOTTOM_RIGHT = "┘"

RULER_STEP = 5


class Row:
    """One diagram row of ``width + 1`` cells.

    A cell holds the text for one visible column. Empty strings mark cells
    covered by the wide character to their left. Cells are write-once
    unless written with ``override``.
    """

    def __init__(self, width: int):
        self.width = width
        self._cells: List[str | None] = [None] * (width + 1)

    def set_cell(self, column: int, text: str, override: bool = False) -> None:
        if 0 <= column <= self.width and (override or self._cells[column] is None):
            self._cells[column] = text

    def write(self, column: int, cells: Iterable[str]) -> None:
        """Write consecutive cells starting at column, clipping at the right edge."""
        for offset, cell in enumerate(cells):
            self.set_cell(column + offset, cell)

    def fill(self, text: str) -> None:
        """Put text in every cell not yet written."""
        self._cells = [text if cell is None else cell for cell in self._cells]

    def __str__(self) -> str:
        return "".join(cell or "" for cell in self._cells)


def top_rule(width: int) -> str:
    return TOP_LEFT + HBAR * (width - 1) + TOP_RIGHT


def bottom_rule(width: int) -> str:
    return BOTTOM_LEFT + HBAR * (width - 1) + BOTTOM_RIGHT


def ruler(width: int) -> str:
    """Debug ruler marking every fifth column, with column numbers beneath.

    Multi-digit numbers swallow the filler after them so each number starts
    under its tick mark.
    """
    ticks = "".join("|" if i % RULER_STEP == 0 else "." for i in range(width + 1))
    labels: List[str] = []
    skip = 0
    for i in range(width + 1):
        if i % RULER_STEP == 0:
            label = str(i)
            skip += len(label) - 1
            labels.append(label)
        elif skip == 0:
            labels.append(" ")
        else:
            skip -= 1
    return "\n" + ticks + "\n" + "".join(labels) + "\n"
