"""Positioned grids of cells that a ``Container`` layers together.

A ``Window`` holds its cells row-major in ``data``.  Rows may have different
lengths; a short row simply covers fewer positions once composited.
``TextWindow`` specialises the grid to character cells and adds ``write``
for appending text line by line.
"""

from __future__ import annotations

from typing import Generic, Iterable, Iterator, TypeVar

import grapheme

from pi.compositor.point import Point

T = TypeVar("T")

__all__ = ["Window", "TextWindow"]


class Window(Generic[T]):
    """A grid of cells whose top-left corner sits at ``top_left``."""

    def __init__(
        self,
        top_left: Point,
        data: Iterable[Iterable[T]] | None = None,
    ) -> None:
        self.top_left = top_left
        self.data: list[list[T]] = [list(row) for row in data] if data is not None else []

    def __repr__(self) -> str:
        return f"{type(self).__name__}(top_left={self.top_left!r}, rows={len(self.data)})"

    def __str__(self) -> str:
        return "".join(
            "".join(str(cell) for cell in row) + "\n" for row in self.data
        )

    def add_row(self, cells: Iterable[T]) -> None:
        """Append a new row after the current last row."""
        self.data.append(list(cells))

    def cells(self) -> Iterator[tuple[Point, T]]:
        """Yield ``(absolute position, cell)`` pairs, row by row, left to right."""
        for y, row in enumerate(self.data):
            for x, cell in enumerate(row):
                yield self.top_left + Point(x, y), cell

    def outline_with(self, cell: T) -> None:
        """Draw an outline of *cell* around the window.

        Each row gains *cell* at both ends, then a full row of *cell* is added
        above and below, sized to the new first and last rows.  If the data is
        not rectangular, the outline won't be either.

        Raises ``ValueError`` if the window has no rows.
        """
        if not self.data:
            raise ValueError("cannot outline an empty window")

        for row in self.data:
            row.insert(0, cell)
            row.append(cell)

        first_len = len(self.data[0])
        last_len = len(self.data[-1])
        self.data.insert(0, [cell] * first_len)
        self.data.append([cell] * last_len)


def _split_lines(text: str) -> list[str]:
    # "\r" is only part of a line break when a "\n" follows it, and a
    # trailing line break ends the last line rather than opening a new one.
    lines = text.split("\n")
    last = lines.pop()
    lines = [line[:-1] if line.endswith("\r") else line for line in lines]
    if last:
        lines.append(last)
    return lines


class TextWindow(Window[str]):
    """A window of character cells, one grapheme cluster per cell."""

    def write(self, text: str) -> None:
        """Append *text* to the window.

        The first line continues the current last row; every line then opens
        a fresh empty row, so the window always ends with a row ready for the
        next ``write``.
        """
        if not self.data:
            self.data.append([])
        cur = len(self.data) - 1

        for line in _split_lines(text):
            self.data[cur].extend(grapheme.graphemes(line))
            cur += 1
            self.data.append([])
