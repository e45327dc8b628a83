"""Layered composition of windows with cell-level change tracking.

A ``Container`` paints its windows in order into a sparse
``{Point: cell}`` buffer.  Each ``refresh`` rebuilds that buffer and records
which positions are new or differ from the previous refresh, so a front end
only has to repaint those cells.
"""

from __future__ import annotations

import copy
import logging
import os
from typing import Generic, Protocol, TypeVar

from pi.compositor.point import Point
from pi.compositor.window import Window

T = TypeVar("T")

logger = logging.getLogger(__name__)

__all__ = ["Container", "TextContainer", "Writer"]

_MISSING = object()


class Writer(Protocol):
    """Anything ``draw`` can write rendered rows to (a file, a terminal)."""

    def write(self, data: str) -> object: ...


# ---------------------------------------------------------------------------
# Container
# ---------------------------------------------------------------------------


class Container(Generic[T]):
    """Holds windows and composites them according to their position.

    Parameters
    ----------
    default:
        Cell used to fill positions no window covers when materializing.
        ``None`` means callers must pass an explicit default.
    """

    def __init__(self, default: T | None = None) -> None:
        self.windows: list[Window[T]] = []
        self.default = default
        self._buffer: dict[Point, T] = {}
        self._changed: list[Point] = []
        self._draw_log_path: str = os.environ.get("PI_COMPOSITOR_DRAW_LOG", "")

    # ------------------------------------------------------------------
    # Window management
    # ------------------------------------------------------------------

    def add_win(self, win: Window[T]) -> None:
        """Add *win* on top of every window already in the container."""
        self.windows.append(win)

    def remove_win(self, win: Window[T]) -> None:
        """Remove *win* from the container (no-op if absent)."""
        try:
            self.windows.remove(win)
        except ValueError:
            pass

    def clear(self) -> None:
        """Remove all windows.  The buffer keeps its state until ``refresh``."""
        self.windows.clear()

    # ------------------------------------------------------------------
    # Refresh / diff
    # ------------------------------------------------------------------

    def changed(self) -> list[Point]:
        """Positions that changed in the last ``refresh``, in discovery order."""
        return list(self._changed)

    def get_buffer(self) -> dict[Point, T]:
        """Return a copy of the composited buffer."""
        return {pos: copy.copy(cell) for pos, cell in self._buffer.items()}

    def refresh(self) -> None:
        """Redraw every window into a new buffer and record what changed.

        Later windows overwrite earlier ones.  A position is reported once,
        in the order it was first painted, when its final value is new or
        differs from the value committed by the previous refresh.  Positions
        no window covers any more are dropped without being reported.
        """
        previous = self._buffer
        buffer: dict[Point, T] = {}
        cell_count = 0

        # Overwriting a key keeps its first insertion slot.
        for win in self.windows:
            for pos, cell in win.cells():
                cell_count += 1
                buffer[pos] = copy.copy(cell)

        changed: list[Point] = []
        for pos, cell in buffer.items():
            prev = previous.get(pos, _MISSING)
            if prev is _MISSING or prev != cell:
                changed.append(pos)

        self._buffer = buffer
        self._changed = changed
        logger.debug(
            "refresh: %d windows, %d cells, %d positions, %d changed",
            len(self.windows),
            cell_count,
            len(buffer),
            len(changed),
        )

    # ------------------------------------------------------------------
    # Materialization
    # ------------------------------------------------------------------

    def _fill(self, default: object) -> T:
        if default is not _MISSING:
            return default  # type: ignore[return-value]
        if self.default is not None:
            return self.default
        raise ValueError(
            "no default cell: pass default= or construct the container with one"
        )

    def materialize(
        self, width: int, height: int, default: object = _MISSING
    ) -> list[list[T]]:
        """Return the cells from (0, 0) up to (*width*, *height*) as rows.

        Positions with no stored value get *default*, or the container's
        ``default`` when *default* is omitted.
        """
        fill = self._fill(default)
        rows: list[list[T]] = []
        for y in range(height):
            row: list[T] = []
            for x in range(width):
                cell = self._buffer.get(Point(x, y), fill)
                row.append(copy.copy(cell))
            rows.append(row)
        return rows

    def _render_rows(
        self, width: int, height: int, default: object
    ) -> list[str]:
        return [
            "".join(str(cell) for cell in row) + "\n"
            for row in self.materialize(width, height, default)
        ]

    def to_string(self, width: int, height: int, default: object = _MISSING) -> str:
        """Render ``materialize(width, height, default)`` as newline-terminated rows."""
        return "".join(self._render_rows(width, height, default))

    def draw(
        self, out: Writer, width: int, height: int, default: object = _MISSING
    ) -> None:
        """Write the rendered rows to *out*, one ``write`` call per row.

        When ``PI_COMPOSITOR_DRAW_LOG`` was set at construction, the frame is
        also appended to that file.
        """
        lines = self._render_rows(width, height, default)
        for line in lines:
            out.write(line)

        if self._draw_log_path:
            frame = "".join(lines)
            try:
                with open(self._draw_log_path, "a") as f:
                    f.write(frame)
            except OSError as exc:
                logger.warning(
                    "could not append to draw log %s: %s", self._draw_log_path, exc
                )


class TextContainer(Container[str]):
    """A container of character cells that fills gaps with spaces.

    The fill is a space rather than NUL so rendered frames print as
    blank cells.
    """

    def __init__(self, default: str = " ") -> None:
        super().__init__(default)
