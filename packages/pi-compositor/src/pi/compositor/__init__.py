"""pi-compositor: layered text windows with cell-level change tracking."""

from pi.compositor.container import Container, TextContainer, Writer
from pi.compositor.point import Point
from pi.compositor.window import TextWindow, Window

__all__ = [
    # Geometry
    "Point",
    # Windows
    "TextWindow",
    "Window",
    # Composition
    "Container",
    "TextContainer",
    "Writer",
]
