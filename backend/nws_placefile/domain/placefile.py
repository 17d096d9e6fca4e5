"""Serialization of :class:`PlacefileDocument` into the placefile text protocol.

The output is consumed by a third-party radar viewer, so every literal
(``Title:``, ``Refresh:``, ``RefreshSeconds:``, ``Threshold:``, ``Color:``,
``Line:``, ``Polygon:``, ``End:``) has to match byte for byte. Lines are joined
with ``\\n`` and no trailing newline is added.
"""
from __future__ import annotations

from datetime import timedelta
from typing import List, Optional, Sequence, Tuple

from .errors import SerializationInvariantError
from .geometry import Point2D
from .models import Line, PlacefileDocument, Polygon


def split_refresh(refresh: timedelta) -> Tuple[int, int]:
    """Return ``(whole minutes, remaining seconds)`` of a refresh interval."""
    total_seconds = int(refresh.total_seconds())
    if total_seconds < 0:
        raise SerializationInvariantError(f"refresh interval must not be negative: {refresh}")
    return total_seconds // 60, total_seconds % 60


def _color(values: Sequence[int], sep: str) -> str:
    return sep.join(str(int(v)) for v in values)


def _escape_hover(text: str) -> str:
    return text.replace("\n", "\\n")


def _points(points: Sequence[Point2D]) -> List[str]:
    return [str(p) for p in points]


def _line_lines(line: Line, document: PlacefileDocument) -> List[str]:
    lines: List[str] = []
    color = line.color if line.color is not None else document.default_color
    if color is not None:
        lines.append(f"Color: {_color(color, ' ')}")
    header = f"Line: {line.width}, 0"
    if line.hover_text is not None:
        header += f', "{_escape_hover(line.hover_text)}"'
    lines.append(header)
    lines.extend(_points(line.points))
    lines.append("End:")
    return lines


def _polygon_lines(polygon: Polygon) -> List[str]:
    lines = [f"Polygon: {polygon.points[0]}, {_color(polygon.color, ', ')}"]
    lines.extend(_points(polygon.points))
    lines.append("End:")
    return lines


def serialize_placefile(document: Optional[PlacefileDocument]) -> str:
    """Render ``document``; ``None`` (nothing to render) gives an empty string."""
    if document is None:
        return ""
    minutes, seconds = split_refresh(document.refresh)
    lines = [f"Title: {document.title}"]
    if minutes > 0:
        lines.append(f"Refresh: {minutes}")
    if seconds > 0:
        lines.append(f"RefreshSeconds: {seconds}")
    if document.threshold > 0:
        lines.append(f"Threshold: {document.threshold}")
    if document.default_color is not None:
        lines.append(f"Color: {_color(document.default_color, ' ')}")

    for geometry in document.geometry:
        if isinstance(geometry, Line):
            lines.extend(_line_lines(geometry, document))
        elif isinstance(geometry, Polygon):
            lines.extend(_polygon_lines(geometry))
    return "\n".join(lines)
