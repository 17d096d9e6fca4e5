from __future__ import annotations

import math
from dataclasses import dataclass


def format_number(value: float) -> str:
    """Render a coordinate the way the plotting tool expects: ``-97`` not ``-97.0``."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return repr(value) if isinstance(value, float) else str(value)


@dataclass
class Point2D:
    x: float = 0.0
    y: float = 0.0

    def add(self, other: "Point2D") -> "Point2D":
        self.x += other.x
        self.y += other.y
        return self

    def sub(self, other: "Point2D") -> "Point2D":
        self.x -= other.x
        self.y -= other.y
        return self

    def length(self) -> float:
        return math.hypot(self.x, self.y)

    def __str__(self) -> str:
        return f"{format_number(self.x)},{format_number(self.y)}"
