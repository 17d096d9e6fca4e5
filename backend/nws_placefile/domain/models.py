from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any, List, Optional, Tuple, Union

from .errors import MalformedGeometryError, SerializationInvariantError
from .geometry import Point2D

RGB = Tuple[int, int, int]
RGBA = Tuple[int, int, int, int]

DEFAULT_REFRESH = timedelta(minutes=3)
DEFAULT_THRESHOLD = 999


def rgb_to_rgba(rgb: RGB, alpha: int) -> RGBA:
    return (rgb[0], rgb[1], rgb[2], alpha)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _check_color(color: Tuple[int, ...]) -> None:
    for component in color:
        if not 0 <= component <= 255:
            raise SerializationInvariantError(f"color component out of range: {color}")


@dataclass(frozen=True)
class AlertProperties:
    event: str = ""
    certainty: str = "Unknown"
    urgency: str = "Unknown"
    severity: str = "Unknown"
    status: str = ""
    message_type: str = ""
    headline: str = ""
    description: str = ""
    area_desc: str = ""
    sent: Optional[str] = None
    effective: Optional[str] = None
    onset: Optional[str] = None
    expires: Optional[str] = None
    ends: Optional[str] = None

    @classmethod
    def from_geojson(cls, payload: dict) -> "AlertProperties":
        return cls(
            event=payload.get("event") or "",
            certainty=payload.get("certainty") or "Unknown",
            urgency=payload.get("urgency") or "Unknown",
            severity=payload.get("severity") or "Unknown",
            status=payload.get("status") or "",
            message_type=payload.get("messageType") or "",
            headline=payload.get("headline") or "",
            description=payload.get("description") or "",
            area_desc=payload.get("areaDesc") or "",
            sent=payload.get("sent"),
            effective=payload.get("effective"),
            onset=payload.get("onset"),
            expires=payload.get("expires"),
            ends=payload.get("ends"),
        )


@dataclass(frozen=True)
class AlertFeature:
    """One hazard record from the feed.

    ``rings`` keeps the GeoJSON layout: a list of rings, each a list of
    ``[lon, lat]`` pairs. ``None`` means the alert has no geometry.
    """

    properties: AlertProperties
    rings: Optional[List[List[Any]]] = None
    id: Optional[str] = None

    @classmethod
    def from_geojson(cls, payload: dict) -> "AlertFeature":
        geometry = payload.get("geometry")
        rings = geometry.get("coordinates") if isinstance(geometry, dict) else None
        return cls(
            id=payload.get("id"),
            properties=AlertProperties.from_geojson(payload.get("properties") or {}),
            rings=rings,
        )

    @property
    def has_geometry(self) -> bool:
        return self.rings is not None

    def flattened_points(self) -> List[Point2D]:
        """All rings joined into one sequence, axes swapped to (lat, lon)."""
        if not isinstance(self.rings, list) or not self.rings:
            raise MalformedGeometryError(f"feature {self.id!r} has no coordinate rings")
        points: List[Point2D] = []
        for ring in self.rings:
            if not isinstance(ring, list):
                raise MalformedGeometryError(f"feature {self.id!r} has a non-list ring")
            for pair in ring:
                if not isinstance(pair, (list, tuple)) or len(pair) < 2:
                    raise MalformedGeometryError(f"feature {self.id!r} has an invalid position {pair!r}")
                lon, lat = pair[0], pair[1]
                if not (_is_number(lon) and _is_number(lat)):
                    raise MalformedGeometryError(f"feature {self.id!r} has a non-numeric position {pair!r}")
                points.append(Point2D(lat, lon))
        if not points:
            raise MalformedGeometryError(f"feature {self.id!r} has only empty rings")
        return points


@dataclass
class Line:
    width: int
    points: List[Point2D]
    color: Optional[RGB] = None
    hover_text: Optional[str] = None

    def __post_init__(self):
        if self.width < 0:
            raise SerializationInvariantError(f"line width must be >= 0, got {self.width}")
        if self.color is not None:
            _check_color(self.color)


@dataclass
class Polygon:
    color: RGBA
    points: List[Point2D]

    def __post_init__(self):
        if not self.points:
            raise SerializationInvariantError("polygon requires at least one point")
        _check_color(self.color)


Geometry = Union[Line, Polygon]


@dataclass
class PlacefileOptions:
    """Caller-supplied document settings; ``None`` title means timestamped default."""

    title: Optional[str] = None
    refresh: timedelta = DEFAULT_REFRESH
    threshold: int = DEFAULT_THRESHOLD
    default_color: Optional[RGB] = None


@dataclass
class PlacefileDocument:
    title: str
    refresh: timedelta = DEFAULT_REFRESH
    threshold: int = DEFAULT_THRESHOLD
    default_color: Optional[RGB] = None
    geometry: List[Geometry] = field(default_factory=list)

    def __post_init__(self):
        if self.refresh < timedelta(0):
            raise SerializationInvariantError(f"refresh interval must not be negative: {self.refresh}")
        if self.default_color is not None:
            _check_color(self.default_color)
