from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from .errors import MalformedGeometryError
from .geometry import Point2D
from .models import AlertFeature, Line, PlacefileDocument, PlacefileOptions
from .styling import style_alert

logger = logging.getLogger(__name__)

TITLE_PREFIX = "NWS Active Warnings"


def default_title(now: Optional[datetime] = None) -> str:
    now = now or datetime.now(timezone.utc)
    stamp = now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
    return f"{TITLE_PREFIX} {stamp}"


def parse_features(raw_alerts: Optional[dict]) -> Optional[List[AlertFeature]]:
    """Decode the feed's ``features`` array; ``None`` when there is nothing to render."""
    if not isinstance(raw_alerts, dict) or not raw_alerts:
        return None
    features = raw_alerts.get("features")
    if not isinstance(features, list):
        return None
    return [AlertFeature.from_geojson(item) for item in features if isinstance(item, dict)]


def centroid(total: Point2D, count: int) -> Point2D:
    return Point2D(total.x / count, total.y / count)


def feature_line(feature: AlertFeature) -> Line:
    points = feature.flattened_points()
    total = Point2D()
    for point in points:
        total.add(point)
    # not emitted yet; kept for point markers
    logger.debug("[builder] %s centroid=%s", feature.properties.event, centroid(total, len(points)))
    style = style_alert(feature.properties)
    return Line(width=style.width, color=style.color, hover_text=style.hover_text, points=points)


def build_lines(features: Iterable[AlertFeature]) -> List[Line]:
    lines: List[Line] = []
    skipped = 0
    for feature in features:
        if not feature.has_geometry:
            continue
        try:
            lines.append(feature_line(feature))
        except MalformedGeometryError as exc:
            skipped += 1
            logger.warning("[builder] skipping feature: %s", exc)
    if skipped:
        logger.info("[builder] built=%d skipped_malformed=%d", len(lines), skipped)
    return lines


def build_placefile(
    raw_alerts: Optional[dict],
    options: Optional[PlacefileOptions] = None,
    *,
    now: Optional[datetime] = None,
) -> Optional[PlacefileDocument]:
    """Turn a raw feed payload into a placefile document.

    Returns ``None`` when the payload is empty or has no ``features`` list,
    which callers render as an empty document. A payload with an empty
    ``features`` list still yields a document (headers only).
    """
    features = parse_features(raw_alerts)
    if features is None:
        return None
    options = options or PlacefileOptions()
    return PlacefileDocument(
        title=options.title if options.title is not None else default_title(now),
        refresh=options.refresh,
        threshold=options.threshold,
        default_color=options.default_color,
        geometry=build_lines(features),
    )
