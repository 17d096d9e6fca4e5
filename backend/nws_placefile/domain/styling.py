from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict

from .models import RGB, AlertProperties

# Stroke colours per NWS event category
COLOR_TABLE: Dict[str, RGB] = {
    "Tornado Warning": (255, 0, 0),
    "Severe Thunderstorm Warning": (255, 255, 0),
    "Flood Warning": (0, 255, 0),
    "Special Weather Statement": (255, 255, 204),
}

DEFAULT_COLOR: RGB = (255, 255, 255)
PDS_COLOR: RGB = (255, 0, 100)
TORNADO_EMERGENCY_COLOR: RGB = (255, 0, 255)

BASE_WIDTH = 4
CONFIRMED_TORNADO_WIDTH = 8

PDS_PATTERN = re.compile(r"particularly dangerous situation|large and extremely dangerous", re.IGNORECASE)
TORNADO_EMERGENCY_MARKER = "TORNADO EMERGENCY"
CONFIRMED_TORNADO_MARKER = "confirmed tornado"


@dataclass(frozen=True)
class AlertStyle:
    color: RGB
    width: int
    hover_text: str


def alert_width(properties: AlertProperties) -> int:
    if (
        properties.event.startswith("Tornado")
        and properties.certainty == "Observed"
        and CONFIRMED_TORNADO_MARKER in properties.description
    ):
        return CONFIRMED_TORNADO_WIDTH
    return BASE_WIDTH


def alert_color(properties: AlertProperties) -> RGB:
    # PDS wording outranks the tornado emergency marker
    if PDS_PATTERN.search(properties.description):
        return PDS_COLOR
    if TORNADO_EMERGENCY_MARKER in properties.description:
        return TORNADO_EMERGENCY_COLOR
    return COLOR_TABLE.get(properties.event, DEFAULT_COLOR)


def hover_text(properties: AlertProperties) -> str:
    return f"{properties.headline}\n\n{properties.description}"


def style_alert(properties: AlertProperties) -> AlertStyle:
    return AlertStyle(
        color=alert_color(properties),
        width=alert_width(properties),
        hover_text=hover_text(properties),
    )
