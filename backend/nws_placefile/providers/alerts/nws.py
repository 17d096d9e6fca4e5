from __future__ import annotations

import os
from typing import List, Optional, Sequence

from nws_placefile.infra.nws.alerts_client import NwsAlertsClient

from .base import AlertsProvider

DEFAULT_EVENTS: List[str] = [
    name.strip()
    for name in os.getenv(
        "NWS_ALERT_EVENTS",
        "Severe Thunderstorm Warning,Tornado Warning,Flood Warning,Special Weather Statement",
    ).split(",")
    if name.strip()
]


class NwsAlertsProvider(AlertsProvider):
    def __init__(self, client: Optional[NwsAlertsClient] = None, events: Optional[Sequence[str]] = None):
        self.client = client or NwsAlertsClient()
        self.events = list(events) if events is not None else list(DEFAULT_EVENTS)

    def fetch_active(self) -> dict:
        return self.client.fetch_active(self.events)
