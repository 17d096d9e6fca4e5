from __future__ import annotations

from typing import Protocol


class AlertsProvider(Protocol):
    """Contract for active-alert feeds."""

    def fetch_active(self) -> dict:
        """Return the raw GeoJSON feature collection of active alerts.

        Implementations raise :class:`~nws_placefile.domain.errors.FetchError`
        on transport or protocol failures; an empty ``features`` list is a
        valid result, not an error.
        """
        raise NotImplementedError
