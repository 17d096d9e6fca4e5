from __future__ import annotations

import logging
import os
from typing import Optional, Sequence

import httpx

from nws_placefile.domain.errors import FetchError

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = os.getenv("NWS_USER_AGENT", "(nws-placefile, nws-placefile@example.com)")
DEFAULT_TIMEOUT = float(os.getenv("NWS_TIMEOUT_SECONDS", "30"))


class NwsAlertsClient:
    BASE_URL = "https://api.weather.gov"
    ACTIVE_PATH = "/alerts/active"

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        *,
        user_agent: str = DEFAULT_USER_AGENT,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.timeout = timeout
        self.user_agent = user_agent
        self._transport = transport

    def fetch_active(self, events: Sequence[str]) -> dict:
        params = {"event": ",".join(events)} if events else None
        headers = {"Accept": "application/geo+json", "User-Agent": self.user_agent}
        logger.info("[nws] GET %s%s events=%s", self.BASE_URL, self.ACTIVE_PATH, list(events))
        try:
            with httpx.Client(
                base_url=self.BASE_URL,
                headers=headers,
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                resp = client.get(self.ACTIVE_PATH, params=params)
                resp.raise_for_status()
                data = resp.json()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            raise FetchError(f"alerts feed answered HTTP {status}", status_code=status) from exc
        except httpx.HTTPError as exc:
            raise FetchError(f"alerts feed unreachable: {exc}") from exc
        except ValueError as exc:
            raise FetchError(f"alerts feed returned invalid JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise FetchError(f"alerts feed returned {type(data).__name__}, expected an object")
        logger.info("[nws] fetched %d features", len(data.get("features") or []))
        return data
