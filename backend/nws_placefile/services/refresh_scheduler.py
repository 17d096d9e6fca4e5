from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from threading import Event, Lock, Thread
from typing import Any, Callable, Dict, Optional

from nws_placefile.domain.errors import FetchError
from nws_placefile.domain.models import DEFAULT_REFRESH, PlacefileOptions
from nws_placefile.domain.placefile import serialize_placefile
from nws_placefile.domain.placefile_builder import build_placefile
from nws_placefile.infra.snapshots import SnapshotStore
from nws_placefile.providers.alerts.base import AlertsProvider

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 1.0


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class RefreshState:
    """Shared between the scheduler (sole writer) and the responder (reader)."""

    last_fetch_at: Optional[datetime] = None
    cache_valid_until: Optional[datetime] = None
    locked: bool = False
    latest_document: str = ""
    latest_raw_alerts: Dict[str, Any] = field(default_factory=dict)

    @property
    def ready(self) -> bool:
        return self.latest_document != ""


class RefreshScheduler:
    """Fetch-and-rebuild loop gated by a staleness window and a single-flight lock.

    A cycle starts only when ``now >= cache_valid_until`` and no other cycle is
    in flight. Whatever the outcome, finishing a cycle stamps
    ``last_fetch_at`` and moves ``cache_valid_until`` one refresh interval
    ahead. A :class:`FetchError` is fatal: it propagates out of :meth:`tick`,
    and :meth:`run_forever` records it (or any other error a cycle raises) in
    ``fatal_error``, calls ``on_fatal`` and stops.
    """

    def __init__(
        self,
        provider: AlertsProvider,
        store: Optional[SnapshotStore] = None,
        *,
        refresh_interval: timedelta = DEFAULT_REFRESH,
        options: Optional[PlacefileOptions] = None,
        state: Optional[RefreshState] = None,
        clock: Callable[[], datetime] = _utcnow,
        on_document: Optional[Callable[[str], None]] = None,
        on_fatal: Optional[Callable[[Exception], None]] = None,
    ):
        if refresh_interval <= timedelta(0):
            raise ValueError("refresh_interval must be positive")
        self.provider = provider
        self.store = store
        self.refresh_interval = refresh_interval
        self.options = options or PlacefileOptions(refresh=refresh_interval)
        self.state = state or RefreshState()
        self.on_document = on_document
        self.on_fatal = on_fatal
        self.fatal_error: Optional[Exception] = None
        self._clock = clock
        self._lock = Lock()
        self._stop = Event()
        self._thread: Optional[Thread] = None

    def seed(self) -> bool:
        """Load the stored snapshot, if any, and render it as the current document."""
        if self.store is None:
            return False
        try:
            payload = self.store.load()
        except Exception as exc:
            logger.warning("[refresh] could not load stored snapshot: %s", exc)
            return False
        if not payload:
            return False
        try:
            document = self._render_payload(payload)
        except Exception as exc:
            logger.warning("[refresh] could not render stored snapshot: %s", exc)
            return False
        self.state.latest_raw_alerts = payload
        self.state.latest_document = document
        logger.info("[refresh] seeded from stored snapshot (%d bytes)", len(self.state.latest_document))
        return True

    def render(self) -> str:
        return self._render_payload(self.state.latest_raw_alerts)

    def _render_payload(self, payload: Dict[str, Any]) -> str:
        document = build_placefile(payload, self.options, now=self._clock())
        return serialize_placefile(document)

    def is_due(self, now: Optional[datetime] = None) -> bool:
        if self.state.locked:
            return False
        return self._is_stale(now or self._clock())

    def _is_stale(self, now: datetime) -> bool:
        until = self.state.cache_valid_until
        return until is None or now >= until

    def tick(self) -> bool:
        """Run one cycle if the cache is stale and none is in flight."""
        if not self.is_due():
            return False
        if not self._lock.acquire(blocking=False):
            return False
        # another thread may have finished a cycle since is_due()
        if not self._is_stale(self._clock()):
            self._lock.release()
            return False
        self.state.locked = True
        try:
            self._refresh()
        finally:
            finished = self._clock()
            self.state.last_fetch_at = finished
            self.state.cache_valid_until = finished + self.refresh_interval
            self.state.locked = False
            self._lock.release()
        return True

    def _refresh(self) -> None:
        try:
            raw = self.provider.fetch_active()
        except FetchError as exc:
            logger.error("[refresh] ERROR GETTING ALERTS: %s", exc)
            raise
        self.state.latest_raw_alerts = raw
        self._persist(raw)
        document = self.render()
        self.state.latest_document = document
        logger.info(
            "[refresh] features=%d document_bytes=%d",
            len(raw.get("features") or []),
            len(document),
        )
        if self.on_document is not None:
            self.on_document(document)

    def _persist(self, raw: Dict[str, Any]) -> None:
        if self.store is None:
            return
        try:
            self.store.save(raw)
        except Exception as exc:
            logger.warning("[refresh] WARNING: snapshot save failed (%s); continuing", exc)

    def _seconds_until_due(self, poll_interval: float) -> float:
        until = self.state.cache_valid_until
        if until is None:
            return 0.0
        remaining = (until - self._clock()).total_seconds()
        return max(0.0, min(poll_interval, remaining))

    def run_forever(self, poll_interval: float = DEFAULT_POLL_INTERVAL) -> None:
        self._stop.clear()
        while not self._stop.is_set():
            try:
                self.tick()
            except FetchError as exc:
                self._fail(exc)
                return
            except Exception as exc:
                logger.exception("[refresh] unexpected error in refresh cycle")
                self._fail(exc)
                return
            self._stop.wait(self._seconds_until_due(poll_interval))

    def _fail(self, exc: Exception) -> None:
        self.fatal_error = exc
        if self.on_fatal is not None:
            self.on_fatal(exc)

    def start(self, poll_interval: float = DEFAULT_POLL_INTERVAL) -> None:
        if self._thread is not None and self._thread.is_alive():
            return
        self._thread = Thread(
            target=self.run_forever,
            kwargs={"poll_interval": poll_interval},
            name="placefile-refresh",
            daemon=True,
        )
        self._thread.start()

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
