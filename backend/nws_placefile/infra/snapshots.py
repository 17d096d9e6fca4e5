from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Protocol, Union

from sqlalchemy import create_engine

from nws_placefile.infra.db.alert_snapshots_repository import AlertSnapshotsRepository
from nws_placefile.infra.db.tables import metadata

logger = logging.getLogger(__name__)

DEFAULT_SNAPSHOT_PATH = Path(os.getenv("ALERTS_SNAPSHOT_PATH", "alerts.json"))


class SnapshotStore(Protocol):
    def save(self, payload: Dict[str, Any]) -> Any:
        raise NotImplementedError

    def load(self) -> Optional[Dict[str, Any]]:
        raise NotImplementedError


class JsonFileSnapshotStore:
    def __init__(self, path: Union[str, Path] = DEFAULT_SNAPSHOT_PATH):
        self.path = Path(path)

    def save(self, payload: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_name(self.path.name + ".tmp")
        tmp.write_text(json.dumps(payload), encoding="utf-8")
        tmp.replace(self.path)

    def load(self) -> Optional[Dict[str, Any]]:
        if not self.path.exists():
            return None
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
        except ValueError as exc:
            logger.warning("[snapshots] ignoring unreadable snapshot %s: %s", self.path, exc)
            return None
        return payload if isinstance(payload, dict) else None


def resolve_snapshot_store(
    *,
    database_url: Optional[str] = None,
    path: Optional[Union[str, Path]] = None,
) -> SnapshotStore:
    """Pick the database-backed store when a URL is configured, else the JSON file."""
    if database_url is None:
        database_url = os.getenv("DATABASE_URL")
    if database_url:
        engine = create_engine(database_url, future=True)
        metadata.create_all(engine)
        return AlertSnapshotsRepository(engine)
    return JsonFileSnapshotStore(path or DEFAULT_SNAPSHOT_PATH)
