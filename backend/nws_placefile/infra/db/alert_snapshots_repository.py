from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy import insert, select, update
from sqlalchemy.engine import Engine

from .tables import alert_snapshots_table

LATEST = "latest"


class AlertSnapshotsRepository:
    """Keeps the last fetched alerts payload in a single keyed row."""

    def __init__(self, engine: Engine, name: str = LATEST):
        if engine is None:
            raise ValueError("engine is required")
        self.engine = engine
        self.name = name

    def save(self, payload: Dict[str, Any], fetched_at: Optional[datetime] = None) -> Dict[str, int]:
        now = datetime.now(timezone.utc)
        values = {
            "fetched_at": fetched_at or now,
            "feature_count": len(payload.get("features") or []),
            "payload": json.dumps(payload),
            "updated_at": now,
        }
        with self.engine.begin() as conn:
            existing = conn.execute(
                select(alert_snapshots_table.c.name).where(alert_snapshots_table.c.name == self.name)
            ).scalar_one_or_none()
            if existing:
                conn.execute(
                    update(alert_snapshots_table)
                    .where(alert_snapshots_table.c.name == self.name)
                    .values(**values)
                )
                return {"inserted": 0, "updated": 1}
            conn.execute(insert(alert_snapshots_table).values(name=self.name, created_at=now, **values))
        return {"inserted": 1, "updated": 0}

    def load(self) -> Optional[Dict[str, Any]]:
        with self.engine.begin() as conn:
            row = conn.execute(
                select(alert_snapshots_table.c.payload).where(alert_snapshots_table.c.name == self.name)
            ).scalar_one_or_none()
        return json.loads(row) if row else None

