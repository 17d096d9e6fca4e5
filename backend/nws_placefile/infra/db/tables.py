from __future__ import annotations

from sqlalchemy import Column, DateTime, Integer, MetaData, Table, Text

metadata = MetaData()

alert_snapshots_table = Table(
    "alert_snapshots",
    metadata,
    Column("name", Text, primary_key=True),
    Column("fetched_at", DateTime(timezone=True), nullable=False),
    Column("feature_count", Integer, nullable=False),
    Column("payload", Text, nullable=False),
    Column("created_at", DateTime(timezone=True)),
    Column("updated_at", DateTime(timezone=True)),
)
