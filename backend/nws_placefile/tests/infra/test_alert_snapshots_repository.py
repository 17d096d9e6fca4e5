from __future__ import annotations

import pytest
from sqlalchemy import create_engine, select

from nws_placefile.infra.db.alert_snapshots_repository import AlertSnapshotsRepository
from nws_placefile.infra.db.tables import alert_snapshots_table, metadata


@pytest.fixture()
def engine(tmp_path):
    db_path = tmp_path / "snapshots.db"
    engine = create_engine(f"sqlite:///{db_path}", future=True)
    metadata.create_all(engine)
    yield engine
    metadata.drop_all(engine)


def test_load_without_snapshot_returns_none(engine):
    assert AlertSnapshotsRepository(engine).load() is None


def test_save_then_load(engine):
    repo = AlertSnapshotsRepository(engine)
    payload = {"features": [{"id": "a"}, {"id": "b"}]}
    assert repo.save(payload) == {"inserted": 1, "updated": 0}
    assert repo.load() == payload
    with engine.begin() as conn:
        count = conn.execute(select(alert_snapshots_table.c.feature_count)).scalar_one()
    assert count == 2


def test_second_save_replaces_snapshot(engine):
    repo = AlertSnapshotsRepository(engine)
    repo.save({"features": [{"id": "old"}]})
    stats = repo.save({"features": []})
    assert stats == {"inserted": 0, "updated": 1}
    assert repo.load() == {"features": []}
    with engine.begin() as conn:
        rows = conn.execute(select(alert_snapshots_table.c.name)).all()
    assert len(rows) == 1


def test_engine_is_required():
    with pytest.raises(ValueError):
        AlertSnapshotsRepository(None)
