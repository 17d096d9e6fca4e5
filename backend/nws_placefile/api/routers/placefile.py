from __future__ import annotations

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse, Response

from nws_placefile.api.deps import get_refresh_state
from nws_placefile.services.refresh_scheduler import RefreshState

router = APIRouter(tags=["placefile"])

NOT_READY_STATUS = 300


def _to_iso(dt: Optional[datetime]) -> Optional[str]:
    return dt.isoformat() if dt else None


@router.get("/health")
def health(state: RefreshState = Depends(get_refresh_state)):
    return {
        "ready": state.ready,
        "locked": state.locked,
        "last_fetch_at": _to_iso(state.last_fetch_at),
        "cache_valid_until": _to_iso(state.cache_valid_until),
    }


@router.get("/{path:path}")
def get_placefile(path: str, state: RefreshState = Depends(get_refresh_state)):
    """Serve the latest placefile on any path; 300 until the first document exists."""
    document = state.latest_document
    if document == "":
        return Response(status_code=NOT_READY_STATUS)
    return PlainTextResponse(document)
