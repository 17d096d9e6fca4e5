from __future__ import annotations

from fastapi import HTTPException, Request

from nws_placefile.services.refresh_scheduler import RefreshState


def get_refresh_state(request: Request) -> RefreshState:
    state = getattr(request.app.state, "refresh_state", None)
    if state is None:
        raise HTTPException(status_code=500, detail="Refresh state not configured")
    return state
