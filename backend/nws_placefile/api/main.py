from __future__ import annotations

from typing import Optional

from fastapi import FastAPI

from nws_placefile.api.routers import placefile
from nws_placefile.services.refresh_scheduler import RefreshState


def create_app(state: Optional[RefreshState] = None) -> FastAPI:
    app = FastAPI(title="NWS Placefile", version="0.1.0")
    app.state.refresh_state = state if state is not None else RefreshState()
    app.include_router(placefile.router)
    return app
