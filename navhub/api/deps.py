from __future__ import annotations

from fastapi import Request

from ..services.pipeline import NavigationSession, build_session
from ..settings.config import settings


def get_session(request: Request) -> NavigationSession:
    """One navigation session per application instance, created on first use."""
    state = request.app.state
    session = getattr(state, "navigation_session", None)
    if session is None:
        session, http_client = build_session(settings, transport=getattr(state, "http_transport", None))
        state.navigation_session = session
        state.http_client = http_client
    return session
