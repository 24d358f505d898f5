from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..contracts import ErrorCode, fail, ok
from ..services import preferences
from ..services.pipeline import NavigationSession
from .deps import get_session
from .navigation import view_response

router = APIRouter(prefix="/preferences", tags=["preferences"])


class ValuePayload(BaseModel):
    value: str


def _invalid(exc: ValueError) -> JSONResponse:
    return JSONResponse(status_code=400, content=fail(ErrorCode.INVALID_INPUT, str(exc)))


@router.get("")
def get_preferences(session: NavigationSession = Depends(get_session)):
    store = session.store
    return ok({
        "theme": preferences.get_theme(store),
        "density": preferences.get_density(store),
        "locale": preferences.get_locale(store, session.system_language),
        "environment_override": preferences.get_override(store) or "auto",
        "favorites": sorted(session.favorites.keys()),
    })


@router.put("/environment")
async def put_environment(payload: ValuePayload, session: NavigationSession = Depends(get_session)):
    """Persist the override and restart resolution from scratch."""
    try:
        view = await session.change_override(payload.value)
    except ValueError as exc:
        return _invalid(exc)
    return view_response(view)


@router.put("/locale")
async def put_locale(payload: ValuePayload, session: NavigationSession = Depends(get_session)):
    try:
        view = await session.change_locale(payload.value)
    except ValueError as exc:
        return _invalid(exc)
    return view_response(view)


@router.post("/locale/next")
async def next_locale(session: NavigationSession = Depends(get_session)):
    return view_response(await session.change_locale())


@router.post("/theme/toggle")
def toggle_theme(session: NavigationSession = Depends(get_session)):
    return ok({"theme": preferences.toggle_theme(session.store)})


@router.post("/density/toggle")
def toggle_density(session: NavigationSession = Depends(get_session)):
    return ok({"density": preferences.toggle_density(session.store)})
