from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from ..contracts import ApiMetaModel, ErrorCode, fail, ok
from ..services.i18n import pick_locale
from ..services.links.types import LinkGroup, LinkItem
from ..services.pipeline import NavigationSession, NavigationView
from .deps import get_session

router = APIRouter(tags=["navigation"])
logger = logging.getLogger(__name__)


class ToggleFavoritePayload(BaseModel):
    key: str = Field(..., max_length=2048)


def _link_payload(link: LinkItem, view: NavigationView) -> Dict[str, Any]:
    name = pick_locale(link.name, link.name_en, view.locale)
    desc = pick_locale(link.desc, link.desc_en, view.locale)
    return {
        **link.model_dump(),
        "tags": link.tag_list,
        "identity_key": link.identity_key,
        "display_name": name,
        "display_desc": desc,
        "tooltip": desc or name,
        "is_favorite": link.identity_key in view.favorite_keys,
    }


def _group_payload(group: LinkGroup, view: NavigationView) -> Dict[str, Any]:
    return {
        "title": group.title,
        "title_en": group.title_en,
        "label": pick_locale(group.title, group.title_en, view.locale),
        "is_favorites": group is view.favorites_group,
        "links": [_link_payload(link, view) for link in group.links],
    }


def view_response(view: NavigationView) -> Any:
    meta = ApiMetaModel(
        environment=view.environment.value if view.environment else None,
        locale=view.locale,
    )
    if view.error is not None:
        return JSONResponse(
            status_code=502,
            content=fail(
                ErrorCode.CONFIG_FETCH_ERROR,
                view.status,
                details=view.error.to_details(),
                meta=meta,
            ),
        )
    return ok(
        {
            "environment": view.environment.value if view.environment else None,
            "locale": view.locale,
            "status": view.status,
            "groups": [_group_payload(g, view) for g in view.groups],
        },
        meta=meta,
    )


@router.get("/navigation")
async def get_navigation(session: NavigationSession = Depends(get_session)):
    return view_response(await session.view())


@router.post("/navigation/reload")
async def reload_navigation(session: NavigationSession = Depends(get_session)):
    return view_response(await session.reload())


@router.post("/favorites/toggle")
async def toggle_favorite(
    payload: ToggleFavoritePayload,
    session: NavigationSession = Depends(get_session),
):
    return view_response(await session.toggle_favorite(payload.key))
