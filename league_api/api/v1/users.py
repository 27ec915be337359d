"""User endpoints"""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Query

from league_api.core.config import settings
from league_api.core.dependencies import DBSession, ReadScope, RendererDep, WriteScope
from league_api.schemas.user import UserParams
from league_api.services.user_service import user_service

router = APIRouter()

JSONBody = Annotated[dict[str, Any] | None, Body()]


@router.get("", dependencies=[ReadScope])
async def list_users(
    db: DBSession,
    renderer: RendererDep,
    page: Annotated[int | None, Query(ge=1)] = None,
    per_page: Annotated[int | None, Query(ge=1)] = None,
):
    """
    List users

    Results are paginated only when both page and per_page are given.
    """
    users = await user_service.list_users(db, page=page, per_page=per_page)

    options = {}
    if page is not None and per_page is not None:
        options["meta"] = {"page": page, "perPage": min(per_page, settings.max_per_page)}

    return renderer.render_collection(users, options)


@router.post("", status_code=201)
async def create_user(db: DBSession, renderer: RendererDep, payload: JSONBody = None):
    """Register a new user, no token required"""
    params = UserParams.from_payload(payload, model=user_service.human_name)
    user = await user_service.create_user(db, params)
    return renderer.render_created(user)


@router.get("/{user_id}", dependencies=[ReadScope])
async def show_user(user_id: str, db: DBSession, renderer: RendererDep):
    user = await user_service.find(db, user_id)
    return renderer.render_object(user)


@router.put("/{user_id}", dependencies=[WriteScope])
@router.patch("/{user_id}", dependencies=[WriteScope])
async def update_user(user_id: str, db: DBSession, renderer: RendererDep, payload: JSONBody = None):
    """Update user attributes; password rules apply only when a password is sent"""
    user = await user_service.find(db, user_id)
    params = UserParams.from_payload(payload, model=user_service.human_name)
    user = await user_service.update_user(db, user.id, params)
    return renderer.render_object(user)


@router.delete("/{user_id}", status_code=204, dependencies=[WriteScope])
async def delete_user(user_id: str, db: DBSession, renderer: RendererDep):
    await user_service.delete_user(db, user_id)
    return renderer.render_deleted()
