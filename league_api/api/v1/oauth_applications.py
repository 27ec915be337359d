"""OAuth application management endpoints"""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends

from league_api.core.dependencies import (
    AdminScope,
    DBSession,
    RendererDep,
    authorize_application_registration,
)
from league_api.schemas.oauth import OAuthApplicationParams
from league_api.serializers.oauth_application import CreatedOAuthApplicationSerializer
from league_api.services.oauth_application_service import oauth_application_service

router = APIRouter()

JSONBody = Annotated[dict[str, Any] | None, Body()]


@router.get("", dependencies=[AdminScope])
async def list_applications(db: DBSession, renderer: RendererDep):
    applications = await oauth_application_service.list_applications(db)
    return renderer.render_collection(applications)


@router.post("", status_code=201, dependencies=[Depends(authorize_application_registration)])
async def create_application(db: DBSession, renderer: RendererDep, payload: JSONBody = None):
    """
    Register a client application

    The response carries the plaintext secret; it cannot be retrieved again.
    """
    params = OAuthApplicationParams.from_payload(payload, model=oauth_application_service.human_name)
    application = await oauth_application_service.create_application(db, params)
    return renderer.render_created(application, {"serializer": CreatedOAuthApplicationSerializer})


@router.get("/{application_id}", dependencies=[AdminScope])
async def show_application(application_id: str, db: DBSession, renderer: RendererDep):
    application = await oauth_application_service.find(db, application_id)
    return renderer.render_object(application)


@router.put("/{application_id}", dependencies=[AdminScope])
@router.patch("/{application_id}", dependencies=[AdminScope])
async def update_application(
    application_id: str,
    db: DBSession,
    renderer: RendererDep,
    payload: JSONBody = None,
):
    application = await oauth_application_service.find(db, application_id)
    params = OAuthApplicationParams.from_payload(payload, model=oauth_application_service.human_name)
    application = await oauth_application_service.update_application(db, application.id, params)
    return renderer.render_object(application)


@router.delete("/{application_id}", status_code=204, dependencies=[AdminScope])
async def delete_application(application_id: str, db: DBSession, renderer: RendererDep):
    await oauth_application_service.delete_application(db, application_id)
    return renderer.render_deleted()
