"""JWKS endpoints"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from league_api.services.token_service import token_service

router = APIRouter()


@router.get("/jwks.json")
async def get_jwks():
    """
    Get JWKS (JSON Web Key Set)

    Public key resource servers use to verify access token signatures.
    """
    return JSONResponse(
        content=token_service.get_jwks(),
        headers={"Cache-Control": "public, max-age=3600"},
    )
