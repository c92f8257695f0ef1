"""
Controlador de perfiles - Alta de cuenta y perfil del usuario
"""

from fastapi import APIRouter, HTTPException, status

from zentype.core.dependencies import CurrentIdentity, Database
from zentype.core.exceptions import ProfileNotFoundError
from zentype.models.profile import Profile, ProfileCreate, ProfileResponse
from zentype.services.profile_service import ProfileService

router = APIRouter(prefix="/profile", tags=["profile"])


def _to_response(profile: Profile) -> ProfileResponse:
    return ProfileResponse(
        id=profile.id,
        username=profile.username,
        email=profile.email,
        stats=profile.stats,
        created_at=profile.created_at
    )


@router.post("", response_model=ProfileResponse, status_code=status.HTTP_201_CREATED)
async def create_profile(
    request: ProfileCreate,
    identity: CurrentIdentity,
    database: Database
):
    """
    Crea el perfil del usuario autenticado con las stats en cero.

    El email sale del token; si no se manda `username` se usa la parte
    local del email.
    """
    profile_service = ProfileService(database.get_db())
    profile = await profile_service.create_profile(
        user_id=identity.user_id,
        email=identity.email,
        username=request.username
    )
    return _to_response(profile)


@router.get("/me", response_model=ProfileResponse)
async def get_my_profile(identity: CurrentIdentity, database: Database):
    """
    Devuelve el perfil (y las stats) del usuario autenticado.
    """
    profile_service = ProfileService(database.get_db())

    try:
        profile = await profile_service.get_profile(identity.user_id)
    except ProfileNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )

    return _to_response(profile)
