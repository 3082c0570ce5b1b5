"""Tourist router - FastAPI endpoints for tourist profiles and saved guides"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_admin, get_current_user, require_role
from ...database import get_db
from ...models import ROLE_TOURIST, User
from ...rate_limiter import create_rate_limiter
from ...routes.upload import presign_stored_key
from .schemas import SavedGuideResponse, SaveGuideRequest, TouristRegister, TouristResponse
from .service import TouristService

router = APIRouter(tags=["Tourists"])

rate_limit_save_guide = create_rate_limiter(limit=50, window_seconds=60, key_prefix="save_guide")

get_current_tourist = require_role(ROLE_TOURIST)


def saved_guide_response(saved) -> SavedGuideResponse:
    response = SavedGuideResponse.model_validate(saved, from_attributes=True)
    response.guide.profile_picture_presigned = presign_stored_key(response.guide.profile_picture_url)
    return response


def get_tourist_service(db: Session = Depends(get_db)) -> TouristService:
    """Dependency injection for TouristService"""
    return TouristService(db)


# ============================================================================
# PROFILES
# ============================================================================


@router.post("/register-tourist", response_model=TouristResponse, status_code=201)
async def register_tourist(
    data: TouristRegister,
    current_user: User = Depends(get_current_user),
    service: TouristService = Depends(get_tourist_service),
):
    return service.register(data, current_user)


@router.get("/my-tourist-profile", response_model=TouristResponse)
async def my_tourist_profile(
    tourist: User = Depends(get_current_tourist),
    service: TouristService = Depends(get_tourist_service),
):
    return service.get_profile(tourist)


@router.get("/get-tourists")
async def get_tourists(
    admin: User = Depends(get_current_admin),
    service: TouristService = Depends(get_tourist_service),
):
    """All tourist profiles (admin only)"""
    tourists = service.list_tourists()
    return {"tourists": [TouristResponse.model_validate(t) for t in tourists]}


# ============================================================================
# SAVED GUIDES
# ============================================================================


@router.post("/save-guide", response_model=SavedGuideResponse, status_code=201)
async def save_guide(
    data: SaveGuideRequest,
    tourist: User = Depends(get_current_tourist),
    service: TouristService = Depends(get_tourist_service),
    _: None = Depends(rate_limit_save_guide),
):
    """Add an approved guide to the tourist's saved list"""
    return saved_guide_response(service.save_guide(data.guide_id, tourist))


@router.delete("/unsave-guide")
async def unsave_guide(
    guide_id: str = Query(...),
    tourist: User = Depends(get_current_tourist),
    service: TouristService = Depends(get_tourist_service),
):
    return service.unsave_guide(guide_id, tourist)


@router.get("/get-saved-guides")
async def get_saved_guides(
    tourist: User = Depends(get_current_tourist),
    service: TouristService = Depends(get_tourist_service),
):
    """Saved guides that are still approved and active"""
    saved = service.get_saved_guides(tourist)
    return {"saved_guides": [saved_guide_response(s) for s in saved]}


__all__ = ["router"]
