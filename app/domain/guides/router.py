"""Guide router - FastAPI endpoints for guide profiles, discovery and admin review"""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_admin, get_current_guide, get_current_user
from ...database import get_db
from ...models import Guide, User
from ...routes.upload import presign_stored_key
from .schemas import (
    GuideAdminAction,
    GuideDetailResponse,
    GuidePublicResponse,
    GuideRegister,
    GuideResponse,
    GuideUpdate,
    MyGuideProfileResponse,
)
from .service import GuideService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Guides"])


def guide_response(guide: Guide) -> GuideResponse:
    """Full guide row with fresh links to its stored picture and verification document"""
    response = GuideResponse.model_validate(guide)
    response.profile_picture_presigned = presign_stored_key(guide.profile_picture_url)
    response.document_presigned = presign_stored_key(guide.document_url)
    return response


def public_guide_response(guide: Guide) -> GuidePublicResponse:
    response = GuidePublicResponse.model_validate(guide)
    response.profile_picture_presigned = presign_stored_key(guide.profile_picture_url)
    return response


def get_guide_service(db: Session = Depends(get_db)) -> GuideService:
    """Dependency injection for GuideService"""
    return GuideService(db)


# ============================================================================
# GUIDE SELF-SERVICE
# ============================================================================


@router.post("/register-guide", response_model=GuideResponse, status_code=201)
async def register_guide(
    data: GuideRegister,
    current_user: User = Depends(get_current_user),
    service: GuideService = Depends(get_guide_service),
):
    """Register the current user as a guide (status starts as pending)"""
    return guide_response(service.register_guide(data, current_user))


@router.get("/my-guide-profile", response_model=MyGuideProfileResponse)
async def my_guide_profile(
    guide: Guide = Depends(get_current_guide),
    service: GuideService = Depends(get_guide_service),
):
    """Own guide profile plus the login gate verdict"""
    profile = service.get_my_profile(guide)
    profile["guide"] = guide_response(guide)
    return profile


@router.patch("/update-guide-profile", response_model=GuideResponse)
async def update_guide_profile(
    data: GuideUpdate,
    guide: Guide = Depends(get_current_guide),
    service: GuideService = Depends(get_guide_service),
):
    return guide_response(service.update_profile(guide, data))


@router.post("/resubmit-guide", response_model=GuideResponse)
async def resubmit_guide(
    data: GuideRegister,
    guide: Guide = Depends(get_current_guide),
    service: GuideService = Depends(get_guide_service),
):
    """Resubmit a rejected profile for verification"""
    return guide_response(service.resubmit(guide, data))


# ============================================================================
# DISCOVERY (PUBLIC)
# ============================================================================


@router.get("/get-approved-guides")
async def get_approved_guides(
    limit: Optional[int] = Query(4, ge=1, le=100),
    service: GuideService = Depends(get_guide_service),
):
    """Approved, active guides, newest first"""
    guides = service.get_approved_guides(limit)
    return {"guides": [public_guide_response(g) for g in guides]}


@router.get("/search-guides")
async def search_guides(
    name: Optional[str] = Query(None),
    language: Optional[str] = Query(None),
    location: Optional[str] = Query(None),
    availabilityDate: Optional[date] = Query(None),
    service: GuideService = Depends(get_guide_service),
):
    """Search approved guides by name, language, location and available date"""
    guides = service.search_guides(name, language, location, availabilityDate)
    return {"guides": [public_guide_response(g) for g in guides]}


@router.get("/get-languages")
async def get_languages(service: GuideService = Depends(get_guide_service)):
    return {"languages": service.get_languages()}


@router.get("/get-guide", response_model=GuideDetailResponse)
async def get_guide(
    guide_id: str = Query(...),
    service: GuideService = Depends(get_guide_service),
):
    """Public guide detail with rating summary"""
    detail = service.get_guide_detail(guide_id)
    detail["profile_picture_presigned"] = presign_stored_key(detail["profile_picture_url"])
    return detail


# ============================================================================
# ADMIN REVIEW
# ============================================================================


@router.get("/admin/guides", response_model=list[GuideResponse])
async def admin_list_guides(
    status: Optional[str] = Query(None),
    admin: User = Depends(get_current_admin),
    service: GuideService = Depends(get_guide_service),
):
    """All guides, optionally filtered by verification status"""
    return [guide_response(g) for g in service.list_guides(status)]


@router.post("/admin/approve-guide", response_model=GuideResponse)
async def approve_guide(
    data: GuideAdminAction,
    admin: User = Depends(get_current_admin),
    service: GuideService = Depends(get_guide_service),
):
    return guide_response(service.approve_guide(data, admin))


@router.post("/admin/reject-guide", response_model=GuideResponse)
async def reject_guide(
    data: GuideAdminAction,
    admin: User = Depends(get_current_admin),
    service: GuideService = Depends(get_guide_service),
):
    return guide_response(service.reject_guide(data, admin))


@router.post("/admin/deactivate-guide", response_model=GuideResponse)
async def deactivate_guide(
    data: GuideAdminAction,
    admin: User = Depends(get_current_admin),
    service: GuideService = Depends(get_guide_service),
):
    return guide_response(service.deactivate_guide(data, admin))


@router.post("/admin/reactivate-guide", response_model=GuideResponse)
async def reactivate_guide(
    data: GuideAdminAction,
    admin: User = Depends(get_current_admin),
    service: GuideService = Depends(get_guide_service),
):
    return guide_response(service.reactivate_guide(data, admin))


@router.post("/admin-delete-guide")
async def admin_delete_guide(
    data: GuideAdminAction,
    admin: User = Depends(get_current_admin),
    service: GuideService = Depends(get_guide_service),
):
    """Delete a guide and its profile data; bookings and reviews remain as history"""
    return await service.delete_guide(data, admin)


__all__ = ["router"]
