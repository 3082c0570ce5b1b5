"""Availability router - FastAPI endpoints for guide availability"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_guide
from ...database import get_db
from ...models import Guide
from .schemas import AvailabilityEnvelope, AvailabilityResponse, AvailabilitySet
from .service import AvailabilityService

router = APIRouter(tags=["Availability"])


def get_availability_service(db: Session = Depends(get_db)) -> AvailabilityService:
    """Dependency injection for AvailabilityService"""
    return AvailabilityService(db)


@router.get("/get-guide-availability", response_model=AvailabilityEnvelope)
async def get_guide_availability(
    guideId: str = Query(...),
    service: AvailabilityService = Depends(get_availability_service),
):
    """Latest availability window for a guide, or null"""
    return service.get_availability(guideId)


@router.put("/set-guide-availability", response_model=AvailabilityResponse)
async def set_guide_availability(
    data: AvailabilitySet,
    guide: Guide = Depends(get_current_guide),
    service: AvailabilityService = Depends(get_availability_service),
):
    return service.set_availability(guide, data)


@router.patch("/toggle-guide-availability", response_model=AvailabilityResponse)
async def toggle_guide_availability(
    guide: Guide = Depends(get_current_guide),
    service: AvailabilityService = Depends(get_availability_service),
):
    """Switch between available and on leave"""
    return service.toggle_availability(guide)


@router.delete("/delete-guide-availability")
async def delete_guide_availability(
    guide: Guide = Depends(get_current_guide),
    service: AvailabilityService = Depends(get_availability_service),
):
    return service.delete_availability(guide)


__all__ = ["router"]
