"""Itinerary router - FastAPI endpoints for guide itineraries"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_guide
from ...database import get_db
from ...models import Guide
from .schemas import ItineraryCreate, ItineraryResponse, ItineraryUpdate
from .service import ItineraryService

router = APIRouter(tags=["Itineraries"])


def get_itinerary_service(db: Session = Depends(get_db)) -> ItineraryService:
    """Dependency injection for ItineraryService"""
    return ItineraryService(db)


@router.get("/get-guide-itinerary")
async def get_guide_itinerary(
    guideId: str = Query(...),
    service: ItineraryService = Depends(get_itinerary_service),
):
    """All itineraries of a guide, newest first"""
    itineraries = service.get_itineraries(guideId)
    return {"itineraries": [ItineraryResponse.model_validate(i) for i in itineraries]}


@router.post("/create-itinerary", response_model=ItineraryResponse, status_code=201)
async def create_itinerary(
    data: ItineraryCreate,
    guide: Guide = Depends(get_current_guide),
    service: ItineraryService = Depends(get_itinerary_service),
):
    return service.create_itinerary(guide, data)


@router.put("/update-itinerary/{itinerary_id}", response_model=ItineraryResponse)
async def update_itinerary(
    itinerary_id: str,
    data: ItineraryUpdate,
    guide: Guide = Depends(get_current_guide),
    service: ItineraryService = Depends(get_itinerary_service),
):
    return service.update_itinerary(guide, itinerary_id, data)


@router.delete("/delete-itinerary/{itinerary_id}")
async def delete_itinerary(
    itinerary_id: str,
    guide: Guide = Depends(get_current_guide),
    service: ItineraryService = Depends(get_itinerary_service),
):
    return service.delete_itinerary(guide, itinerary_id)


__all__ = ["router"]
