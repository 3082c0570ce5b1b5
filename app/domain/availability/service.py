"""Availability service - A guide's bookable window and on-leave switch"""

import logging

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Guide, GuideAvailability
from .repository import AvailabilityRepository
from .schemas import AvailabilitySet

logger = logging.getLogger(__name__)


class AvailabilityService:
    """Service layer for guide availability"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = AvailabilityRepository()

    def get_availability(self, guide_id: str) -> dict:
        availability = self.repo.get_latest(self.db, guide_id)
        return {
            "availability": availability,
            "message": "Availability found" if availability else "No availability set",
        }

    def set_availability(self, guide: Guide, data: AvailabilitySet) -> GuideAvailability:
        """Update the latest window, or create the first one"""
        availability = self.repo.get_latest(self.db, guide.id)
        if availability:
            logger.info(
                f"📅 Updating availability for guide {guide.id}: {data.start_date} → {data.end_date}"
            )
            return self.repo.update(
                self.db,
                availability,
                start_date=data.start_date,
                end_date=data.end_date,
                is_available=data.is_available,
            )

        logger.info(f"📅 Creating availability for guide {guide.id}: {data.start_date} → {data.end_date}")
        return self.repo.create(
            self.db,
            guide_id=guide.id,
            user_id=guide.user_id,
            start_date=data.start_date,
            end_date=data.end_date,
            is_available=data.is_available,
        )

    def toggle_availability(self, guide: Guide) -> GuideAvailability:
        """Flip the on-leave switch of the latest window"""
        availability = self.repo.get_latest(self.db, guide.id)
        if not availability:
            raise HTTPException(status_code=404, detail="No availability set")

        availability = self.repo.update(
            self.db, availability, is_available=not availability.is_available
        )
        state = "available" if availability.is_available else "on leave"
        logger.info(f"🔀 Guide {guide.id} is now {state}")
        return availability

    def delete_availability(self, guide: Guide) -> dict:
        count = self.repo.delete_for_guide(self.db, guide.id)
        if not count:
            raise HTTPException(status_code=404, detail="No availability set")
        logger.info(f"🗑️ Removed {count} availability window(s) for guide {guide.id}")
        return {"message": "Availability deleted"}
