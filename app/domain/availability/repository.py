"""Availability repository - Database operations for guide availability windows"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import GuideAvailability


class AvailabilityRepository:
    """Repository for availability database operations"""

    @staticmethod
    def get_latest(db: Session, guide_id: str, for_update: bool = False) -> Optional[GuideAvailability]:
        """
        Latest availability row for a guide (last-created wins).
        With for_update the row is locked on databases that support SELECT ... FOR UPDATE.
        """
        query = db.query(GuideAvailability).filter(GuideAvailability.guide_id == guide_id)
        if for_update:
            query = query.with_for_update()
        return query.order_by(GuideAvailability.created_at.desc()).first()

    @staticmethod
    def create(db: Session, **fields) -> GuideAvailability:
        availability = GuideAvailability(**fields)
        db.add(availability)
        db.commit()
        db.refresh(availability)
        return availability

    @staticmethod
    def update(db: Session, availability: GuideAvailability, **updates) -> GuideAvailability:
        for key, value in updates.items():
            setattr(availability, key, value)
        db.commit()
        db.refresh(availability)
        return availability

    @staticmethod
    def delete_for_guide(db: Session, guide_id: str) -> int:
        count = (
            db.query(GuideAvailability)
            .filter(GuideAvailability.guide_id == guide_id)
            .delete(synchronize_session=False)
        )
        db.commit()
        return count
