"""
API endpoint for booking status automation and analytics
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from ..auth import get_current_admin
from ..database import get_db
from ..models import User
from ..services.status_automation import archive_past_bookings, get_booking_status_summary

router = APIRouter(prefix="/admin", tags=["status"])


class StatusSummary(BaseModel):
    pending: int
    accepted: int
    rejected: int
    cancelled: int
    completed: int
    past: int


class AutomationResult(BaseModel):
    completed_to_past: int
    total_updated: int
    cutoff_date: str


@router.get("/booking-status-summary", response_model=StatusSummary)
async def get_booking_status_summary_route(
    admin: User = Depends(get_current_admin), db: Session = Depends(get_db)
):
    """Get count of bookings by status"""
    return StatusSummary(**get_booking_status_summary(db))


@router.post("/run-status-automation", response_model=AutomationResult)
async def run_status_automation(
    admin: User = Depends(get_current_admin), db: Session = Depends(get_db)
):
    """
    Manually trigger status automation
    (In production this runs from the arq worker's daily cron)
    """
    result = archive_past_bookings(db)
    return AutomationResult(**result)
