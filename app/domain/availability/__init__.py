"""
Availability Domain

A guide's bookable date window and on-leave switch.
"""

from .repository import AvailabilityRepository
from .router import router

__all__ = ["router", "AvailabilityRepository"]
