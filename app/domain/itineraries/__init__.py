"""
Itineraries Domain

Tour plans (days, timings, places, price) a guide offers for booking.
"""

from .repository import ItineraryRepository
from .router import router

__all__ = ["router", "ItineraryRepository"]
