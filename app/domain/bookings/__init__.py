"""
Bookings Domain

Booking lifecycle (pending → accepted → completed, rejections and cancellations),
guide and tourist listings, and rebooking validation.
"""

from .router import router

__all__ = ["router"]
