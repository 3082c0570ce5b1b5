"""
Ratings Domain

One rating and optional review per completed booking.
"""

from .router import router

__all__ = ["router"]
