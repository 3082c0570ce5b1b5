"""
Tourists Domain

Tourist profiles and the saved guides list.
"""

from .router import router

__all__ = ["router"]
