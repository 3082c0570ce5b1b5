"""
Accounts Domain

The signed-in user's identity and self-service account deletion.
"""

from .router import router

__all__ = ["router"]
