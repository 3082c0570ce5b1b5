"""
Guides Domain

Guide registration, profile gating, discovery and the admin verification workflow.
"""

from .router import router

__all__ = ["router"]
