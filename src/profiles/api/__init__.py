"""Profiles domain API package."""

from profiles.api.routes import member_router

__all__ = ["member_router"]
