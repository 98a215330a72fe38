"""Request dependencies shared by the API routes."""

from fastapi import Request

from topicsync.core.config import Settings
from topicsync.services.hooks import HookRegistry


def get_app_settings(request: Request) -> Settings:
    """Settings the running app was created with."""
    return request.app.state.settings


def get_hooks(request: Request) -> HookRegistry:
    """Hook registry the running app was created with."""
    return request.app.state.hooks
