"""
Core infrastructure package.

Provides:
- Configuration management via pydantic-settings
- The cached Google service account credentials handle

Usage:
    from gsc_server.core import get_settings, get_credentials
"""

from gsc_server.core.config import Settings, get_settings
from gsc_server.core.credentials import (
    get_credentials,
    init_credentials,
    reset_credentials,
    scopes_for,
)

__all__ = [
    "Settings",
    "get_settings",
    "get_credentials",
    "init_credentials",
    "reset_credentials",
    "scopes_for",
]
