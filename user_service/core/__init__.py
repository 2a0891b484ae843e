"""Core configuration, database access, errors and the authentication primitives."""

from user_service.core.config import get_settings, settings
from user_service.core.database import get_db

__all__ = ["get_settings", "settings", "get_db"]
