"""SQLAlchemy ORM models."""

from user_service.models.base import Base
from user_service.models.role import ADMIN_ROLE_ID, CUSTOMER_ROLE_ID, DEFAULT_ROLES, Role
from user_service.models.user import User

__all__ = [
    "ADMIN_ROLE_ID",
    "CUSTOMER_ROLE_ID",
    "DEFAULT_ROLES",
    "Base",
    "Role",
    "User",
]
