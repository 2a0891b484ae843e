"""ORM model for account roles and the fixed role set."""

from sqlalchemy import Column, DateTime, Integer, String, func

from user_service.models.base import Base

ADMIN_ROLE_ID = 1
CUSTOMER_ROLE_ID = 2

# Seeded by migration and by scripts.create_user; not mutable through the API.
DEFAULT_ROLES = (
    {"id": ADMIN_ROLE_ID, "code": "ADMIN", "name": "Administrator"},
    {"id": CUSTOMER_ROLE_ID, "code": "CUSTOMER", "name": "Customer"},
)


class Role(Base):
    """Role assigned to an account. code is a short uppercase tag, name a display label."""

    __tablename__ = "roles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    code = Column(String(15), nullable=False, unique=True)
    name = Column(String(20), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
