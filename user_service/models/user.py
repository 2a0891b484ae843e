"""ORM model for user accounts."""

import uuid

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Uuid, func
from sqlalchemy.orm import relationship

from user_service.models.base import Base
from user_service.models.role import CUSTOMER_ROLE_ID


class User(Base):
    """
    User account. id is storage-internal; uuid is the immutable public identifier.

    username and email are unique across all accounts.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    uuid = Column(Uuid, nullable=False, unique=True, index=True, default=uuid.uuid4)
    name = Column(String(100), nullable=False)
    username = Column(String(50), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    email = Column(String(100), nullable=False, unique=True, index=True)
    phone_number = Column(String(32), nullable=False)
    role_id = Column(Integer, ForeignKey("roles.id"), nullable=False, default=CUSTOMER_ROLE_ID)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    role = relationship("Role", lazy="joined")
