"""Account repositories: the storage port and its implementations."""

from user_service.repositories.base import UserRepository
from user_service.repositories.database import SqlAlchemyUserRepository
from user_service.repositories.memory import InMemoryUserRepository

__all__ = ["InMemoryUserRepository", "SqlAlchemyUserRepository", "UserRepository"]
