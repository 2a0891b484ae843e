"""Pydantic request/response schemas."""

from user_service.schemas.auth import RequestContext
from user_service.schemas.health import HealthResponse
from user_service.schemas.response import ApiResponse, error_body
from user_service.schemas.users import (
    Account,
    AccountCreate,
    AccountUpdate,
    LoginRequest,
    LoginResult,
    RegisterRequest,
    RoleInfo,
    UpdateRequest,
    UserResponse,
)

__all__ = [
    "Account",
    "AccountCreate",
    "AccountUpdate",
    "ApiResponse",
    "HealthResponse",
    "LoginRequest",
    "LoginResult",
    "RegisterRequest",
    "RequestContext",
    "RoleInfo",
    "UpdateRequest",
    "UserResponse",
    "error_body",
]
