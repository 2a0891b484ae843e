"""Sign-up/sign-in routes and the auth dependencies used by protected routes."""

from functools import lru_cache
from typing import Annotated

from fastapi import APIRouter, Depends, Header, Request, status
from sqlalchemy.orm import Session

from user_service.core.config import get_settings
from user_service.core.database import get_db
from user_service.core.gate import AuthGate
from user_service.core.security import PasswordHasher
from user_service.core.signature import SignatureValidator
from user_service.core.tokens import TokenService
from user_service.repositories.database import SqlAlchemyUserRepository
from user_service.schemas.auth import RequestContext
from user_service.schemas.response import ApiResponse
from user_service.schemas.users import LoginRequest, RegisterRequest, UserResponse
from user_service.services.users import UserService

router = APIRouter()


@lru_cache
def get_token_service() -> TokenService:
    """Process-wide token service built once from settings."""
    settings = get_settings()
    return TokenService(
        settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
        expire_minutes=settings.JWT_EXPIRE_MINUTES,
    )


@lru_cache
def get_signature_validator() -> SignatureValidator:
    return SignatureValidator(get_settings().SIGNATURE_KEY)


@lru_cache
def get_password_hasher() -> PasswordHasher:
    return PasswordHasher()


def get_auth_gate(
    tokens: Annotated[TokenService, Depends(get_token_service)],
    signatures: Annotated[SignatureValidator, Depends(get_signature_validator)],
) -> AuthGate:
    return AuthGate(tokens, signatures)


def get_user_service(
    db: Annotated[Session, Depends(get_db)],
    hasher: Annotated[PasswordHasher, Depends(get_password_hasher)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> UserService:
    """Dependency: account service bound to this request's DB session."""
    return UserService(SqlAlchemyUserRepository(db), hasher, tokens)


def authenticate(
    request: Request,
    gate: Annotated[AuthGate, Depends(get_auth_gate)],
    authorization: Annotated[str | None, Header()] = None,
    x_service_name: Annotated[str | None, Header()] = None,
    x_request_at: Annotated[str | None, Header()] = None,
    x_api_key: Annotated[str | None, Header()] = None,
) -> RequestContext:
    """
    Dependency: run the auth gate and attach the caller's context to request.state.
    Raises UnauthorizedError (401) on a missing/invalid token or a bad request signature.
    """
    context = gate.authenticate(authorization, x_service_name, x_request_at, x_api_key)
    request.state.context = context
    return context


@router.post(
    "/signup",
    response_model=ApiResponse[UserResponse],
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
def sign_up(
    body: RegisterRequest,
    service: Annotated[UserService, Depends(get_user_service)],
) -> ApiResponse[UserResponse]:
    """Register a customer account and return its public profile."""
    return ApiResponse[UserResponse](data=service.register(body))


@router.post("/signin", response_model=ApiResponse[UserResponse], response_model_exclude_none=True)
def sign_in(
    body: LoginRequest,
    service: Annotated[UserService, Depends(get_user_service)],
) -> ApiResponse[UserResponse]:
    """
    Authenticate with email and password. The profile is returned in data and
    the Authorization header value ('Bearer <token>') in token.
    """
    result = service.login(body)
    return ApiResponse[UserResponse](data=result.user, token=result.token)
