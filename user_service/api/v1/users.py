"""Protected account routes: current user, listings, lookup and update by uuid."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends

from user_service.api.v1.auth import authenticate, get_user_service
from user_service.schemas.auth import RequestContext
from user_service.schemas.response import ApiResponse
from user_service.schemas.users import UpdateRequest, UserResponse
from user_service.services.users import UserService

# Static paths are declared before /{account_uuid} so they are matched first.
router = APIRouter()


@router.get("/user", response_model=ApiResponse[UserResponse], response_model_exclude_none=True)
def get_user_login(
    context: Annotated[RequestContext, Depends(authenticate)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> ApiResponse[UserResponse]:
    """Return the identity embedded in the caller's token (no storage lookup)."""
    return ApiResponse[UserResponse](data=service.get_current_user(context))


@router.get("/users", response_model=ApiResponse[list[UserResponse]], response_model_exclude_none=True)
def list_users(
    _context: Annotated[RequestContext, Depends(authenticate)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> ApiResponse[list[UserResponse]]:
    """List every account with its role display name."""
    return ApiResponse[list[UserResponse]](data=service.list_all_users())


@router.get("/admin", response_model=ApiResponse[list[UserResponse]], response_model_exclude_none=True)
def list_admins(
    _context: Annotated[RequestContext, Depends(authenticate)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> ApiResponse[list[UserResponse]]:
    return ApiResponse[list[UserResponse]](data=service.list_admins())


@router.get("/cust", response_model=ApiResponse[list[UserResponse]], response_model_exclude_none=True)
def list_customers(
    _context: Annotated[RequestContext, Depends(authenticate)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> ApiResponse[list[UserResponse]]:
    return ApiResponse[list[UserResponse]](data=service.list_customers())


@router.get(
    "/{account_uuid}",
    response_model=ApiResponse[UserResponse],
    response_model_exclude_none=True,
)
def get_user_by_uuid(
    account_uuid: UUID,
    _context: Annotated[RequestContext, Depends(authenticate)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> ApiResponse[UserResponse]:
    """Public profile for one account; 404 if the uuid is unknown."""
    return ApiResponse[UserResponse](data=service.get_by_uuid(account_uuid))


@router.put(
    "/{account_uuid}",
    response_model=ApiResponse[UserResponse],
    response_model_exclude_none=True,
)
def update_user(
    account_uuid: UUID,
    body: UpdateRequest,
    _context: Annotated[RequestContext, Depends(authenticate)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> ApiResponse[UserResponse]:
    """
    Update profile fields. Omitted fields are unchanged; a new password requires
    a matching confirmPassword. The account's role is reset to customer.
    """
    return ApiResponse[UserResponse](data=service.update(body, account_uuid))
