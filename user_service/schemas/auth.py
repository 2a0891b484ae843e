"""Request-scoped identity attached by the auth gate."""

from pydantic import BaseModel, ConfigDict, Field

from user_service.schemas.users import UserResponse


class RequestContext(BaseModel):
    """Authenticated caller for one request: the token's identity snapshot and the raw header."""

    model_config = ConfigDict(frozen=True)

    user: UserResponse = Field(..., description="Identity snapshot embedded in the token")
    token: str = Field(..., description="Raw Authorization header value, 'Bearer <token>'")
