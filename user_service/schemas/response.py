"""Response envelope shared by every endpoint."""

from typing import Any, Generic, Literal, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")

SUCCESS = "success"
ERROR = "error"


class ApiResponse(BaseModel, Generic[T]):
    """{"status", "message", "data", "token"}; token is only set on login."""

    status: Literal["success", "error"] = Field(default=SUCCESS, description="Outcome")
    message: str = Field(default="OK", description="Human-readable outcome or error message")
    data: T | None = None
    token: str | None = None


def error_body(message: str, data: Any = None) -> dict[str, Any]:
    """Build the JSON body for an error response."""
    body: dict[str, Any] = {"status": ERROR, "message": message}
    if data is not None:
        body["data"] = data
    return body
