"""JWT identity tokens: issue on login, validate on every gated request."""

import logging
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt
from pydantic import SecretStr
from pydantic import ValidationError as PydanticValidationError

from user_service.core.config import HMAC_ALGORITHMS
from user_service.core.errors import InvalidTokenError, SigningError, UnauthorizedError
from user_service.schemas.users import UserResponse

logger = logging.getLogger(__name__)

BEARER_SCHEME = "Bearer"

# Claim holding the embedded identity snapshot.
USER_CLAIM = "user"


class TokenService:
    """
    Issues and validates signed, time-limited identity tokens.

    The token embeds a point-in-time snapshot of the account; validation
    returns that snapshot as-is and never consults storage.
    """

    def __init__(
        self,
        secret: SecretStr | str,
        algorithm: str = "HS256",
        expire_minutes: int = 60,
    ) -> None:
        if isinstance(secret, SecretStr):
            secret = secret.get_secret_value()
        self._secret = secret
        self.algorithm = algorithm
        self.expire_minutes = expire_minutes

    def expires_at(self, now: datetime | None = None) -> datetime:
        """Expiration instant for a token issued at now (default: current UTC time)."""
        now = now or datetime.now(UTC)
        return now + timedelta(minutes=self.expire_minutes)

    def issue(self, snapshot: UserResponse, expires_at: datetime) -> str:
        """Sign snapshot plus a registered exp claim; return the compact token (no scheme prefix)."""
        if not self._secret:
            raise SigningError("token signing secret is not configured")
        payload: dict[str, Any] = {
            USER_CLAIM: snapshot.model_dump(mode="json", by_alias=True),
            "exp": expires_at,
        }
        try:
            return jwt.encode(payload, self._secret, algorithm=self.algorithm)
        except (jwt.PyJWTError, TypeError, ValueError) as e:
            raise SigningError() from e

    def validate(self, authorization: str) -> UserResponse:
        """
        Validate an Authorization header value of the form 'Bearer <token>'.

        Raises UnauthorizedError when the scheme is missing and InvalidTokenError
        when the token is malformed, expired, signed with a non-HMAC algorithm,
        or its signature does not match.
        """
        if not authorization or BEARER_SCHEME not in authorization:
            raise UnauthorizedError()

        parts = authorization.split()
        if len(parts) != 2 or parts[0] != BEARER_SCHEME:
            raise InvalidTokenError("malformed bearer token")

        try:
            payload = jwt.decode(
                parts[1],
                self._secret,
                algorithms=list(HMAC_ALGORITHMS),
                options={"require": ["exp"]},
            )
        except jwt.ExpiredSignatureError as e:
            raise InvalidTokenError("token has expired") from e
        except jwt.PyJWTError as e:
            raise InvalidTokenError() from e

        try:
            return UserResponse.model_validate(payload.get(USER_CLAIM))
        except PydanticValidationError as e:
            raise InvalidTokenError("invalid token payload") from e

    @staticmethod
    def as_bearer(token: str) -> str:
        return f"{BEARER_SCHEME} {token}"
