"""Auth gate for protected routes: bearer token, then request signature, then context."""

import logging

from user_service.core.errors import UnauthorizedError
from user_service.core.signature import SignatureValidator
from user_service.core.tokens import TokenService
from user_service.schemas.auth import RequestContext

logger = logging.getLogger(__name__)


class AuthGate:
    """
    Per-request pipeline, terminal at the first failure:

    1. Authorization header present, else UnauthorizedError.
    2. TokenService.validate; its failure reason becomes the UnauthorizedError message.
    3. SignatureValidator.validate on x-service-name / x-request-at / x-api-key.
    4. Return a RequestContext carrying the identity snapshot and the raw header.
    """

    def __init__(self, tokens: TokenService, signatures: SignatureValidator) -> None:
        self.tokens = tokens
        self.signatures = signatures

    def authenticate(
        self,
        authorization: str | None,
        service_name: str | None,
        request_at: str | None,
        api_key: str | None,
    ) -> RequestContext:
        if not authorization:
            logger.warning("Auth gate rejected request", extra={"step": "missing_token"})
            raise UnauthorizedError()

        try:
            user = self.tokens.validate(authorization)
        except UnauthorizedError as e:
            logger.warning(
                "Auth gate rejected request",
                extra={"step": "invalid_token", "reason": e.message},
            )
            raise UnauthorizedError(e.message) from e

        try:
            self.signatures.validate(service_name, request_at, api_key)
        except UnauthorizedError:
            logger.warning(
                "Auth gate rejected request",
                extra={"step": "invalid_api_key", "service_name": service_name or ""},
            )
            raise

        return RequestContext(user=user, token=authorization)
