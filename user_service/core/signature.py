"""API-key signature check for service-to-service calls."""

import hashlib
import hmac

from pydantic import SecretStr

from user_service.core.errors import UnauthorizedError


class SignatureValidator:
    """
    Validates x-api-key = hex(SHA-256("<service name>:<shared secret>:<request at>")).

    Header values are used verbatim; no freshness window is applied to the
    timestamp. Missing headers simply produce a different digest.
    """

    def __init__(self, signature_key: SecretStr | str) -> None:
        if isinstance(signature_key, SecretStr):
            signature_key = signature_key.get_secret_value()
        self._signature_key = signature_key

    def compute(self, service_name: str, request_at: str) -> str:
        raw = f"{service_name}:{self._signature_key}:{request_at}"
        return hashlib.sha256(raw.encode("utf-8")).hexdigest()

    def validate(self, service_name: str | None, request_at: str | None, api_key: str | None) -> None:
        """Raise UnauthorizedError unless api_key matches the expected signature."""
        expected = self.compute(service_name or "", request_at or "")
        if not hmac.compare_digest(expected.encode("utf-8"), (api_key or "").encode("utf-8")):
            raise UnauthorizedError()
