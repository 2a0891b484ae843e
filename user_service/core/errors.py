"""Error kinds raised by the account core and translated to HTTP at the API boundary."""


class ServiceError(Exception):
    """Base error carrying a client-safe message and the HTTP status it maps to."""

    status_code: int = 500
    default_message: str = "internal server error"

    def __init__(self, message: str | None = None, details: object | None = None) -> None:
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class ValidationError(ServiceError):
    """Raised when a request is structurally invalid (missing or malformed fields)."""

    status_code = 422
    default_message = "Unprocessable Entity"


class UsernameExistsError(ServiceError):
    status_code = 409
    default_message = "username already exists"


class EmailExistsError(ServiceError):
    status_code = 409
    default_message = "email already exists"


class PasswordMismatchError(ServiceError):
    status_code = 400
    default_message = "password does not match"


class AccountNotFoundError(ServiceError):
    status_code = 404
    default_message = "user not found"


class UnauthorizedError(ServiceError):
    status_code = 401
    default_message = "unauthorized"


class InvalidTokenError(UnauthorizedError):
    """Raised on signature mismatch, malformed structure, or expiration."""

    default_message = "invalid token"


class TooManyRequestsError(ServiceError):
    status_code = 429
    default_message = "too many requests"


class StorageError(ServiceError):
    """Wraps persistence failures; the message never carries driver or SQL details."""

    status_code = 500
    default_message = "database server failed to execute query"


class DuplicateAccountError(StorageError):
    """Raised when the storage uniqueness constraint rejects a create or update."""

    status_code = 409
    default_message = "username or email already exists"


class SigningError(ServiceError):
    """Raised when a token cannot be signed (secret unavailable or rejected)."""

    status_code = 500
    default_message = "failed to sign token"


class InternalError(ServiceError):
    status_code = 500
    default_message = "internal server error"
