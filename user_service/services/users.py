"""Account service: registration, login, lookup, listing and profile update rules."""

import logging
from uuid import UUID

from user_service.core.errors import (
    AccountNotFoundError,
    EmailExistsError,
    PasswordMismatchError,
    UnauthorizedError,
    UsernameExistsError,
)
from user_service.core.security import PasswordHasher
from user_service.core.tokens import TokenService
from user_service.models.role import ADMIN_ROLE_ID, CUSTOMER_ROLE_ID
from user_service.repositories.base import UserRepository
from user_service.schemas.auth import RequestContext
from user_service.schemas.users import (
    Account,
    AccountCreate,
    AccountUpdate,
    LoginRequest,
    LoginResult,
    RegisterRequest,
    UpdateRequest,
    UserResponse,
)

logger = logging.getLogger(__name__)


def _public_view(account: Account, role: str | None = None) -> UserResponse:
    """Map an account to the client-facing profile (never the hash or internal id)."""
    return UserResponse(
        uuid=account.uuid,
        name=account.name,
        username=account.username,
        email=account.email,
        role=role,
        phone_number=account.phone_number,
    )


def _given(value: str | None) -> str | None:
    """Empty strings in an update mean 'leave unchanged', same as an omitted field."""
    return value if value else None


class UserService:
    """Owns the account business rules; storage, hashing and signing are injected."""

    def __init__(
        self,
        repository: UserRepository,
        hasher: PasswordHasher,
        tokens: TokenService,
    ) -> None:
        self.repository = repository
        self.hasher = hasher
        self.tokens = tokens

    def register(self, req: RegisterRequest) -> UserResponse:
        """
        Create a customer account.

        Checks run in a fixed order (username, email, then password confirmation)
        so a request that breaks several rules always reports the first one.
        """
        password_hash = self.hasher.hash(req.password)

        if self.repository.find_by_username(req.username) is not None:
            raise UsernameExistsError()
        if self.repository.find_by_email(req.email) is not None:
            raise EmailExistsError()
        if req.password != req.confirm_password:
            raise PasswordMismatchError()

        account = self.repository.create(
            AccountCreate(
                name=req.name,
                username=req.username,
                email=req.email,
                phone_number=req.phone_number,
                password_hash=password_hash,
                role_id=CUSTOMER_ROLE_ID,
            )
        )
        logger.info("Account registered", extra={"user_uuid": str(account.uuid)})
        return _public_view(account)

    def login(self, req: LoginRequest) -> LoginResult:
        """Verify credentials and issue a bearer token embedding the account snapshot."""
        account = self.repository.find_by_email(req.email)
        if account is None or not self.hasher.verify(req.password, account.password_hash):
            logger.info("Login rejected", extra={"reason": "invalid_credentials"})
            raise UnauthorizedError("invalid email or password")

        snapshot = _public_view(account, role=account.role.code.lower())
        token = self.tokens.issue(snapshot, self.tokens.expires_at())
        logger.info("Login succeeded", extra={"user_uuid": str(account.uuid)})
        return LoginResult(user=snapshot, token=TokenService.as_bearer(token))

    def get_current_user(self, context: RequestContext) -> UserResponse:
        # Token-time snapshot; may lag behind later profile edits.
        return context.user

    def get_by_uuid(self, account_uuid: UUID) -> UserResponse:
        account = self._get_account(account_uuid)
        return _public_view(account)

    def list_all_users(self) -> list[UserResponse]:
        return [_public_view(a, role=a.role.name) for a in self.repository.list_all()]

    def list_admins(self) -> list[UserResponse]:
        return [_public_view(a) for a in self.repository.list_by_role(ADMIN_ROLE_ID)]

    def list_customers(self) -> list[UserResponse]:
        return [_public_view(a) for a in self.repository.list_by_role(CUSTOMER_ROLE_ID)]

    def update(self, req: UpdateRequest, account_uuid: UUID) -> UserResponse:
        """
        Partially update a profile.

        A username or email may be "changed" to the owner's current value. The
        role is always reset to customer, including for administrators.
        """
        current = self._get_account(account_uuid)
        username = _given(req.username)
        email = _given(req.email)
        password = _given(req.password)

        if username is not None:
            existing = self.repository.find_by_username(username)
            if existing is not None and current.username != username:
                raise UsernameExistsError()

        if email is not None:
            existing = self.repository.find_by_email(email)
            if existing is not None and current.email != email:
                raise EmailExistsError()

        password_hash = None
        if password is not None:
            if password != req.confirm_password:
                raise PasswordMismatchError()
            password_hash = self.hasher.hash(password)

        account = self.repository.update(
            account_uuid,
            AccountUpdate(
                name=_given(req.name),
                username=username,
                email=email,
                phone_number=_given(req.phone_number),
                password_hash=password_hash,
                role_id=CUSTOMER_ROLE_ID,
            ),
        )
        logger.info(
            "Account updated",
            extra={"user_uuid": str(account.uuid), "password_changed": password_hash is not None},
        )
        return _public_view(account)

    def _get_account(self, account_uuid: UUID) -> Account:
        account = self.repository.find_by_uuid(account_uuid)
        if account is None:
            raise AccountNotFoundError()
        return account
