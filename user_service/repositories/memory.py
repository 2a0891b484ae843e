"""In-memory account repository for tests and local wiring without a database."""

import itertools
import threading
import uuid
from datetime import UTC, datetime
from uuid import UUID

from user_service.core.errors import AccountNotFoundError, DuplicateAccountError, StorageError
from user_service.models.role import DEFAULT_ROLES
from user_service.repositories.base import UserRepository
from user_service.schemas.users import Account, AccountCreate, AccountUpdate, RoleInfo


class InMemoryUserRepository(UserRepository):
    """
    Thread-safe dict-backed store with the same uniqueness rules as the users table.

    Returned accounts are copies; mutating them does not touch the store.
    """

    def __init__(self, roles: tuple[dict, ...] = DEFAULT_ROLES) -> None:
        self._roles = {r["id"]: RoleInfo(**r) for r in roles}
        self._accounts: dict[UUID, Account] = {}
        self._ids = itertools.count(1)
        self._lock = threading.RLock()

    def create(self, data: AccountCreate) -> Account:
        with self._lock:
            self._check_unique(data.username, data.email, owner=None)
            now = datetime.now(UTC)
            account = Account(
                id=next(self._ids),
                uuid=uuid.uuid4(),
                role=self._role(data.role_id),
                created_at=now,
                updated_at=now,
                **data.model_dump(),
            )
            self._accounts[account.uuid] = account
            return account.model_copy(deep=True)

    def update(self, account_uuid: UUID, data: AccountUpdate) -> Account:
        with self._lock:
            current = self._accounts.get(account_uuid)
            if current is None:
                raise AccountNotFoundError()
            changes = data.model_dump(exclude_none=True)
            self._check_unique(changes.get("username"), changes.get("email"), owner=account_uuid)
            changes["role"] = self._role(changes.get("role_id", current.role_id))
            changes["updated_at"] = datetime.now(UTC)
            updated = current.model_copy(update=changes, deep=True)
            self._accounts[account_uuid] = updated
            return updated.model_copy(deep=True)

    def find_by_uuid(self, account_uuid: UUID) -> Account | None:
        with self._lock:
            account = self._accounts.get(account_uuid)
            return account.model_copy(deep=True) if account else None

    def find_by_email(self, email: str) -> Account | None:
        return self._find(lambda a: a.email == email)

    def find_by_username(self, username: str) -> Account | None:
        return self._find(lambda a: a.username == username)

    def list_all(self) -> list[Account]:
        with self._lock:
            return [a.model_copy(deep=True) for a in sorted(self._accounts.values(), key=lambda a: a.id)]

    def list_by_role(self, role_id: int) -> list[Account]:
        return [a for a in self.list_all() if a.role_id == role_id]

    def _find(self, predicate) -> Account | None:
        with self._lock:
            for account in self._accounts.values():
                if predicate(account):
                    return account.model_copy(deep=True)
            return None

    def _role(self, role_id: int) -> RoleInfo:
        role = self._roles.get(role_id)
        if role is None:
            # Mirrors the roles foreign key.
            raise StorageError()
        return role

    def _check_unique(self, username: str | None, email: str | None, owner: UUID | None) -> None:
        for account in self._accounts.values():
            if account.uuid == owner:
                continue
            if username is not None and account.username == username:
                raise DuplicateAccountError()
            if email is not None and account.email == email:
                raise DuplicateAccountError()
