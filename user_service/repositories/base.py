"""Storage port for accounts. The account service depends only on this interface."""

from abc import ABC, abstractmethod
from uuid import UUID

from user_service.schemas.users import Account, AccountCreate, AccountUpdate


class UserRepository(ABC):
    """
    Account lookups and persistence.

    Lookups return None when nothing matches. create/update raise
    DuplicateAccountError when the uniqueness constraint on username or email
    fires, and StorageError for any other persistence failure.
    """

    @abstractmethod
    def create(self, data: AccountCreate) -> Account: ...

    @abstractmethod
    def update(self, account_uuid: UUID, data: AccountUpdate) -> Account:
        """Apply the non-None fields of data. Raises AccountNotFoundError for an unknown uuid."""

    @abstractmethod
    def find_by_uuid(self, account_uuid: UUID) -> Account | None: ...

    @abstractmethod
    def find_by_email(self, email: str) -> Account | None: ...

    @abstractmethod
    def find_by_username(self, username: str) -> Account | None: ...

    @abstractmethod
    def list_all(self) -> list[Account]: ...

    @abstractmethod
    def list_by_role(self, role_id: int) -> list[Account]: ...
