"""SQLAlchemy-backed account repository (production storage)."""

import logging
import uuid
from uuid import UUID

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Query, Session

from user_service.core.errors import AccountNotFoundError, DuplicateAccountError, StorageError
from user_service.models import User
from user_service.repositories.base import UserRepository
from user_service.schemas.users import Account, AccountCreate, AccountUpdate

logger = logging.getLogger(__name__)


def _to_account(user: User) -> Account:
    return Account.model_validate(user)


class SqlAlchemyUserRepository(UserRepository):
    """Accounts stored in the users table; the role is eager-loaded with every row."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def create(self, data: AccountCreate) -> Account:
        user = User(uuid=uuid.uuid4(), **data.model_dump())
        self.session.add(user)
        self._commit("create")
        self.session.refresh(user)
        return _to_account(user)

    def update(self, account_uuid: UUID, data: AccountUpdate) -> Account:
        user = self._first(self.session.query(User).filter(User.uuid == account_uuid), "update")
        if user is None:
            raise AccountNotFoundError()
        for field, value in data.model_dump(exclude_none=True).items():
            setattr(user, field, value)
        self._commit("update")
        self.session.refresh(user)
        return _to_account(user)

    def find_by_uuid(self, account_uuid: UUID) -> Account | None:
        user = self._first(self.session.query(User).filter(User.uuid == account_uuid), "find_by_uuid")
        return _to_account(user) if user is not None else None

    def find_by_email(self, email: str) -> Account | None:
        user = self._first(self.session.query(User).filter(User.email == email), "find_by_email")
        return _to_account(user) if user is not None else None

    def find_by_username(self, username: str) -> Account | None:
        user = self._first(
            self.session.query(User).filter(User.username == username), "find_by_username"
        )
        return _to_account(user) if user is not None else None

    def list_all(self) -> list[Account]:
        return self._all(self.session.query(User).order_by(User.id), "list_all")

    def list_by_role(self, role_id: int) -> list[Account]:
        query = self.session.query(User).filter(User.role_id == role_id).order_by(User.id)
        return self._all(query, "list_by_role")

    def _first(self, query: Query, operation: str) -> User | None:
        try:
            return query.first()
        except SQLAlchemyError as e:
            self._fail(operation, e)

    def _all(self, query: Query, operation: str) -> list[Account]:
        try:
            return [_to_account(u) for u in query.all()]
        except SQLAlchemyError as e:
            self._fail(operation, e)

    def _commit(self, operation: str) -> None:
        try:
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            logger.warning("Account %s rejected by uniqueness constraint", operation)
            raise DuplicateAccountError() from e
        except SQLAlchemyError as e:
            self._fail(operation, e)

    def _fail(self, operation: str, error: SQLAlchemyError) -> None:
        self.session.rollback()
        logger.error(
            "Account repository failure",
            extra={"operation": operation, "error_type": type(error).__name__},
        )
        raise StorageError() from error
