"""
Create an account from the command line (e.g. the first admin; sign-up always
assigns the customer role). Run from project root:
  python -m user_service.scripts.create_user NAME USERNAME EMAIL PHONE PASSWORD [role]
Example:
  python -m user_service.scripts.create_user "Site Admin" admin admin@example.com 0800000000 your-secure-password admin
"""
import argparse
import logging
import sys

from sqlalchemy.orm import Session

from user_service.core.database import SessionLocal
from user_service.core.errors import ServiceError
from user_service.core.security import PasswordHasher
from user_service.models import ADMIN_ROLE_ID, CUSTOMER_ROLE_ID, DEFAULT_ROLES, Role
from user_service.repositories.database import SqlAlchemyUserRepository
from user_service.schemas.users import AccountCreate

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)

ROLE_IDS = {"admin": ADMIN_ROLE_ID, "customer": CUSTOMER_ROLE_ID}


def ensure_roles(db: Session) -> int:
    """Insert any missing fixed roles. Returns the number inserted; safe to run repeatedly."""
    existing = {r.id for r in db.query(Role).all()}
    missing = [Role(**r) for r in DEFAULT_ROLES if r["id"] not in existing]
    if missing:
        db.add_all(missing)
        db.commit()
    return len(missing)


def main() -> int:
    parser = argparse.ArgumentParser(description="Create a user-service account.")
    parser.add_argument("name", help="Display name")
    parser.add_argument("username", help="Unique username")
    parser.add_argument("email", help="Unique email")
    parser.add_argument("phone_number", help="Phone number")
    parser.add_argument("password", help="Password")
    parser.add_argument("role", nargs="?", default="customer", choices=sorted(ROLE_IDS))
    args = parser.parse_args()

    username = args.username.strip()
    if not username or len(username) > 50:
        print("Invalid username length.", file=sys.stderr)
        return 1
    if not args.password:
        print("Password must not be empty.", file=sys.stderr)
        return 1

    db = SessionLocal()
    try:
        inserted = ensure_roles(db)
        if inserted:
            logger.info("Seeded %s role(s)", inserted)
        repo = SqlAlchemyUserRepository(db)
        if repo.find_by_username(username) is not None:
            print(f"User '{username}' already exists.", file=sys.stderr)
            return 1
        if repo.find_by_email(args.email) is not None:
            print(f"Email '{args.email}' is already registered.", file=sys.stderr)
            return 1
        account = repo.create(
            AccountCreate(
                name=args.name,
                username=username,
                email=args.email,
                phone_number=args.phone_number,
                password_hash=PasswordHasher().hash(args.password),
                role_id=ROLE_IDS[args.role],
            )
        )
        print(f"Created user '{username}' ({account.uuid}) with role '{args.role}'.")
        return 0
    except ServiceError as e:
        logger.error("Account creation failed: %s", e.message)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
