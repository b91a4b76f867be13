"""
Create an account from the command line (e.g. the root admin). Run from project root:
  python -m portfolio.scripts.create_user NAME EMAIL PASSWORD [--admin]
Example:
  python -m portfolio.scripts.create_user Admin admin@example.com 'S3cure!pass' --admin
"""
import argparse
import logging
import sys

from portfolio.core.database import SessionLocal
from portfolio.core.security import (
    PASSWORD_POLICY_MESSAGE,
    hash_password,
    meets_password_policy,
    normalize_email,
)
from portfolio.models.user import User

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a portfolio site account.")
    parser.add_argument("name", help="Display name")
    parser.add_argument("email", help="Login email")
    parser.add_argument("password", help="Password (8+ chars, upper, lower, digit, symbol)")
    parser.add_argument("--admin", action="store_true", help="Grant admin rights")
    args = parser.parse_args(argv)

    name = args.name.strip()
    email = normalize_email(args.email)
    if not name or len(name) > 255:
        logger.error("Invalid name length.")
        return 1
    if "@" not in email or len(email) > 255:
        logger.error("Invalid email address.")
        return 1
    if not meets_password_policy(args.password):
        logger.error(PASSWORD_POLICY_MESSAGE)
        return 1

    db = SessionLocal()
    try:
        existing = db.query(User).filter(User.email == email).first()
        if existing:
            logger.error("User '%s' already exists.", email)
            return 1
        user = User(
            name=name,
            email=email,
            password_hash=hash_password(args.password),
            is_admin=args.admin,
        )
        db.add(user)
        db.commit()
        logger.info("Created user '%s' (admin=%s).", email, args.admin)
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
