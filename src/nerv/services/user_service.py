"""User service — account persistence.

Learn: Email addresses are compared and stored lower-cased. The unique-email
violation is the one database error translated into its own exception
(DuplicateEmail) so signup can answer 409; everything else surfaces as
PersistenceError.
"""

from typing import Optional

import structlog
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from nerv.db.models import User
from nerv.errors import DuplicateEmail, PersistenceError

logger = structlog.get_logger()


def normalize_email(email: str) -> str:
    return email.strip().lower()


def _is_duplicate_email(exc: IntegrityError) -> bool:
    # SQLite: "UNIQUE constraint failed: users.email"; Postgres: "users_email_key".
    message = str(exc.orig).lower()
    return "users.email" in message or "users_email" in message


class UserService:
    """Create, look up, and remove user accounts."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_user(self, email: str, password_hash: str) -> User:
        user = User(email=normalize_email(email), password_hash=password_hash)
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            if _is_duplicate_email(e):
                raise DuplicateEmail() from e
            raise PersistenceError(f"Failed to create user: {e}") from e
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise PersistenceError(f"Failed to create user: {e}") from e

        logger.info("user.created", user_id=user.id)
        return user

    async def get_by_email(self, email: str) -> Optional[User]:
        q = select(User).where(User.email == normalize_email(email))
        try:
            result = await self.db.execute(q)
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to look up user: {e}") from e
        return result.scalars().first()

    async def get_by_id(self, user_id: str) -> Optional[User]:
        try:
            return await self.db.get(User, user_id)
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to look up user: {e}") from e

    async def delete_user(self, user_id: str) -> bool:
        """Remove a user. Courses, assignments and notes go with it."""
        try:
            result = await self.db.execute(delete(User).where(User.id == user_id))
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise PersistenceError(f"Failed to delete user: {e}") from e

        deleted = result.rowcount > 0
        if deleted:
            logger.info("user.deleted", user_id=user_id)
        return deleted
