"""Ownership-scoped CRUD shared by courses, assignments and notes.

Learn: Every statement carries `user_id == owner_id` in its WHERE clause, so a
record owned by someone else behaves exactly like a record that does not
exist: get returns None, update returns None, delete returns False. The
HTTP layer maps all three to a 404.

Writes use Core insert/update/delete so the affected row count can be
checked directly.
"""

from typing import Any, ClassVar, Generic, Optional, TypeVar

import structlog
from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from nerv.db.models import Base, new_id, utcnow
from nerv.errors import PersistenceError, ValidationError

logger = structlog.get_logger()

ModelT = TypeVar("ModelT", bound=Base)


class OwnedResourceService(Generic[ModelT]):
    """CRUD for one resource type, always filtered by owner."""

    model: ClassVar[type]
    resource: ClassVar[str] = "record"
    # Columns a caller may change after creation.
    updatable: ClassVar[frozenset[str]] = frozenset()
    stamps_updated_at: ClassVar[bool] = False

    def __init__(self, db: AsyncSession):
        self.db = db

    def ordering(self) -> tuple:
        """ORDER BY clauses for list_by_owner()."""
        return (self.model.created_at.asc(),)

    # ─── Create ─────────────────────────────────────────

    async def create(self, owner_id: str, **fields: Any) -> ModelT:
        self._check_fields(fields, allowed=self.updatable)

        now = utcnow()
        values = {**fields, "id": new_id(), "user_id": owner_id, "created_at": now}
        if self.stamps_updated_at:
            values["updated_at"] = now

        try:
            result = await self.db.execute(insert(self.model).values(**values))
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise PersistenceError(f"Failed to create {self.resource}: {e}") from e

        if result.rowcount == 0:
            await self.db.rollback()
            raise PersistenceError(f"{self.resource.capitalize()} creation failed, no rows inserted")

        await self._commit(f"create {self.resource}")
        logger.info(f"{self.resource}.created", id=values["id"], user_id=owner_id)

        created = await self.get_by_id_for_owner(values["id"], owner_id)
        if created is None:
            raise PersistenceError(f"{self.resource.capitalize()} {values['id']} vanished after insert")
        return created

    # ─── Read ───────────────────────────────────────────

    async def list_by_owner(self, owner_id: str) -> list[ModelT]:
        q = (
            select(self.model)
            .where(self.model.user_id == owner_id)
            .order_by(*self.ordering())
            .execution_options(populate_existing=True)
        )
        try:
            result = await self.db.execute(q)
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to list {self.resource}s: {e}") from e
        return list(result.scalars().all())

    async def get_by_id_for_owner(
        self, record_id: str, owner_id: str
    ) -> Optional[ModelT]:
        q = (
            select(self.model)
            .where(self.model.id == record_id, self.model.user_id == owner_id)
            .execution_options(populate_existing=True)
        )
        try:
            result = await self.db.execute(q)
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to load {self.resource}: {e}") from e
        return result.scalars().first()

    # ─── Update ─────────────────────────────────────────

    async def update_by_id_for_owner(
        self, record_id: str, owner_id: str, **fields: Any
    ) -> Optional[ModelT]:
        """Apply only the given fields. None if no owned row matched."""
        self._check_fields(fields, allowed=self.updatable)

        values = dict(fields)
        if self.stamps_updated_at:
            values["updated_at"] = utcnow()
        if not values:
            return await self.get_by_id_for_owner(record_id, owner_id)

        stmt = (
            update(self.model)
            .where(self.model.id == record_id, self.model.user_id == owner_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        try:
            result = await self.db.execute(stmt)
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise PersistenceError(f"Failed to update {self.resource}: {e}") from e

        # Commit even when nothing matched: a rollback would expire every
        # record already loaded in this session.
        await self._commit(f"update {self.resource}")
        if result.rowcount == 0:
            logger.info(f"{self.resource}.update_missed", id=record_id, user_id=owner_id)
            return None

        logger.info(
            f"{self.resource}.updated",
            id=record_id,
            user_id=owner_id,
            fields=sorted(fields),
        )
        return await self.get_by_id_for_owner(record_id, owner_id)

    # ─── Delete ─────────────────────────────────────────

    async def delete_by_id_for_owner(self, record_id: str, owner_id: str) -> bool:
        stmt = (
            delete(self.model)
            .where(self.model.id == record_id, self.model.user_id == owner_id)
            .execution_options(synchronize_session=False)
        )
        try:
            result = await self.db.execute(stmt)
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise PersistenceError(f"Failed to delete {self.resource}: {e}") from e

        await self._commit(f"delete {self.resource}")
        if result.rowcount == 0:
            return False

        logger.info(f"{self.resource}.deleted", id=record_id, user_id=owner_id)
        return True

    # ─── Helpers ────────────────────────────────────────

    def _check_fields(self, fields: dict[str, Any], allowed: frozenset[str]) -> None:
        unknown = set(fields) - allowed
        if unknown:
            raise ValidationError(
                f"Unknown {self.resource} field(s): {', '.join(sorted(unknown))}"
            )

    async def _commit(self, action: str) -> None:
        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise PersistenceError(f"Failed to {action}: {e}") from e
