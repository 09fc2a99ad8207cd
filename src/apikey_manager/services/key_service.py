"""Key service — ownership-scoped CRUD for key records.

Learn: Service layer separates business logic from HTTP routing.
Routes pass in the verified owner id, the service does the rest.

Invariants:
    - Every query filters by owner_id; update/delete also by key id
    - owner_id is written once, here, from the verified identity
    - Zero matched rows on update/delete is NotFoundOrUnauthorized, whether
      the id does not exist or belongs to someone else
    - Store failures become StoreError: 500 on reads, 400 on writes
"""

import structlog
from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from apikey_manager.db.models import ApiKey, utcnow_iso
from apikey_manager.errors import NotFoundOrUnauthorized, StoreError, ValidationError
from apikey_manager.schemas.key import UPDATABLE_FIELDS, KeyCreate

logger = structlog.get_logger()


class KeyService:
    """Business logic for a user's key records."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_keys(self, owner_id: str) -> list[ApiKey]:
        """All of the owner's keys, in a stable order.

        Learn: `order` is client-managed and often null, so nulls sort
        last; created_at and id break ties deterministically.
        """
        q = (
            select(ApiKey)
            .where(ApiKey.owner_id == owner_id)
            .order_by(
                ApiKey.order.asc().nulls_last(),
                ApiKey.created_at.asc(),
                ApiKey.id.asc(),
            )
        )
        try:
            result = await self.db.execute(q)
        except SQLAlchemyError as e:
            logger.error("keys.list_failed", owner_id=owner_id, error=str(e))
            raise StoreError.on_read(str(e))
        return list(result.scalars().all())

    async def create_key(self, owner_id: str, body: KeyCreate) -> ApiKey:
        data = body.model_dump()
        data["owner_id"] = owner_id
        if data.get("created_at") is None:
            data["created_at"] = utcnow_iso()

        key = ApiKey(**data)
        self.db.add(key)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ValidationError(f"Key with id '{body.id}' already exists")
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error("keys.create_failed", owner_id=owner_id, error=str(e))
            raise StoreError.on_write(str(e))

        logger.info("keys.created", owner_id=owner_id, key_id=key.id, type=key.type)
        return key

    async def update_key(self, owner_id: str, key_id: str, changes: dict) -> None:
        """Apply a partial update to one owned key.

        Only allow-listed fields are applied; anything else was already
        dropped by the schema, but the filter keeps this method safe on
        its own.
        """
        values = {k: v for k, v in changes.items() if k in UPDATABLE_FIELDS}
        if not values:
            raise ValidationError(
                "No updatable field provided. Allowed: " + ", ".join(UPDATABLE_FIELDS)
            )

        stmt = (
            update(ApiKey)
            .where(ApiKey.id == key_id, ApiKey.owner_id == owner_id)
            .values(**values)
        )
        try:
            result = await self.db.execute(stmt)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error("keys.update_failed", owner_id=owner_id, key_id=key_id, error=str(e))
            raise StoreError.on_write(str(e))

        if result.rowcount == 0:
            raise NotFoundOrUnauthorized()
        logger.info("keys.updated", owner_id=owner_id, key_id=key_id, fields=sorted(values))

    async def delete_key(self, owner_id: str, key_id: str) -> None:
        stmt = delete(ApiKey).where(ApiKey.id == key_id, ApiKey.owner_id == owner_id)
        try:
            result = await self.db.execute(stmt)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error("keys.delete_failed", owner_id=owner_id, key_id=key_id, error=str(e))
            raise StoreError.on_write(str(e))

        if result.rowcount == 0:
            raise NotFoundOrUnauthorized()
        logger.info("keys.deleted", owner_id=owner_id, key_id=key_id)
