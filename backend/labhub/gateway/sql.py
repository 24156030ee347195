"""
SQLAlchemy-backed persistence gateway.
"""
import logging
from typing import Any, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from labhub.core.exceptions import TransientStoreError
from labhub.db.base import create_session_factory
from labhub.gateway.base import PersistenceGateway, ModelT
from labhub.models.base import utcnow

logger = logging.getLogger(__name__)


class SqlGateway(PersistenceGateway):
    """Gateway over an async engine; one short-lived session per call."""

    def __init__(
        self,
        engine: AsyncEngine,
        session_factory: Optional[async_sessionmaker[AsyncSession]] = None,
    ):
        self.engine = engine
        self._session_factory = session_factory or create_session_factory(engine)

    async def create(self, model: type[ModelT], **values: Any) -> ModelT:
        record = model(**values)
        async with self._session_factory() as session:
            try:
                session.add(record)
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                logger.error(f"Insert into {model.__tablename__} failed: {e}")
                raise TransientStoreError(f"Could not save {model.__tablename__} record") from e
        return record

    async def get(self, model: type[ModelT], record_id: str) -> Optional[ModelT]:
        async with self._session_factory() as session:
            try:
                result = await session.execute(select(model).where(model.id == record_id))
                return result.scalar_one_or_none()
            except SQLAlchemyError as e:
                logger.error(f"Lookup in {model.__tablename__} failed: {e}")
                raise TransientStoreError(f"Could not load {model.__tablename__} record") from e

    async def select(
        self,
        model: type[ModelT],
        filters: Optional[dict[str, Any]] = None,
        order_by: Optional[str] = "created",
        descending: bool = True,
        limit: Optional[int] = None,
    ) -> list[ModelT]:
        query = select(model)
        for column, value in (filters or {}).items():
            query = query.where(getattr(model, column) == value)
        if order_by:
            column = getattr(model, order_by)
            query = query.order_by(column.desc() if descending else column.asc())
        if limit is not None:
            query = query.limit(limit)

        async with self._session_factory() as session:
            try:
                result = await session.execute(query)
                return list(result.scalars().all())
            except SQLAlchemyError as e:
                logger.error(f"Select on {model.__tablename__} failed: {e}")
                raise TransientStoreError(f"Could not list {model.__tablename__} records") from e

    async def update(self, model: type[ModelT], record_id: str, **values: Any) -> Optional[ModelT]:
        async with self._session_factory() as session:
            try:
                result = await session.execute(select(model).where(model.id == record_id))
                record = result.scalar_one_or_none()
                if record is None:
                    return None
                for column, value in values.items():
                    setattr(record, column, value)
                if "updated" not in values and hasattr(record, "updated"):
                    record.updated = utcnow()
                await session.commit()
                return record
            except SQLAlchemyError as e:
                await session.rollback()
                logger.error(f"Update on {model.__tablename__} failed: {e}")
                raise TransientStoreError(f"Could not update {model.__tablename__} record") from e

    async def claim(
        self,
        model: type[ModelT],
        record_id: str,
        expected: dict[str, Any],
        **values: Any,
    ) -> Optional[ModelT]:
        if "updated" not in values and hasattr(model, "updated"):
            values["updated"] = utcnow()
        stmt = update(model).where(model.id == record_id)
        for column, value in expected.items():
            stmt = stmt.where(getattr(model, column) == value)
        stmt = stmt.values(**values).execution_options(synchronize_session=False)

        async with self._session_factory() as session:
            try:
                result = await session.execute(stmt)
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                logger.error(f"Conditional update on {model.__tablename__} failed: {e}")
                raise TransientStoreError(f"Could not update {model.__tablename__} record") from e
        if result.rowcount != 1:
            return None
        return await self.get(model, record_id)

    async def close(self) -> None:
        await self.engine.dispose()
