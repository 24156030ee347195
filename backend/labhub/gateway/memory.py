"""
In-memory persistence gateway.

Used for local development (``USE_MOCK_STORE=true``) and as a test double.
Nothing survives a restart.
"""
import copy
from typing import Any, Optional

from labhub.gateway.base import PersistenceGateway, ModelT
from labhub.models.base import utcnow


def _apply_column_defaults(record: Any) -> None:
    """Fill Python-side column defaults the way a flush would."""
    for column in record.__table__.columns:
        default = column.default
        if default is None or getattr(record, column.key, None) is not None:
            continue
        if default.is_callable:
            value = default.arg(None)
        elif default.is_scalar:
            value = default.arg
        else:
            continue
        setattr(record, column.key, value)


def _detached_copy(record: ModelT) -> ModelT:
    """Copy a stored row so callers cannot mutate the store in place."""
    model = type(record)
    values = {
        column.key: copy.deepcopy(getattr(record, column.key))
        for column in model.__table__.columns
    }
    return model(**values)


class InMemoryGateway(PersistenceGateway):
    """Dict-backed gateway keyed by model class and record id."""

    def __init__(self):
        self._tables: dict[type, dict[str, Any]] = {}

    def _table(self, model: type) -> dict[str, Any]:
        return self._tables.setdefault(model, {})

    async def create(self, model: type[ModelT], **values: Any) -> ModelT:
        record = model(**values)
        _apply_column_defaults(record)
        self._table(model)[record.id] = record
        return _detached_copy(record)

    async def get(self, model: type[ModelT], record_id: str) -> Optional[ModelT]:
        record = self._table(model).get(record_id)
        return _detached_copy(record) if record is not None else None

    async def select(
        self,
        model: type[ModelT],
        filters: Optional[dict[str, Any]] = None,
        order_by: Optional[str] = "created",
        descending: bool = True,
        limit: Optional[int] = None,
    ) -> list[ModelT]:
        rows = [
            record for record in self._table(model).values()
            if all(getattr(record, column) == value for column, value in (filters or {}).items())
        ]
        if order_by:
            rows.sort(key=lambda r: getattr(r, order_by), reverse=descending)
        if limit is not None:
            rows = rows[:limit]
        return [_detached_copy(r) for r in rows]

    async def update(self, model: type[ModelT], record_id: str, **values: Any) -> Optional[ModelT]:
        record = self._table(model).get(record_id)
        if record is None:
            return None
        for column, value in values.items():
            setattr(record, column, value)
        if "updated" not in values and hasattr(record, "updated"):
            record.updated = utcnow()
        return _detached_copy(record)

    async def claim(
        self,
        model: type[ModelT],
        record_id: str,
        expected: dict[str, Any],
        **values: Any,
    ) -> Optional[ModelT]:
        record = self._table(model).get(record_id)
        if record is None:
            return None
        if any(getattr(record, column) != value for column, value in expected.items()):
            return None
        return await self.update(model, record_id, **values)
