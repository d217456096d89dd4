"""Generic persistence scaffold for derived rating tables."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from datetime import UTC, datetime
from typing import Any, Generic, TypeVar

from sqlalchemy import delete, insert, select
from sqlalchemy.orm import Session

ModelT = TypeVar("ModelT")
DomainRowT = TypeVar("DomainRowT")


class DerivedRowRepository(Generic[ModelT, DomainRowT]):
    """Reusable write operations for tables recomputed by the rating run.

    Rows are identified by ``key_columns``; a ``None`` key value matches
    ``IS NULL`` so circuit-wide rows share the same path as tournament rows.
    """

    def __init__(
        self,
        *,
        model: type[ModelT],
        key_columns: Sequence[str],
        row_to_values: Callable[[DomainRowT], dict[str, Any]],
    ) -> None:
        self.model = model
        self.key_columns = tuple(key_columns)
        self.row_to_values = row_to_values

    @classmethod
    def from_model(
        cls,
        *,
        model: type[ModelT],
        key_columns: Sequence[str],
        row_to_values: Callable[[DomainRowT], dict[str, Any]],
    ) -> DerivedRowRepository[ModelT, DomainRowT]:
        return cls(model=model, key_columns=key_columns, row_to_values=row_to_values)

    def _key_conditions(self, values: dict[str, Any]) -> list[Any]:
        conditions: list[Any] = []
        for column_name in self.key_columns:
            column = getattr(self.model, column_name)
            value = values[column_name]
            conditions.append(column.is_(None) if value is None else column == value)
        return conditions

    def upsert(self, session: Session, row: DomainRowT) -> ModelT:
        """Insert the row or overwrite the existing row with the same key."""
        values = self.row_to_values(row)
        existing = session.execute(
            select(self.model).where(*self._key_conditions(values))
        ).scalar_one_or_none()
        if existing is None:
            existing = self.model(**values)  # type: ignore[call-arg]
            session.add(existing)
        else:
            for column_name, value in values.items():
                setattr(existing, column_name, value)
            setattr(existing, "computed_at", datetime.now(UTC).replace(tzinfo=None))
        session.flush()
        return existing

    def upsert_many(self, session: Session, rows: Iterable[DomainRowT]) -> list[int]:
        """Upsert every row and return the ids that now hold current results."""
        return [int(getattr(self.upsert(session, row), "id")) for row in rows]

    def delete_except(self, session: Session, keep_ids: Iterable[int]) -> int:
        """Delete stale rows whose id was not produced by the current run."""
        id_column = getattr(self.model, "id")
        keep = list(keep_ids)
        statement = delete(self.model)
        if keep:
            statement = statement.where(id_column.not_in(keep))
        result = session.execute(statement)
        return int(result.rowcount or 0)

    def replace_all(self, session: Session, rows: Sequence[DomainRowT]) -> int:
        """Delete every row, then bulk insert the new snapshot."""
        session.execute(delete(self.model))
        if not rows:
            return 0
        payload = [self.row_to_values(row) for row in rows]
        session.execute(insert(self.model), payload)
        return len(payload)


__all__ = ["DerivedRowRepository"]
