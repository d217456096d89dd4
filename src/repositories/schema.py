"""Create base tables, result tables and derived views."""

from __future__ import annotations

from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError

from domain.errors import StoreUnavailableError
from models import Base
from repositories.views import VIEW_DEFINITIONS


def ensure_circuit_schema(engine: Engine) -> None:
    """Create missing tables and (re)create the derived views."""
    try:
        with engine.begin() as connection:
            Base.metadata.create_all(bind=connection, checkfirst=True)
            for view_name, build_select in VIEW_DEFINITIONS:
                compiled = build_select().compile(
                    dialect=connection.dialect,
                    compile_kwargs={"literal_binds": True},
                )
                connection.exec_driver_sql(f"DROP VIEW IF EXISTS {view_name}")
                connection.exec_driver_sql(f"CREATE VIEW {view_name} AS {compiled}")
    except OperationalError as exc:
        raise StoreUnavailableError(f"Cannot create circuit schema: {exc}") from exc


__all__ = ["ensure_circuit_schema"]
