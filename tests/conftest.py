from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import func, select

from osudb.adapters.sqlalchemy import metadata
from osudb.adapters.sqlalchemy.migrations import upgrade_head
from osudb.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyCatalogUnitOfWork,
    SqlAlchemyStatisticsUnitOfWork,
    create_store_engine,
    shutdown,
    startup,
)

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator
    from pathlib import Path

    from sqlalchemy.engine import Engine


@pytest.fixture
def sqlite_engine(tmp_path: Path) -> Iterator[Engine]:
    engine = create_store_engine(f"sqlite+pysqlite:///{tmp_path / 'osudb.db'}")
    upgrade_head(engine=engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def catalog_unit_of_work(
    sqlite_engine: Engine,
) -> Iterator[Callable[[], SqlAlchemyCatalogUnitOfWork]]:
    startup(engine=sqlite_engine, force=True)

    def factory() -> SqlAlchemyCatalogUnitOfWork:
        return SqlAlchemyCatalogUnitOfWork()

    try:
        yield factory
    finally:
        shutdown()


@pytest.fixture
def statistics_unit_of_work(
    catalog_unit_of_work: Callable[[], SqlAlchemyCatalogUnitOfWork],
) -> Callable[[], SqlAlchemyStatisticsUnitOfWork]:
    _ = catalog_unit_of_work
    return SqlAlchemyStatisticsUnitOfWork


@pytest.fixture
def row_counts(sqlite_engine: Engine) -> Callable[[], dict[str, int]]:
    """Return a callable snapshotting the number of rows in every table."""

    def snapshot() -> dict[str, int]:
        with sqlite_engine.connect() as connection:
            return {
                name: connection.execute(select(func.count()).select_from(table)).scalar_one()
                for name, table in metadata.tables.items()
            }

    return snapshot
