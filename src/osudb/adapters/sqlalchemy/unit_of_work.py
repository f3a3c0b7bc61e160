"""SQLAlchemy-backed units of work for catalog reconciliation and reports."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Literal

from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker

from osudb.adapters.sqlalchemy.migrations import upgrade_head
from osudb.adapters.sqlalchemy.repositories import (
    SqlAlchemyArtistRepository,
    SqlAlchemyBeatmapHitObjectsRepository,
    SqlAlchemyBeatmapRepository,
    SqlAlchemyBeatmapSetRepository,
    SqlAlchemyCountryRepository,
    SqlAlchemyMatchRepository,
    SqlAlchemyPlayerRepository,
    SqlAlchemyScoreRepository,
    SqlAlchemySongRepository,
    SqlAlchemyStandardBeatmapRepository,
)
from osudb.adapters.sqlalchemy.statistics import SqlAlchemyStatisticsRepository
from osudb.config import get_database_config
from osudb.domain.ports.unit_of_work import (
    CatalogRepositories,
    RepositoryCollection,
    StatisticsRepositories,
)

if TYPE_CHECKING:
    from sqlite3 import Connection as SQLiteConnection
    from types import TracebackType

    from sqlalchemy.engine import Engine
    from sqlalchemy.pool import ConnectionPoolEntry

log = getLogger(__name__)


class StartupError(RuntimeError):
    """Raised when a SQLAlchemy unit of work is used before initialisation."""


@dataclass(slots=True)
class _AdapterState:
    _engine: Engine | None = None
    _session_factory: sessionmaker[Session] | None = None

    @property
    def engine(self) -> Engine | None:
        return self._engine

    @engine.setter
    def engine(self, value: Engine | None) -> None:
        self._session_factory = None
        self._engine = value

    @property
    def session_factory(self) -> sessionmaker[Session]:
        if self._engine is None:
            raise StartupError(
                "SQLAlchemy adapter not initialised. Call osudb.adapters.sqlalchemy."
                "unit_of_work.startup() before requesting a unit of work."
            )
        if self._session_factory is None:
            self._session_factory = sessionmaker(bind=self._engine, expire_on_commit=False)
        return self._session_factory


_STATE = _AdapterState()


def _enable_sqlite_foreign_keys(
    dbapi_connection: SQLiteConnection,
    connection_record: ConnectionPoolEntry,
) -> None:
    _ = connection_record
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_store_engine(database_uri: str | None = None) -> Engine:
    """Create an engine for ``database_uri``; SQLite connections enforce foreign keys."""

    engine = create_engine(database_uri or get_database_config().uri, future=True)
    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> None:
    """Initialise the engine, migrate the schema to head and prepare sessions."""

    if _STATE.engine is not None and not force:
        raise StartupError(
            "SQLAlchemy adapter already initialised. Pass force=True to reconfigure."
        )

    resolved_engine = engine or create_store_engine(database_uri)
    upgrade_head(engine=resolved_engine)
    log.info("Store ready at %s", resolved_engine.url.render_as_string(hide_password=True))
    _STATE.engine = resolved_engine


def configured_engine() -> Engine | None:
    """Return the engine currently managed by the adapter (if any)."""

    return _STATE.engine


def is_started() -> bool:
    return _STATE.engine is not None


def shutdown() -> None:
    """Dispose the managed engine and reset state."""

    if _STATE.engine is not None:
        _STATE.engine.dispose()
    _STATE.engine = None


class BaseSqlAlchemyUnitOfWork[TRepositories: RepositoryCollection](ABC):
    """Session-per-context unit of work with a pluggable repository collection."""

    def __init__(self) -> None:
        self.session_factory: sessionmaker[Session] = _STATE.session_factory
        self._session: Session | None = None

    @abstractmethod
    def _build_repositories(self, session: Session) -> TRepositories: ...

    def __enter__(self) -> BaseSqlAlchemyUnitOfWork[TRepositories]:
        self.session = self.session_factory()
        self._repositories = self._build_repositories(self.session)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        if exc_type is not None:
            self.rollback()
        self.session.close()
        self.session = None
        return False

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()

    @property
    def repositories(self) -> TRepositories:
        if self._session is None:
            raise StartupError("Unit of work session not initialised")
        return self._repositories

    @property
    def session(self) -> Session:
        if self._session is None:
            raise StartupError("Unit of work session not initialised")
        return self._session

    @session.setter
    def session(self, session: Session | None) -> None:
        if self._session is not None and session is not None:
            raise StartupError("Unit of work session already initialised")
        self._session = session


class SqlAlchemyCatalogUnitOfWork(BaseSqlAlchemyUnitOfWork[CatalogRepositories]):
    """Unit of work handing out the catalog's conditional-insert repositories."""

    def _build_repositories(self, session: Session) -> CatalogRepositories:
        return CatalogRepositories(
            countries=SqlAlchemyCountryRepository(session),
            artists=SqlAlchemyArtistRepository(session),
            songs=SqlAlchemySongRepository(session),
            players=SqlAlchemyPlayerRepository(session),
            beatmapsets=SqlAlchemyBeatmapSetRepository(session),
            hit_objects=SqlAlchemyBeatmapHitObjectsRepository(session),
            beatmaps=SqlAlchemyBeatmapRepository(session),
            standard_beatmaps=SqlAlchemyStandardBeatmapRepository(session),
            matches=SqlAlchemyMatchRepository(session),
            scores=SqlAlchemyScoreRepository(session),
        )


class SqlAlchemyStatisticsUnitOfWork(BaseSqlAlchemyUnitOfWork[StatisticsRepositories]):
    """Unit of work for read-only catalog reports."""

    def _build_repositories(self, session: Session) -> StatisticsRepositories:
        return StatisticsRepositories(statistics=SqlAlchemyStatisticsRepository(session))


if TYPE_CHECKING:
    from osudb.domain.ports.unit_of_work import CatalogUnitOfWork, StatisticsUnitOfWork

    _uow_check: CatalogUnitOfWork = SqlAlchemyCatalogUnitOfWork()
    _statistics_uow_check: StatisticsUnitOfWork = SqlAlchemyStatisticsUnitOfWork()
