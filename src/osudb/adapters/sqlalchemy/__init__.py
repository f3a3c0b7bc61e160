"""SQLAlchemy adapter package for osudb."""

from __future__ import annotations

from .mappings import metadata
from .repositories import (
    SqlAlchemyArtistRepository,
    SqlAlchemyBeatmapHitObjectsRepository,
    SqlAlchemyBeatmapRepository,
    SqlAlchemyBeatmapSetRepository,
    SqlAlchemyConditionalRepository,
    SqlAlchemyCountryRepository,
    SqlAlchemyMatchRepository,
    SqlAlchemyNamedRepository,
    SqlAlchemyPlayerRepository,
    SqlAlchemyScoreRepository,
    SqlAlchemySongRepository,
    SqlAlchemyStandardBeatmapRepository,
)
from .statistics import SqlAlchemyStatisticsRepository
from .unit_of_work import (
    SqlAlchemyCatalogUnitOfWork,
    SqlAlchemyStatisticsUnitOfWork,
    StartupError,
    create_store_engine,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyArtistRepository",
    "SqlAlchemyBeatmapHitObjectsRepository",
    "SqlAlchemyBeatmapRepository",
    "SqlAlchemyBeatmapSetRepository",
    "SqlAlchemyCatalogUnitOfWork",
    "SqlAlchemyConditionalRepository",
    "SqlAlchemyCountryRepository",
    "SqlAlchemyMatchRepository",
    "SqlAlchemyNamedRepository",
    "SqlAlchemyPlayerRepository",
    "SqlAlchemyScoreRepository",
    "SqlAlchemySongRepository",
    "SqlAlchemyStandardBeatmapRepository",
    "SqlAlchemyStatisticsRepository",
    "SqlAlchemyStatisticsUnitOfWork",
    "StartupError",
    "create_store_engine",
    "metadata",
    "shutdown",
    "startup",
]
