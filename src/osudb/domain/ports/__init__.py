"""Ports consumed by the reconciliation engine and the catalog reports."""

from __future__ import annotations

from .fetching import NOT_FOUND, Fetched, NotFound, OsuApi, UserLookupKey
from .persistence import StatisticsRepository
from .unit_of_work import (
    CatalogRepositories,
    CatalogUnitOfWork,
    RepositoryCollection,
    StatisticsRepositories,
    StatisticsUnitOfWork,
    UnitOfWork,
)

__all__ = [
    "NOT_FOUND",
    "CatalogRepositories",
    "CatalogUnitOfWork",
    "Fetched",
    "NotFound",
    "OsuApi",
    "RepositoryCollection",
    "StatisticsRepositories",
    "StatisticsRepository",
    "StatisticsUnitOfWork",
    "UnitOfWork",
    "UserLookupKey",
]
