"""Reconciliation of osu! resources into the catalog store."""

from __future__ import annotations

from .contracts import BeatmapSetManualRequest, MapperDetails, SongRequest
from .engine import ReconciliationEngine, UnitOfWorkFactory
from .errors import NoScoredGamesError, ReconciliationError, RemoteEntityNotFoundError

__all__ = [
    "BeatmapSetManualRequest",
    "MapperDetails",
    "NoScoredGamesError",
    "ReconciliationEngine",
    "ReconciliationError",
    "RemoteEntityNotFoundError",
    "SongRequest",
    "UnitOfWorkFactory",
]
