"""Unit-of-work abstractions for coordinating repositories."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from types import TracebackType

    from osudb.domain.ports.persistence import (
        ArtistRepository,
        BeatmapHitObjectsRepository,
        BeatmapRepository,
        BeatmapSetRepository,
        CountryRepository,
        MatchRepository,
        PlayerRepository,
        ScoreRepository,
        SongRepository,
        StandardBeatmapRepository,
        StatisticsRepository,
    )


@runtime_checkable
class RepositoryCollection(Protocol):
    """Marker protocol for groups of repositories managed together."""


@runtime_checkable
class UnitOfWork[TRepositories: RepositoryCollection](Protocol):
    """Generic unit-of-work boundary around a repository collection."""

    @property
    def repositories(self) -> TRepositories: ...

    def __enter__(self) -> UnitOfWork[TRepositories]: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...


@dataclass(slots=True)
class CatalogRepositories(RepositoryCollection):
    """Repositories touched by beatmap and match reconciliation."""

    countries: CountryRepository
    artists: ArtistRepository
    songs: SongRepository
    players: PlayerRepository
    beatmapsets: BeatmapSetRepository
    hit_objects: BeatmapHitObjectsRepository
    beatmaps: BeatmapRepository
    standard_beatmaps: StandardBeatmapRepository
    matches: MatchRepository
    scores: ScoreRepository


type CatalogUnitOfWork = UnitOfWork[CatalogRepositories]


@dataclass(slots=True)
class StatisticsRepositories(RepositoryCollection):
    """Read-side queries over the catalog."""

    statistics: StatisticsRepository


type StatisticsUnitOfWork = UnitOfWork[StatisticsRepositories]
