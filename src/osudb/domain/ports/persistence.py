"""Ports for persisting reconciled rows."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from osudb.domain.model import (
    Artist,
    Beatmap,
    BeatmapHitObjects,
    BeatmapSet,
    BeatmapSetSummary,
    Country,
    Match,
    ModifierAccuracy,
    Player,
    PlayerAverage,
    Score,
    Song,
    StandardBeatmap,
)


@runtime_checkable
class ConditionalRepository[TRecord](Protocol):
    """Insert-only store for rows identified by a natural key.

    ``add_if_absent`` inserts ``record`` unless a row with the same key exists
    and returns the number of rows inserted (0 or 1).
    """

    def add_if_absent(self, record: TRecord) -> int: ...

    def exists(self, record: TRecord) -> bool: ...


@runtime_checkable
class NamedRepository[TRecord](ConditionalRepository[TRecord], Protocol):
    """Repository for rows deduplicated by name with a store-generated id."""

    def id_for_name(self, name: str) -> int | None: ...


@runtime_checkable
class CountryRepository(ConditionalRepository[Country], Protocol): ...


@runtime_checkable
class ArtistRepository(NamedRepository[Artist], Protocol): ...


@runtime_checkable
class SongRepository(NamedRepository[Song], Protocol): ...


@runtime_checkable
class PlayerRepository(ConditionalRepository[Player], Protocol): ...


@runtime_checkable
class BeatmapSetRepository(ConditionalRepository[BeatmapSet], Protocol): ...


@runtime_checkable
class BeatmapHitObjectsRepository(ConditionalRepository[BeatmapHitObjects], Protocol): ...


@runtime_checkable
class BeatmapRepository(ConditionalRepository[Beatmap], Protocol): ...


@runtime_checkable
class StandardBeatmapRepository(ConditionalRepository[StandardBeatmap], Protocol): ...


@runtime_checkable
class MatchRepository(ConditionalRepository[Match], Protocol): ...


@runtime_checkable
class ScoreRepository(ConditionalRepository[Score], Protocol): ...


@runtime_checkable
class StatisticsRepository(Protocol):
    """Read-only aggregate queries over the stored catalog.

    Bounds are exclusive and already validated by the caller.
    """

    def beatmapsets_by_bpm(
        self,
        lower: float | None,
        upper: float | None,
    ) -> list[BeatmapSetSummary]: ...

    def beatmapset_summary(self, beatmap_set_id: int) -> BeatmapSetSummary | None: ...

    def players_with_average_score_above(self, threshold: float) -> list[PlayerAverage]: ...

    def player_average_accuracies(self) -> list[PlayerAverage]: ...

    def best_modifiers_by_accuracy(self) -> list[ModifierAccuracy]: ...

    def players_with_every_standard_beatmap(self) -> list[Player]: ...
