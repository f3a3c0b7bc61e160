"""Read-only reports over the stored catalog."""

from __future__ import annotations

import math
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

    from osudb.domain.model import BeatmapSetSummary, ModifierAccuracy, Player, PlayerAverage
    from osudb.domain.ports import StatisticsUnitOfWork

log = getLogger(__name__)

type StatisticsUnitOfWorkFactory = Callable[[], StatisticsUnitOfWork]


def _require_finite(value: float, name: str) -> float:
    if math.isnan(value) or math.isinf(value):
        raise ValueError(f"{name} must be a finite number, got {value}")
    return value


class CatalogReports:
    """Validate report parameters and run the matching store query.

    Every report opens its own unit of work and never writes.
    """

    def __init__(self, unit_of_work_factory: StatisticsUnitOfWorkFactory) -> None:
        self.unit_of_work_factory = unit_of_work_factory

    def beatmapsets_by_bpm(
        self,
        lower: float | None = None,
        upper: float | None = None,
    ) -> list[BeatmapSetSummary]:
        """Beatmap sets whose song tempo lies strictly between the bounds.

        A missing bound leaves that side open; songs without a bpm never match.
        """

        if lower is not None:
            _require_finite(lower, "lower")
        if upper is not None:
            _require_finite(upper, "upper")
        if lower is not None and upper is not None and lower >= upper:
            raise ValueError(f"lower bound {lower} must be below upper bound {upper}")
        with self.unit_of_work_factory() as uow:
            summaries = uow.repositories.statistics.beatmapsets_by_bpm(lower, upper)
        log.info("%s beatmap set(s) between %s and %s bpm", len(summaries), lower, upper)
        return summaries

    def beatmapset(self, beatmap_set_id: int) -> BeatmapSetSummary | None:
        if beatmap_set_id <= 0:
            raise ValueError(f"beatmap_set_id must be a positive integer, got {beatmap_set_id}")
        with self.unit_of_work_factory() as uow:
            return uow.repositories.statistics.beatmapset_summary(beatmap_set_id)

    def players_with_average_score_above(self, threshold: float) -> list[PlayerAverage]:
        _require_finite(threshold, "threshold")
        with self.unit_of_work_factory() as uow:
            return uow.repositories.statistics.players_with_average_score_above(threshold)

    def player_average_accuracies(self) -> list[PlayerAverage]:
        """Average accuracy of every stored player; ``None`` for players without scores."""

        with self.unit_of_work_factory() as uow:
            return uow.repositories.statistics.player_average_accuracies()

    def player_average_accuracy(self, player_id: int) -> PlayerAverage | None:
        if player_id <= 0:
            raise ValueError(f"player_id must be a positive integer, got {player_id}")
        for average in self.player_average_accuracies():
            if average.player_id == player_id:
                return average
        return None

    def best_modifiers_by_accuracy(self) -> list[ModifierAccuracy]:
        """Modifier combinations sharing the highest average accuracy."""

        with self.unit_of_work_factory() as uow:
            return uow.repositories.statistics.best_modifiers_by_accuracy()

    def players_with_every_standard_beatmap(self) -> list[Player]:
        """Players holding a score on every stored standard beatmap."""

        with self.unit_of_work_factory() as uow:
            return uow.repositories.statistics.players_with_every_standard_beatmap()
