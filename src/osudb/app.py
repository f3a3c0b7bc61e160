"""Application orchestration entry points."""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from logging import getLogger
from typing import TYPE_CHECKING

from osudb.adapters.osu import OsuClient
from osudb.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyCatalogUnitOfWork,
    SqlAlchemyStatisticsUnitOfWork,
    is_started,
    startup,
)
from osudb.domain.reconciliation import ReconciliationEngine
from osudb.domain.reporting import CatalogReports

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Awaitable, Callable

    from osudb.domain.model import BeatmapSetSummary, ModifierAccuracy, Player, PlayerAverage
    from osudb.domain.ports import OsuApi
    from osudb.domain.reconciliation import (
        BeatmapSetManualRequest,
        SongRequest,
        UnitOfWorkFactory,
    )
    from osudb.domain.reporting import StatisticsUnitOfWorkFactory

log = getLogger(__name__)


@asynccontextmanager
async def reconciliation_engine(
    *,
    api: OsuApi | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    offline: bool = False,
) -> AsyncIterator[ReconciliationEngine]:
    """Yield an engine bound to ``api`` or to a freshly authenticated client.

    A client created here is owned by the context and closed on exit; an
    injected ``api`` is left to its caller. With ``offline`` and no ``api`` the
    engine only serves operations that never call the platform.
    """

    if not is_started():
        startup()
    effective_uow = unit_of_work_factory or SqlAlchemyCatalogUnitOfWork
    if api is not None or offline:
        yield ReconciliationEngine(api, effective_uow)
        return
    async with OsuClient() as client:
        yield ReconciliationEngine(client, effective_uow)


def _run(
    operation: Callable[[ReconciliationEngine], Awaitable[int]],
    *,
    api: OsuApi | None,
    unit_of_work_factory: UnitOfWorkFactory | None,
    offline: bool = False,
) -> int:
    async def _main() -> int:
        async with reconciliation_engine(
            api=api,
            unit_of_work_factory=unit_of_work_factory,
            offline=offline,
        ) as engine:
            return await operation(engine)

    return asyncio.run(_main())


def add_beatmapset(
    beatmapset_id: int,
    *,
    api: OsuApi | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> int:
    log.info("Adding beatmap set %s", beatmapset_id)
    return _run(
        lambda engine: engine.add_beatmapset_auto(beatmapset_id),
        api=api,
        unit_of_work_factory=unit_of_work_factory,
    )


def add_beatmap(
    beatmap_id: int,
    *,
    api: OsuApi | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> int:
    log.info("Adding beatmap %s", beatmap_id)
    return _run(
        lambda engine: engine.add_beatmap(beatmap_id),
        api=api,
        unit_of_work_factory=unit_of_work_factory,
    )


def add_match(
    match_id: int,
    *,
    tournament_id: int | None = None,
    num_warmups: int = 0,
    api: OsuApi | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> int:
    log.info(
        "Adding match %s: tournament_id=%s, num_warmups=%s",
        match_id,
        tournament_id,
        num_warmups,
    )
    return _run(
        lambda engine: engine.add_match(
            match_id,
            tournament_id=tournament_id,
            num_warmups=num_warmups,
        ),
        api=api,
        unit_of_work_factory=unit_of_work_factory,
    )


def add_beatmapset_manual(
    request: BeatmapSetManualRequest,
    *,
    api: OsuApi | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> int:
    log.info("Adding beatmap set %s from supplied details", request.beatmap_set_id)
    return _run(
        lambda engine: engine.add_beatmapset_manual(request),
        api=api,
        unit_of_work_factory=unit_of_work_factory,
        offline=True,
    )


def add_song(
    request: SongRequest,
    *,
    api: OsuApi | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> int:
    log.info("Adding song %r by %r", request.name, request.artist_name)
    return _run(
        lambda engine: engine.add_song(request),
        api=api,
        unit_of_work_factory=unit_of_work_factory,
        offline=True,
    )


def catalog_reports(
    unit_of_work_factory: StatisticsUnitOfWorkFactory | None = None,
) -> CatalogReports:
    if not is_started():
        startup()
    return CatalogReports(unit_of_work_factory or SqlAlchemyStatisticsUnitOfWork)


def beatmapsets_by_bpm(
    lower: float | None = None,
    upper: float | None = None,
    *,
    unit_of_work_factory: StatisticsUnitOfWorkFactory | None = None,
) -> list[BeatmapSetSummary]:
    return catalog_reports(unit_of_work_factory).beatmapsets_by_bpm(lower, upper)


def players_with_average_score_above(
    threshold: float,
    *,
    unit_of_work_factory: StatisticsUnitOfWorkFactory | None = None,
) -> list[PlayerAverage]:
    return catalog_reports(unit_of_work_factory).players_with_average_score_above(threshold)


def player_average_accuracies(
    player_id: int | None = None,
    *,
    unit_of_work_factory: StatisticsUnitOfWorkFactory | None = None,
) -> list[PlayerAverage]:
    reports = catalog_reports(unit_of_work_factory)
    if player_id is None:
        return reports.player_average_accuracies()
    average = reports.player_average_accuracy(player_id)
    return [average] if average is not None else []


def best_modifiers_by_accuracy(
    *,
    unit_of_work_factory: StatisticsUnitOfWorkFactory | None = None,
) -> list[ModifierAccuracy]:
    return catalog_reports(unit_of_work_factory).best_modifiers_by_accuracy()


def players_with_every_standard_beatmap(
    *,
    unit_of_work_factory: StatisticsUnitOfWorkFactory | None = None,
) -> list[Player]:
    return catalog_reports(unit_of_work_factory).players_with_every_standard_beatmap()
