"""Aggregate read queries over the stored catalog."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, cast

from sqlalchemy import func, literal, select

from osudb.adapters.sqlalchemy.mappings import (
    artist_table,
    beatmap_set_table,
    player_table,
    score_table,
    song_table,
    standard_beatmap_table,
)
from osudb.domain.model import BeatmapSetSummary, ModifierAccuracy, Player, PlayerAverage

if TYPE_CHECKING:
    from sqlalchemy import Row, Select
    from sqlalchemy.orm import Session


def _summary_query() -> Select[Any]:
    joined = (
        beatmap_set_table.join(
            player_table,
            beatmap_set_table.c.mapper_id == player_table.c.player_id,
        )
        .join(song_table, beatmap_set_table.c.song_id == song_table.c.song_id)
        .join(artist_table, song_table.c.artist_id == artist_table.c.artist_id)
    )
    return select(
        beatmap_set_table.c.beatmap_set_id,
        beatmap_set_table.c.mapper_id,
        player_table.c.username,
        beatmap_set_table.c.song_id,
        song_table.c.name.label("song_name"),
        artist_table.c.name.label("artist_name"),
        song_table.c.bpm,
        song_table.c.genre,
        beatmap_set_table.c.creation_date,
    ).select_from(joined)


def _summary(row: Row[Any]) -> BeatmapSetSummary:
    return BeatmapSetSummary(
        beatmap_set_id=row.beatmap_set_id,
        mapper_id=row.mapper_id,
        mapper_username=row.username,
        song_id=row.song_id,
        song_name=row.song_name,
        artist_name=row.artist_name,
        bpm=row.bpm,
        genre=row.genre,
        creation_date=row.creation_date,
    )


def _player_average(row: Row[Any]) -> PlayerAverage:
    average = cast("float | None", row.average)
    return PlayerAverage(
        player_id=row.player_id,
        username=row.username,
        average=float(average) if average is not None else None,
    )


class SqlAlchemyStatisticsRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def beatmapsets_by_bpm(
        self,
        lower: float | None,
        upper: float | None,
    ) -> list[BeatmapSetSummary]:
        stmt = _summary_query().where(song_table.c.bpm.is_not(None))
        if lower is not None:
            stmt = stmt.where(song_table.c.bpm > lower)
        if upper is not None:
            stmt = stmt.where(song_table.c.bpm < upper)
        stmt = stmt.order_by(song_table.c.bpm, beatmap_set_table.c.beatmap_set_id)
        return [_summary(row) for row in self.session.execute(stmt)]

    def beatmapset_summary(self, beatmap_set_id: int) -> BeatmapSetSummary | None:
        stmt = _summary_query().where(beatmap_set_table.c.beatmap_set_id == beatmap_set_id)
        row = self.session.execute(stmt).first()
        return _summary(row) if row is not None else None

    def players_with_average_score_above(self, threshold: float) -> list[PlayerAverage]:
        average_score = func.avg(score_table.c.total_score)
        stmt = (
            select(
                player_table.c.player_id,
                player_table.c.username,
                average_score.label("average"),
            )
            .select_from(
                score_table.join(player_table, score_table.c.player_id == player_table.c.player_id)
            )
            .group_by(player_table.c.player_id, player_table.c.username)
            .having(average_score > threshold)
            .order_by(average_score.desc(), player_table.c.player_id)
        )
        return [_player_average(row) for row in self.session.execute(stmt)]

    def player_average_accuracies(self) -> list[PlayerAverage]:
        stmt = (
            select(
                player_table.c.player_id,
                player_table.c.username,
                func.avg(score_table.c.accuracy).label("average"),
            )
            .select_from(
                player_table.outerjoin(
                    score_table,
                    score_table.c.player_id == player_table.c.player_id,
                )
            )
            .group_by(player_table.c.player_id, player_table.c.username)
            .order_by(player_table.c.player_id)
        )
        return [_player_average(row) for row in self.session.execute(stmt)]

    def best_modifiers_by_accuracy(self) -> list[ModifierAccuracy]:
        per_modifier = (
            select(
                score_table.c.modifier,
                func.avg(score_table.c.accuracy).label("average_accuracy"),
            )
            .group_by(score_table.c.modifier)
            .cte("modifier_accuracy")
        )
        best = select(func.max(per_modifier.c.average_accuracy)).scalar_subquery()
        stmt = (
            select(per_modifier.c.modifier, per_modifier.c.average_accuracy)
            .where(per_modifier.c.average_accuracy == best)
            .order_by(per_modifier.c.modifier)
        )
        return [
            ModifierAccuracy(modifier=row.modifier, average_accuracy=float(row.average_accuracy))
            for row in self.session.execute(stmt)
        ]

    def players_with_every_standard_beatmap(self) -> list[Player]:
        standard = standard_beatmap_table
        has_standard = self.session.execute(select(literal(1)).select_from(standard).limit(1))
        if has_standard.first() is None:
            return []

        scored = (
            select(literal(1))
            .select_from(score_table)
            .where(
                score_table.c.player_id == player_table.c.player_id,
                score_table.c.beatmap_set_id == standard.c.beatmap_set_id,
                score_table.c.difficulty_name == standard.c.difficulty_name,
            )
        )
        unscored = select(literal(1)).select_from(standard).where(~scored.exists())
        stmt = select(player_table).where(~unscored.exists()).order_by(player_table.c.player_id)
        return [
            Player(
                player_id=row.player_id,
                username=row.username,
                country_name=row.country_name,
                join_date=row.join_date,
                rank=row.rank,
            )
            for row in self.session.execute(stmt)
        ]


if TYPE_CHECKING:
    from osudb.domain.ports.persistence import StatisticsRepository

    _statistics_check: StatisticsRepository = SqlAlchemyStatisticsRepository(
        cast("Session", None)
    )
