"""Conditional-insert repositories backed by SQLAlchemy sessions."""

from __future__ import annotations

from dataclasses import fields
from logging import getLogger
from typing import TYPE_CHECKING, Any, ClassVar, cast

from sqlalchemy import and_, insert, literal, select
from sqlalchemy.exc import IntegrityError

from osudb.adapters.sqlalchemy.mappings import (
    artist_table,
    beatmap_hit_objects_table,
    beatmap_set_table,
    beatmap_table,
    country_table,
    match_table,
    player_table,
    score_table,
    song_table,
    standard_beatmap_table,
)
from osudb.domain.model import (
    Artist,
    Beatmap,
    BeatmapHitObjects,
    BeatmapSet,
    Country,
    Match,
    Player,
    Score,
    Song,
    StandardBeatmap,
)

if TYPE_CHECKING:
    from sqlalchemy import ColumnElement, CursorResult, Select, Table
    from sqlalchemy.orm import Session

log = getLogger(__name__)


class SqlAlchemyConditionalRepository[TRecord]:
    """Insert rows unless a row with the same key already exists.

    The insert is a single ``INSERT ... SELECT ... WHERE NOT EXISTS`` statement.
    The unique or primary key constraint on ``key_columns`` settles races with
    concurrent writers: a violation is rolled back and reported as "already
    present" once the key is confirmed to exist.
    """

    table: ClassVar[Table]
    key_columns: ClassVar[tuple[str, ...]]
    generated_column: ClassVar[str | None] = None

    def __init__(self, session: Session) -> None:
        self.session = session

    def add_if_absent(self, record: TRecord) -> int:
        values = self._values(record)
        selected = select(
            *(
                literal(value, type_=self.table.c[name].type).label(name)
                for name, value in values.items()
            )
        ).where(~self._key_query(values).exists())
        stmt = insert(self.table).from_select(list(values), selected)
        try:
            result = cast("CursorResult[Any]", self.session.execute(stmt))
        except IntegrityError:
            self.session.rollback()
            if self.exists(record):
                log.debug("Concurrent insert into %s won the race for %r", self.table.name, record)
                return 0
            raise
        return result.rowcount

    def exists(self, record: TRecord) -> bool:
        stmt = self._key_query(self._values(record)).limit(1)
        return self.session.execute(stmt).first() is not None

    def _values(self, record: TRecord) -> dict[str, object]:
        values = {field.name: getattr(record, field.name) for field in fields(record)}  # type: ignore[arg-type]
        if self.generated_column is not None and values.get(self.generated_column) is None:
            del values[self.generated_column]
        return values

    def _key_query(self, values: dict[str, object]) -> Select[tuple[int]]:
        condition: ColumnElement[bool] = and_(
            *(self.table.c[name] == values[name] for name in self.key_columns)
        )
        return select(literal(1)).select_from(self.table).where(condition).correlate(None)


class SqlAlchemyNamedRepository[TRecord](SqlAlchemyConditionalRepository[TRecord]):
    """Rows deduplicated by ``name`` whose id is generated on insert."""

    key_columns = ("name",)

    def id_for_name(self, name: str) -> int | None:
        id_column = self.table.c[cast("str", self.generated_column)]
        stmt = select(id_column).where(self.table.c.name == name)
        return self.session.execute(stmt).scalar_one_or_none()


class SqlAlchemyCountryRepository(SqlAlchemyConditionalRepository[Country]):
    table = country_table
    key_columns = ("country_name",)


class SqlAlchemyArtistRepository(SqlAlchemyNamedRepository[Artist]):
    table = artist_table
    generated_column = "artist_id"


class SqlAlchemySongRepository(SqlAlchemyNamedRepository[Song]):
    table = song_table
    generated_column = "song_id"


class SqlAlchemyPlayerRepository(SqlAlchemyConditionalRepository[Player]):
    table = player_table
    key_columns = ("player_id",)


class SqlAlchemyBeatmapSetRepository(SqlAlchemyConditionalRepository[BeatmapSet]):
    table = beatmap_set_table
    key_columns = ("beatmap_set_id",)


class SqlAlchemyBeatmapHitObjectsRepository(SqlAlchemyConditionalRepository[BeatmapHitObjects]):
    table = beatmap_hit_objects_table
    key_columns = ("hit_objects_url",)


class SqlAlchemyBeatmapRepository(SqlAlchemyConditionalRepository[Beatmap]):
    table = beatmap_table
    key_columns = ("beatmap_set_id", "difficulty_name")


class SqlAlchemyStandardBeatmapRepository(SqlAlchemyConditionalRepository[StandardBeatmap]):
    table = standard_beatmap_table
    key_columns = ("beatmap_set_id", "difficulty_name")


class SqlAlchemyMatchRepository(SqlAlchemyConditionalRepository[Match]):
    table = match_table
    key_columns = ("match_id",)


class SqlAlchemyScoreRepository(SqlAlchemyConditionalRepository[Score]):
    table = score_table
    key_columns = ("match_id", "game_id", "player_id")
    generated_column = "score_id"


if TYPE_CHECKING:
    from osudb.domain.ports.persistence import ArtistRepository, ScoreRepository

    _artist_check: ArtistRepository = SqlAlchemyArtistRepository(cast("Session", None))
    _score_check: ScoreRepository = SqlAlchemyScoreRepository(cast("Session", None))
