"""SQLAlchemy Core tables for the osudb catalog."""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import (
    BigInteger,
    Boolean,
    Column,
    DateTime,
    Dialect,
    Float,
    ForeignKey,
    ForeignKeyConstraint,
    Integer,
    LargeBinary,
    MetaData,
    PrimaryKeyConstraint,
    String,
    Table,
    TypeDecorator,
    UniqueConstraint,
)


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


metadata = MetaData(
    naming_convention={
        "ix": "ix_%(column_0_label)s",
        "uq": "uq_%(table_name)s_%(column_0_label)s",
        "ck": "ck_%(table_name)s_%(constraint_name)s",
        "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
        "pk": "pk_%(table_name)s",
    }
)

country_table = Table(
    "country",
    metadata,
    Column("country_name", String, primary_key=True),
    Column("flag", LargeBinary, nullable=False),
)

artist_table = Table(
    "artist",
    metadata,
    Column("artist_id", Integer, primary_key=True, autoincrement=True),
    Column("name", String, nullable=False, unique=True),
    Column("is_featured", Boolean, nullable=False, default=False),
)

song_table = Table(
    "song",
    metadata,
    Column("song_id", Integer, primary_key=True, autoincrement=True),
    Column("name", String, nullable=False, unique=True),
    Column("artist_id", Integer, ForeignKey("artist.artist_id"), nullable=False),
    Column("bpm", Float, nullable=True),
    Column("genre", String, nullable=True),
)

player_table = Table(
    "player",
    metadata,
    Column("player_id", BigInteger, primary_key=True, autoincrement=False),
    Column("username", String, nullable=False),
    Column("country_name", String, ForeignKey("country.country_name"), nullable=False),
    Column("join_date", UTCDateTime, nullable=False),
    Column("rank", Integer, nullable=True),
)

beatmap_set_table = Table(
    "beatmap_set",
    metadata,
    Column("beatmap_set_id", BigInteger, primary_key=True, autoincrement=False),
    Column("mapper_id", BigInteger, ForeignKey("player.player_id"), nullable=False),
    Column("song_id", Integer, ForeignKey("song.song_id"), nullable=False),
    Column("creation_date", UTCDateTime, nullable=True),
)

beatmap_hit_objects_table = Table(
    "beatmap_hit_objects",
    metadata,
    Column("hit_objects_url", String, primary_key=True),
    Column("max_combo", Integer, nullable=False),
    Column("hp_drain", Float, nullable=False),
    Column("stars", Float, nullable=False),
)

beatmap_table = Table(
    "beatmap",
    metadata,
    Column(
        "beatmap_set_id",
        BigInteger,
        ForeignKey("beatmap_set.beatmap_set_id"),
        nullable=False,
    ),
    Column("difficulty_name", String, nullable=False),
    Column("max_combo", Integer, nullable=False),
    Column("hp_drain", Float, nullable=False),
    Column(
        "hit_objects_url",
        String,
        ForeignKey("beatmap_hit_objects.hit_objects_url"),
        nullable=False,
    ),
    Column("mapper_id", BigInteger, ForeignKey("player.player_id"), nullable=False),
    PrimaryKeyConstraint("beatmap_set_id", "difficulty_name"),
)

standard_beatmap_table = Table(
    "standard_beatmap",
    metadata,
    Column("beatmap_set_id", BigInteger, nullable=False),
    Column("difficulty_name", String, nullable=False),
    Column("circle_size", Float, nullable=True),
    PrimaryKeyConstraint("beatmap_set_id", "difficulty_name"),
    ForeignKeyConstraint(
        ["beatmap_set_id", "difficulty_name"],
        ["beatmap.beatmap_set_id", "beatmap.difficulty_name"],
    ),
)

match_table = Table(
    "match",
    metadata,
    Column("match_id", BigInteger, primary_key=True, autoincrement=False),
    Column("round", String, nullable=True),
    Column("tournament_id", Integer, nullable=True),
)

score_table = Table(
    "score",
    metadata,
    Column("score_id", Integer, primary_key=True, autoincrement=True),
    Column("match_id", BigInteger, ForeignKey("match.match_id"), nullable=False),
    Column("game_id", BigInteger, nullable=False),
    Column("player_id", BigInteger, ForeignKey("player.player_id"), nullable=False),
    Column("beatmap_set_id", BigInteger, nullable=False),
    Column("difficulty_name", String, nullable=False),
    Column("total_score", BigInteger, nullable=False),
    Column("combo", Integer, nullable=False),
    Column("accuracy", Float, nullable=False),
    Column("modifier", String, nullable=False, default=""),
    Column("date_set", UTCDateTime, nullable=True),
    ForeignKeyConstraint(
        ["beatmap_set_id", "difficulty_name"],
        ["beatmap.beatmap_set_id", "beatmap.difficulty_name"],
    ),
    UniqueConstraint("match_id", "game_id", "player_id"),
)

