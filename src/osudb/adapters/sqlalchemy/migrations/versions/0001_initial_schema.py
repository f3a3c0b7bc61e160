"""Initial catalog schema.

Revision ID: 0001
Revises:
Create Date: 2026-10-19
"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

from osudb.adapters.sqlalchemy.mappings import UTCDateTime

revision: str = "0001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "country",
        sa.Column("country_name", sa.String(), nullable=False),
        sa.Column("flag", sa.LargeBinary(), nullable=False),
        sa.PrimaryKeyConstraint("country_name", name="pk_country"),
    )
    op.create_table(
        "artist",
        sa.Column("artist_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("is_featured", sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint("artist_id", name="pk_artist"),
        sa.UniqueConstraint("name", name="uq_artist_name"),
    )
    op.create_table(
        "beatmap_hit_objects",
        sa.Column("hit_objects_url", sa.String(), nullable=False),
        sa.Column("max_combo", sa.Integer(), nullable=False),
        sa.Column("hp_drain", sa.Float(), nullable=False),
        sa.Column("stars", sa.Float(), nullable=False),
        sa.PrimaryKeyConstraint("hit_objects_url", name="pk_beatmap_hit_objects"),
    )
    op.create_table(
        "match",
        sa.Column("match_id", sa.BigInteger(), autoincrement=False, nullable=False),
        sa.Column("round", sa.String(), nullable=True),
        sa.Column("tournament_id", sa.Integer(), nullable=True),
        sa.PrimaryKeyConstraint("match_id", name="pk_match"),
    )
    op.create_table(
        "song",
        sa.Column("song_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("artist_id", sa.Integer(), nullable=False),
        sa.Column("bpm", sa.Float(), nullable=True),
        sa.Column("genre", sa.String(), nullable=True),
        sa.ForeignKeyConstraint(
            ["artist_id"], ["artist.artist_id"], name="fk_song_artist_id_artist"
        ),
        sa.PrimaryKeyConstraint("song_id", name="pk_song"),
        sa.UniqueConstraint("name", name="uq_song_name"),
    )
    op.create_table(
        "player",
        sa.Column("player_id", sa.BigInteger(), autoincrement=False, nullable=False),
        sa.Column("username", sa.String(), nullable=False),
        sa.Column("country_name", sa.String(), nullable=False),
        sa.Column("join_date", UTCDateTime(), nullable=False),
        sa.Column("rank", sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(
            ["country_name"], ["country.country_name"], name="fk_player_country_name_country"
        ),
        sa.PrimaryKeyConstraint("player_id", name="pk_player"),
    )
    op.create_table(
        "beatmap_set",
        sa.Column("beatmap_set_id", sa.BigInteger(), autoincrement=False, nullable=False),
        sa.Column("mapper_id", sa.BigInteger(), nullable=False),
        sa.Column("song_id", sa.Integer(), nullable=False),
        sa.Column("creation_date", UTCDateTime(), nullable=True),
        sa.ForeignKeyConstraint(
            ["mapper_id"], ["player.player_id"], name="fk_beatmap_set_mapper_id_player"
        ),
        sa.ForeignKeyConstraint(["song_id"], ["song.song_id"], name="fk_beatmap_set_song_id_song"),
        sa.PrimaryKeyConstraint("beatmap_set_id", name="pk_beatmap_set"),
    )
    op.create_table(
        "beatmap",
        sa.Column("beatmap_set_id", sa.BigInteger(), nullable=False),
        sa.Column("difficulty_name", sa.String(), nullable=False),
        sa.Column("max_combo", sa.Integer(), nullable=False),
        sa.Column("hp_drain", sa.Float(), nullable=False),
        sa.Column("hit_objects_url", sa.String(), nullable=False),
        sa.Column("mapper_id", sa.BigInteger(), nullable=False),
        sa.ForeignKeyConstraint(
            ["beatmap_set_id"],
            ["beatmap_set.beatmap_set_id"],
            name="fk_beatmap_beatmap_set_id_beatmap_set",
        ),
        sa.ForeignKeyConstraint(
            ["hit_objects_url"],
            ["beatmap_hit_objects.hit_objects_url"],
            name="fk_beatmap_hit_objects_url_beatmap_hit_objects",
        ),
        sa.ForeignKeyConstraint(
            ["mapper_id"], ["player.player_id"], name="fk_beatmap_mapper_id_player"
        ),
        sa.PrimaryKeyConstraint("beatmap_set_id", "difficulty_name", name="pk_beatmap"),
    )
    op.create_table(
        "standard_beatmap",
        sa.Column("beatmap_set_id", sa.BigInteger(), nullable=False),
        sa.Column("difficulty_name", sa.String(), nullable=False),
        sa.Column("circle_size", sa.Float(), nullable=True),
        sa.ForeignKeyConstraint(
            ["beatmap_set_id", "difficulty_name"],
            ["beatmap.beatmap_set_id", "beatmap.difficulty_name"],
            name="fk_standard_beatmap_beatmap_set_id_beatmap",
        ),
        sa.PrimaryKeyConstraint(
            "beatmap_set_id", "difficulty_name", name="pk_standard_beatmap"
        ),
    )
    op.create_table(
        "score",
        sa.Column("score_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("match_id", sa.BigInteger(), nullable=False),
        sa.Column("game_id", sa.BigInteger(), nullable=False),
        sa.Column("player_id", sa.BigInteger(), nullable=False),
        sa.Column("beatmap_set_id", sa.BigInteger(), nullable=False),
        sa.Column("difficulty_name", sa.String(), nullable=False),
        sa.Column("total_score", sa.BigInteger(), nullable=False),
        sa.Column("combo", sa.Integer(), nullable=False),
        sa.Column("accuracy", sa.Float(), nullable=False),
        sa.Column("modifier", sa.String(), nullable=False),
        sa.Column("date_set", UTCDateTime(), nullable=True),
        sa.ForeignKeyConstraint(
            ["beatmap_set_id", "difficulty_name"],
            ["beatmap.beatmap_set_id", "beatmap.difficulty_name"],
            name="fk_score_beatmap_set_id_beatmap",
        ),
        sa.ForeignKeyConstraint(["match_id"], ["match.match_id"], name="fk_score_match_id_match"),
        sa.ForeignKeyConstraint(
            ["player_id"], ["player.player_id"], name="fk_score_player_id_player"
        ),
        sa.PrimaryKeyConstraint("score_id", name="pk_score"),
        sa.UniqueConstraint("match_id", "game_id", "player_id", name="uq_score_match_id"),
    )


def downgrade() -> None:
    op.drop_table("score")
    op.drop_table("standard_beatmap")
    op.drop_table("beatmap")
    op.drop_table("beatmap_set")
    op.drop_table("player")
    op.drop_table("song")
    op.drop_table("match")
    op.drop_table("beatmap_hit_objects")
    op.drop_table("artist")
    op.drop_table("country")
