"""Rows stored by the reconciliation engine.

Field names match the store's column names. Surrogate ids left as ``None`` are
generated by the store on insert.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import datetime

BEATMAPSET_DOWNLOAD_URL = "https://osu.ppy.sh/beatmapsets/{beatmap_set_id}/download"


def hit_objects_url(beatmap_set_id: int) -> str:
    return BEATMAPSET_DOWNLOAD_URL.format(beatmap_set_id=beatmap_set_id)


@dataclass(frozen=True, slots=True)
class Country:
    country_name: str
    # Flags are not fetched yet; an empty blob keeps the column non-null.
    flag: bytes = b""


@dataclass(frozen=True, slots=True)
class Artist:
    name: str
    is_featured: bool = False
    artist_id: int | None = None


@dataclass(frozen=True, slots=True)
class Song:
    name: str
    artist_id: int
    bpm: float | None = None
    genre: str | None = None
    song_id: int | None = None


@dataclass(frozen=True, slots=True)
class Player:
    player_id: int
    username: str
    country_name: str
    join_date: datetime
    rank: int | None = None


@dataclass(frozen=True, slots=True)
class BeatmapSet:
    beatmap_set_id: int
    mapper_id: int
    song_id: int
    creation_date: datetime | None = None


@dataclass(frozen=True, slots=True)
class BeatmapHitObjects:
    hit_objects_url: str
    max_combo: int
    hp_drain: float
    stars: float


@dataclass(frozen=True, slots=True)
class Beatmap:
    beatmap_set_id: int
    difficulty_name: str
    max_combo: int
    hp_drain: float
    hit_objects_url: str
    mapper_id: int


@dataclass(frozen=True, slots=True)
class StandardBeatmap:
    beatmap_set_id: int
    difficulty_name: str
    circle_size: float | None = None


@dataclass(frozen=True, slots=True)
class Match:
    match_id: int
    round: str | None = None
    tournament_id: int | None = None


@dataclass(frozen=True, slots=True)
class Score:
    match_id: int
    game_id: int
    player_id: int
    beatmap_set_id: int
    difficulty_name: str
    total_score: int
    combo: int
    accuracy: float
    modifier: str = ""
    date_set: datetime | None = None
    score_id: int | None = None
