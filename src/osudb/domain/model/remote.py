"""Read-only snapshots of osu! resources as returned by the API port.

These are plain values translated from the wire payloads; the reconciliation
engine derives stored records from them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import datetime

    from .enums import Ruleset


@dataclass(frozen=True, slots=True)
class UserProfile:
    user_id: int
    username: str
    country_name: str
    join_date: datetime
    global_rank: int | None = None


@dataclass(frozen=True, slots=True)
class BeatmapSetInfo:
    beatmapset_id: int
    title: str
    artist: str
    mapper_id: int
    mapper_username: str
    submitted_date: datetime | None = None
    genre: str | None = None
    bpms: tuple[float, ...] = ()

    @property
    def bpm(self) -> float | None:
        """BPM of the first listed difficulty."""

        return self.bpms[0] if self.bpms else None


@dataclass(frozen=True, slots=True)
class BeatmapInfo:
    beatmap_id: int
    beatmapset_id: int
    difficulty_name: str
    ruleset: Ruleset
    hp_drain: float
    star_rating: float
    mapper_id: int
    circle_size: float | None = None


@dataclass(frozen=True, slots=True)
class DifficultyAttributes:
    max_combo: int
    star_rating: float


@dataclass(frozen=True, slots=True)
class GameScore:
    user_id: int
    total_score: int
    max_combo: int
    accuracy: float
    mods: tuple[str, ...] = ()
    created_at: datetime | None = None


@dataclass(frozen=True, slots=True)
class MatchGame:
    game_id: int
    beatmap_id: int
    ruleset: Ruleset
    scores: tuple[GameScore, ...] = ()


@dataclass(frozen=True, slots=True)
class MatchEvent:
    event_id: int
    detail_type: str
    text: str | None = None
    game: MatchGame | None = None


@dataclass(frozen=True, slots=True)
class MatchPage:
    match_id: int
    name: str
    events: tuple[MatchEvent, ...] = field(default_factory=tuple)
