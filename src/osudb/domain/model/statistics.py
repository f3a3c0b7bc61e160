"""Read-side views computed from stored rows."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import datetime


@dataclass(frozen=True, slots=True)
class BeatmapSetSummary:
    """A beatmap set joined with its mapper, song and artist."""

    beatmap_set_id: int
    mapper_id: int
    mapper_username: str
    song_id: int
    song_name: str
    artist_name: str
    bpm: float | None = None
    genre: str | None = None
    creation_date: datetime | None = None


@dataclass(frozen=True, slots=True)
class PlayerAverage:
    player_id: int
    username: str
    # None for players without scores
    average: float | None


@dataclass(frozen=True, slots=True)
class ModifierAccuracy:
    modifier: str
    average_accuracy: float
