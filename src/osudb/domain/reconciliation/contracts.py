"""Caller-supplied inputs for manual reconciliation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import datetime


@dataclass(frozen=True, slots=True)
class SongRequest:
    name: str
    artist_name: str
    bpm: float | None = None
    genre: str | None = None
    artist_is_featured: bool = False


@dataclass(frozen=True, slots=True)
class MapperDetails:
    player_id: int
    username: str
    country_name: str
    join_date: datetime
    rank: int | None = None


@dataclass(frozen=True, slots=True)
class BeatmapSetManualRequest:
    """Everything needed to store a beatmap set without asking the platform."""

    beatmap_set_id: int
    mapper: MapperDetails
    song: SongRequest
    creation_date: datetime | None = None
