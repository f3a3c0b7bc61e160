"""Domain model for osudb."""

from __future__ import annotations

from .enums import SUPPORTED_RULESET, Ruleset, TokenState
from .records import (
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
    hit_objects_url,
)
from .remote import (
    BeatmapInfo,
    BeatmapSetInfo,
    DifficultyAttributes,
    GameScore,
    MatchEvent,
    MatchGame,
    MatchPage,
    UserProfile,
)
from .statistics import BeatmapSetSummary, ModifierAccuracy, PlayerAverage

__all__ = [
    "SUPPORTED_RULESET",
    "Artist",
    "Beatmap",
    "BeatmapHitObjects",
    "BeatmapInfo",
    "BeatmapSet",
    "BeatmapSetInfo",
    "BeatmapSetSummary",
    "Country",
    "DifficultyAttributes",
    "GameScore",
    "Match",
    "MatchEvent",
    "MatchGame",
    "MatchPage",
    "ModifierAccuracy",
    "Player",
    "PlayerAverage",
    "Ruleset",
    "Score",
    "Song",
    "StandardBeatmap",
    "TokenState",
    "UserProfile",
    "hit_objects_url",
]
