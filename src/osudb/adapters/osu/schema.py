"""Pydantic models describing the osu! API v2 payloads we consume."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime  # noqa: TC003
from typing import cast

from pydantic import BaseModel, ConfigDict, Field, field_validator

from osudb.domain.model import Ruleset


class OsuBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class OAuthToken(OsuBaseModel):
    access_token: str | None = None
    token_type: str = "Bearer"
    expires_in: int = 0
    refresh_token: str | None = None
    scope: str | None = None


class CountryPayload(OsuBaseModel):
    code: str | None = None
    name: str


class UserStatisticsPayload(OsuBaseModel):
    global_rank: int | None = None


class UserPayload(OsuBaseModel):
    id: int
    username: str
    join_date: datetime
    country: CountryPayload
    statistics: UserStatisticsPayload = Field(default_factory=UserStatisticsPayload)


class CompactUserPayload(OsuBaseModel):
    id: int
    username: str


class GenrePayload(OsuBaseModel):
    id: int | None = None
    name: str


class BeatmapCompactPayload(OsuBaseModel):
    id: int
    bpm: float | None = None
    version: str | None = None
    mode: str | None = None


class BeatmapSetPayload(OsuBaseModel):
    id: int
    title: str
    artist: str
    creator: str | None = None
    user_id: int
    user: CompactUserPayload | None = None
    submitted_date: datetime | None = None
    genre: GenrePayload | None = None
    beatmaps: list[BeatmapCompactPayload] = Field(default_factory=list)

    @property
    def mapper_username(self) -> str:
        if self.user is not None:
            return self.user.username
        return self.creator or ""


class BeatmapSetOwnerPayload(OsuBaseModel):
    id: int
    user_id: int


class BeatmapPayload(OsuBaseModel):
    id: int
    beatmapset_id: int
    version: str
    mode: Ruleset
    drain: float
    difficulty_rating: float
    cs: float | None = None
    user_id: int
    beatmapset: BeatmapSetOwnerPayload | None = None

    @property
    def set_owner_id(self) -> int:
        if self.beatmapset is not None:
            return self.beatmapset.user_id
        return self.user_id


class DifficultyAttributesPayload(OsuBaseModel):
    max_combo: int
    star_rating: float


class BeatmapAttributesResponse(OsuBaseModel):
    attributes: DifficultyAttributesPayload


def _mod_acronyms(value: object) -> object:
    """Accept both ``["HD"]`` and lazer-style ``[{"acronym": "HD"}]`` mod lists."""

    if not isinstance(value, list):
        return value
    acronyms: list[object] = []
    for item in cast(list[object], value):
        if isinstance(item, Mapping):
            acronyms.append(cast(Mapping[str, object], item).get("acronym"))
        else:
            acronyms.append(item)
    return acronyms


class ScorePayload(OsuBaseModel):
    user_id: int
    score: int
    max_combo: int
    accuracy: float
    mods: list[str] = Field(default_factory=list)
    created_at: datetime | None = None

    _normalize_mods = field_validator("mods", mode="before")(_mod_acronyms)


class GamePayload(OsuBaseModel):
    id: int
    beatmap_id: int
    mode: Ruleset
    scores: list[ScorePayload] = Field(default_factory=list)


class EventDetailPayload(OsuBaseModel):
    type: str
    text: str | None = None


class MatchEventPayload(OsuBaseModel):
    id: int
    detail: EventDetailPayload
    timestamp: datetime | None = None
    user_id: int | None = None
    game: GamePayload | None = None


class MatchInfoPayload(OsuBaseModel):
    id: int
    name: str


class MatchResponse(OsuBaseModel):
    match: MatchInfoPayload
    events: list[MatchEventPayload] = Field(default_factory=list)
    first_event_id: int | None = None
    latest_event_id: int | None = None

