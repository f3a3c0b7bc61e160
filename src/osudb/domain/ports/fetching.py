"""Ports for fetching osu! resources."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Final, Literal, Protocol, runtime_checkable

if TYPE_CHECKING:
    from osudb.domain.model import (
        BeatmapInfo,
        BeatmapSetInfo,
        DifficultyAttributes,
        MatchEvent,
        MatchPage,
        UserProfile,
    )


class NotFound(Enum):
    """Marker returned when the platform answers 404 for a resource."""

    NOT_FOUND = "not-found"

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NOT_FOUND"


NOT_FOUND: Final = NotFound.NOT_FOUND

type Fetched[T] = T | Literal[NotFound.NOT_FOUND]
type UserLookupKey = Literal["id", "username"]


@runtime_checkable
class OsuApi(Protocol):
    """Read-only access to the osu! resources the reconciliation engine needs.

    Every method returns :data:`NOT_FOUND` instead of raising when the platform
    reports the resource as missing.
    """

    async def get_user(self, user: int | str, key: UserLookupKey = "id") -> Fetched[UserProfile]:
        ...

    async def get_beatmapset(self, beatmapset_id: int) -> Fetched[BeatmapSetInfo]: ...

    async def get_beatmap(self, beatmap_id: int) -> Fetched[BeatmapInfo]: ...

    async def get_beatmap_attributes(self, beatmap_id: int) -> Fetched[DifficultyAttributes]: ...

    async def get_match(self, match_id: int, before: int | None = None) -> Fetched[MatchPage]:
        ...

    async def get_match_events(self, match_id: int) -> Fetched[list[MatchEvent]]: ...


__all__ = ["NOT_FOUND", "Fetched", "NotFound", "OsuApi", "UserLookupKey"]
