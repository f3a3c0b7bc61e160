"""Translate osu! API payloads into domain snapshots."""

from __future__ import annotations

from typing import TYPE_CHECKING

from osudb.domain.model import (
    BeatmapInfo,
    BeatmapSetInfo,
    DifficultyAttributes,
    GameScore,
    MatchEvent,
    MatchGame,
    MatchPage,
    UserProfile,
)

if TYPE_CHECKING:
    from .schema import (
        BeatmapAttributesResponse,
        BeatmapPayload,
        BeatmapSetPayload,
        GamePayload,
        MatchEventPayload,
        MatchResponse,
        UserPayload,
    )


def parse_user(payload: UserPayload) -> UserProfile:
    return UserProfile(
        user_id=payload.id,
        username=payload.username,
        country_name=payload.country.name,
        join_date=payload.join_date,
        global_rank=payload.statistics.global_rank,
    )


def parse_beatmapset(payload: BeatmapSetPayload) -> BeatmapSetInfo:
    return BeatmapSetInfo(
        beatmapset_id=payload.id,
        title=payload.title,
        artist=payload.artist,
        mapper_id=payload.user_id,
        mapper_username=payload.mapper_username,
        submitted_date=payload.submitted_date,
        genre=payload.genre.name if payload.genre is not None else None,
        bpms=tuple(beatmap.bpm for beatmap in payload.beatmaps if beatmap.bpm is not None),
    )


def parse_beatmap(payload: BeatmapPayload) -> BeatmapInfo:
    return BeatmapInfo(
        beatmap_id=payload.id,
        beatmapset_id=payload.beatmapset_id,
        difficulty_name=payload.version,
        ruleset=payload.mode,
        hp_drain=payload.drain,
        star_rating=payload.difficulty_rating,
        mapper_id=payload.set_owner_id,
        circle_size=payload.cs,
    )


def parse_attributes(payload: BeatmapAttributesResponse) -> DifficultyAttributes:
    return DifficultyAttributes(
        max_combo=payload.attributes.max_combo,
        star_rating=payload.attributes.star_rating,
    )


def _parse_game(payload: GamePayload) -> MatchGame:
    return MatchGame(
        game_id=payload.id,
        beatmap_id=payload.beatmap_id,
        ruleset=payload.mode,
        scores=tuple(
            GameScore(
                user_id=score.user_id,
                total_score=score.score,
                max_combo=score.max_combo,
                accuracy=score.accuracy,
                mods=tuple(score.mods),
                created_at=score.created_at,
            )
            for score in payload.scores
        ),
    )


def parse_match_event(payload: MatchEventPayload) -> MatchEvent:
    return MatchEvent(
        event_id=payload.id,
        detail_type=payload.detail.type,
        text=payload.detail.text,
        game=_parse_game(payload.game) if payload.game is not None else None,
    )


def parse_match_page(payload: MatchResponse) -> MatchPage:
    return MatchPage(
        match_id=payload.match.id,
        name=payload.match.name,
        events=tuple(parse_match_event(event) for event in payload.events),
    )
