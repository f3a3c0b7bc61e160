"""JSON bodies shaped like osu! API v2 responses."""

from __future__ import annotations

from typing import Any

type Payload = dict[str, Any]


def token_payload(access_token: str = "token-1", expires_in: int = 86400) -> Payload:
    return {"token_type": "Bearer", "expires_in": expires_in, "access_token": access_token}


def user_payload(user_id: int = 2, username: str = "peppy", country: str = "Australia") -> Payload:
    return {
        "id": user_id,
        "username": username,
        "join_date": "2007-08-28T03:09:12+00:00",
        "country": {"code": "AU", "name": country},
        "statistics": {"global_rank": 12345, "pp": 0},
        "is_bot": False,
    }


def beatmapset_payload(beatmapset_id: int = 1, mapper_id: int = 2) -> Payload:
    return {
        "id": beatmapset_id,
        "title": "DISCO PRINCE",
        "artist": "Kenji Ninuma",
        "creator": "peppy",
        "user_id": mapper_id,
        "submitted_date": "2007-10-06T17:46:31+00:00",
        "genre": {"id": 2, "name": "Video Game"},
        "beatmaps": [
            {"id": 75, "bpm": 119.999, "version": "Normal", "mode": "osu"},
            {"id": 76, "bpm": 120.0, "version": "Hard", "mode": "osu"},
        ],
    }


def beatmap_payload(
    beatmap_id: int = 75,
    beatmapset_id: int = 1,
    mode: str = "osu",
    owner_id: int = 2,
) -> Payload:
    return {
        "id": beatmap_id,
        "beatmapset_id": beatmapset_id,
        "version": "Normal",
        "mode": mode,
        "drain": 6,
        "difficulty_rating": 2.55,
        "cs": 4,
        "user_id": 99,
        "beatmapset": {"id": beatmapset_id, "user_id": owner_id},
    }


def attributes_payload(max_combo: int = 314, star_rating: float = 2.55) -> Payload:
    return {"attributes": {"max_combo": max_combo, "star_rating": star_rating}}


def game_event_payload(event_id: int, game_id: int, beatmap_id: int = 75) -> Payload:
    return {
        "id": event_id,
        "detail": {"type": "other", "text": "OWC: (Canada) vs (Japan)"},
        "timestamp": "2024-06-01T18:00:00+00:00",
        "user_id": None,
        "game": {
            "id": game_id,
            "beatmap_id": beatmap_id,
            "mode": "osu",
            "scores": [
                {
                    "user_id": 2,
                    "score": 812345,
                    "max_combo": 300,
                    "accuracy": 0.9812,
                    "mods": [{"acronym": "HD"}, {"acronym": "HR"}],
                    "created_at": "2024-06-01T18:03:00+00:00",
                }
            ],
        },
    }


def plain_event_payload(event_id: int, event_type: str = "player-joined") -> Payload:
    return {
        "id": event_id,
        "detail": {"type": event_type},
        "timestamp": "2024-06-01T17:55:00+00:00",
        "user_id": 2,
    }


def match_payload(match_id: int, events: list[Payload]) -> Payload:
    return {
        "match": {"id": match_id, "name": "OWC: (Canada) vs (Japan)"},
        "events": events,
        "first_event_id": events[0]["id"] if events else None,
        "latest_event_id": events[-1]["id"] if events else None,
    }
