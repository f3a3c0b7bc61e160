from __future__ import annotations

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from osudb.adapters.osu.schema import (
    BeatmapSetPayload,
    MatchResponse,
    ScorePayload,
    UserPayload,
)
from osudb.adapters.osu.translator import parse_beatmapset, parse_match_page, parse_user
from osudb.domain.model import Ruleset
from tests.helpers.payloads import (
    beatmapset_payload,
    game_event_payload,
    match_payload,
    plain_event_payload,
    user_payload,
)


@pytest.mark.parametrize(
    "mods",
    [["HD", "DT"], [{"acronym": "HD"}, {"acronym": "DT", "settings": {}}]],
)
def test_score_mods_accept_legacy_and_lazer_shapes(mods: list[object]) -> None:
    score = ScorePayload.model_validate(
        {"user_id": 1, "score": 10, "max_combo": 2, "accuracy": 0.5, "mods": mods}
    )

    assert score.mods == ["HD", "DT"]


def test_parse_user_keeps_rank_and_join_date() -> None:
    user = parse_user(UserPayload.model_validate(user_payload(user_id=7, username="Cookiezi")))

    assert user.user_id == 7
    assert user.username == "Cookiezi"
    assert user.join_date == datetime(2007, 8, 28, 3, 9, 12, tzinfo=UTC)
    assert user.global_rank == 12345


def test_parse_user_without_statistics_has_no_rank() -> None:
    payload = user_payload()
    del payload["statistics"]

    assert parse_user(UserPayload.model_validate(payload)).global_rank is None


def test_beatmapset_without_difficulties_has_no_bpm() -> None:
    payload = beatmapset_payload()
    payload["beatmaps"] = []
    payload["genre"] = None

    beatmapset = parse_beatmapset(BeatmapSetPayload.model_validate(payload))

    assert beatmapset.bpm is None
    assert beatmapset.genre is None
    assert beatmapset.mapper_username == "peppy"


def test_parse_match_page_keeps_game_payloads() -> None:
    payload = match_payload(9, [plain_event_payload(1), game_event_payload(2, 20, beatmap_id=75)])

    page = parse_match_page(MatchResponse.model_validate(payload))

    assert page.match_id == 9
    assert [event.game is not None for event in page.events] == [False, True]
    game = page.events[1].game
    assert game is not None
    assert game.beatmap_id == 75
    assert game.ruleset is Ruleset.OSU
    assert game.scores[0].total_score == 812345
    assert page.events[1].text == "OWC: (Canada) vs (Japan)"


def test_unknown_ruleset_is_rejected() -> None:
    payload = match_payload(9, [game_event_payload(2, 20)])
    payload["events"][0]["game"]["mode"] = "unknown"

    with pytest.raises(ValidationError):
        MatchResponse.model_validate(payload)
