"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class Ruleset(StrEnum):
    """osu! game modes, named as the API names them."""

    OSU = "osu"
    TAIKO = "taiko"
    FRUITS = "fruits"
    MANIA = "mania"


SUPPORTED_RULESET = Ruleset.OSU


class TokenState(StrEnum):
    UNISSUED = "unissued"
    VALID = "valid"
    EXPIRED = "expired"
