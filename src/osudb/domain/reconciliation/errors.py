"""Errors raised by the reconciliation engine."""

from __future__ import annotations


class ReconciliationError(RuntimeError):
    """Base class for reconciliation failures that are not transport errors."""


class RemoteEntityNotFoundError(ReconciliationError):
    """The platform reported a requested resource as missing."""

    def __init__(self, kind: str, identifier: int | str) -> None:
        super().__init__(f"osu! {kind} {identifier!r} not found")
        self.kind = kind
        self.identifier = identifier


class NoScoredGamesError(ReconciliationError):
    """A match has no games left once warmups are skipped."""

    def __init__(self, match_id: int, num_warmups: int) -> None:
        super().__init__(
            f"Match {match_id} has no scored games after skipping {num_warmups} warmup(s)"
        )
        self.match_id = match_id
        self.num_warmups = num_warmups
