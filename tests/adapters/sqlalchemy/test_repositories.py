from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from osudb.adapters.sqlalchemy import (
    SqlAlchemyArtistRepository,
    SqlAlchemyCountryRepository,
    SqlAlchemyPlayerRepository,
    SqlAlchemyScoreRepository,
    SqlAlchemySongRepository,
)
from osudb.adapters.sqlalchemy.mappings import artist_table, player_table
from osudb.domain.model import Artist, Country, Player, Score, Song

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy.engine import Engine


@pytest.fixture
def session(sqlite_engine: Engine) -> Iterator[Session]:
    with Session(sqlite_engine) as session:
        yield session


def test_conditional_insert_reports_rows_inserted(session: Session) -> None:
    countries = SqlAlchemyCountryRepository(session)

    assert countries.add_if_absent(Country("Canada")) == 1
    assert countries.add_if_absent(Country("Canada")) == 0
    assert countries.exists(Country("Canada"))
    assert not countries.exists(Country("Japan"))


def test_existing_rows_are_not_overwritten(session: Session) -> None:
    SqlAlchemyCountryRepository(session).add_if_absent(Country("Canada"))
    players = SqlAlchemyPlayerRepository(session)
    joined = datetime(2015, 3, 1, tzinfo=UTC)

    players.add_if_absent(Player(1, "first", "Canada", joined, rank=10))
    assert players.add_if_absent(Player(1, "renamed", "Canada", joined, rank=1)) == 0
    session.commit()

    row = session.execute(select(player_table).where(player_table.c.player_id == 1)).one()
    assert row.username == "first"
    assert row.rank == 10
    assert row.join_date == joined


def test_named_repository_generates_ids(session: Session) -> None:
    artists = SqlAlchemyArtistRepository(session)
    songs = SqlAlchemySongRepository(session)

    artists.add_if_absent(Artist("Camellia", is_featured=True))
    artists.add_if_absent(Artist("xi"))
    camellia_id = artists.id_for_name("Camellia")
    xi_id = artists.id_for_name("xi")

    assert camellia_id is not None
    assert xi_id is not None
    assert camellia_id != xi_id
    assert artists.id_for_name("unknown") is None

    assert songs.add_if_absent(Song("Ghost", artist_id=camellia_id, bpm=200.0)) == 1
    assert songs.add_if_absent(Song("Ghost", artist_id=xi_id)) == 0
    song_id = songs.id_for_name("Ghost")
    assert song_id is not None


def test_loser_of_concurrent_insert_sees_winner_id(sqlite_engine: Engine) -> None:
    with Session(sqlite_engine) as first, Session(sqlite_engine) as second:
        winner = SqlAlchemyArtistRepository(first)
        loser = SqlAlchemyArtistRepository(second)

        assert winner.add_if_absent(Artist("Camellia")) == 1
        first.commit()
        assert loser.add_if_absent(Artist("Camellia")) == 0
        second.commit()

        assert loser.id_for_name("Camellia") == winner.id_for_name("Camellia")

    with sqlite_engine.connect() as connection:
        rows = connection.execute(select(artist_table)).all()
    assert len(rows) == 1


def test_unique_violation_from_concurrent_writer_counts_as_existing(
    session: Session,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    artists = SqlAlchemyArtistRepository(session)
    artists.add_if_absent(Artist("Camellia"))
    session.commit()

    original_execute = session.execute
    calls: list[object] = []

    def racing_execute(statement: object, *args: object, **kwargs: object) -> object:
        calls.append(statement)
        if len(calls) == 1:
            raise IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed"))
        return original_execute(statement, *args, **kwargs)  # type: ignore[arg-type]

    monkeypatch.setattr(session, "execute", racing_execute)

    assert artists.add_if_absent(Artist("Camellia")) == 0


def test_integrity_error_for_absent_key_propagates(session: Session) -> None:
    scores = SqlAlchemyScoreRepository(session)
    score = Score(
        match_id=1,
        game_id=10,
        player_id=2,
        beatmap_set_id=3,
        difficulty_name="Insane",
        total_score=1,
        combo=1,
        accuracy=1.0,
    )

    with pytest.raises(IntegrityError):
        scores.add_if_absent(score)
    assert not scores.exists(score)
