"""Cascading insert-if-absent reconciliation of osu! resources.

Each public operation starts from a single leaf reference, fetches whatever
parent rows are missing and inserts them root-first so foreign keys always
resolve. Every insert is conditional on its natural key and committed on its
own, so re-running an operation after a failure completes the remaining work
without duplicating rows.

Store statements run synchronously on the event loop between awaits. Flows
sharing a loop therefore wait on each other's statements, including SQLite
lock waits; run independent imports in separate processes when that matters.
"""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from osudb.domain.model import (
    SUPPORTED_RULESET,
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
from osudb.domain.ports import NOT_FOUND

from .errors import NoScoredGamesError, ReconciliationError, RemoteEntityNotFoundError

if TYPE_CHECKING:
    from collections.abc import Callable

    from osudb.domain.model import BeatmapSetInfo, MatchGame, UserProfile
    from osudb.domain.ports import CatalogUnitOfWork, OsuApi
    from osudb.domain.ports.persistence import ConditionalRepository

    from .contracts import BeatmapSetManualRequest, SongRequest

log = getLogger(__name__)

type UnitOfWorkFactory = Callable[[], CatalogUnitOfWork]


@dataclass(frozen=True, slots=True)
class _StoredBeatmap:
    inserted: int
    beatmap_set_id: int
    difficulty_name: str


def _require_positive(value: int, name: str) -> None:
    if value <= 0:
        raise ValueError(f"{name} must be a positive integer, got {value}")


def _player_from_profile(profile: UserProfile) -> Player:
    return Player(
        player_id=profile.user_id,
        username=profile.username,
        country_name=profile.country_name,
        join_date=profile.join_date,
        rank=profile.global_rank,
    )


class ReconciliationEngine:
    """Insert osu! resources and every parent row they depend on."""

    def __init__(self, api: OsuApi | None, unit_of_work_factory: UnitOfWorkFactory) -> None:
        self._api = api
        self.unit_of_work_factory = unit_of_work_factory

    @property
    def api(self) -> OsuApi:
        if self._api is None:
            raise ReconciliationError("This operation needs an osu! API client")
        return self._api

    async def add_beatmapset_auto(self, beatmapset_id: int) -> int:
        """Store a beatmap set with its mapper, country, artist and song.

        Raises :class:`RemoteEntityNotFoundError` when the set or its mapper is
        unknown to the platform; nothing is written in that case.
        """

        _require_positive(beatmapset_id, "beatmapset_id")
        with self.unit_of_work_factory() as uow:
            inserted, _ = await self._reconcile_beatmapset(uow, beatmapset_id)
        log.info("Beatmap set %s reconciled: %s row(s) inserted", beatmapset_id, inserted)
        return inserted

    async def add_beatmap(self, beatmap_id: int) -> int:
        """Store a beatmap and its parents.

        Returns 0 without writing when the beatmap is unknown or is not an
        ``osu`` ruleset beatmap.
        """

        _require_positive(beatmap_id, "beatmap_id")
        with self.unit_of_work_factory() as uow:
            stored = await self._reconcile_beatmap(uow, beatmap_id)
        inserted = stored.inserted if stored is not None else 0
        log.info("Beatmap %s reconciled: %s row(s) inserted", beatmap_id, inserted)
        return inserted

    async def add_match(
        self,
        match_id: int,
        tournament_id: int | None = None,
        num_warmups: int = 0,
    ) -> int:
        """Store a match, its scored games' beatmaps, players and scores.

        The first ``num_warmups`` games are ignored. Games whose beatmap is
        missing or of an unsupported ruleset are skipped, as are scores of
        players the platform no longer knows.
        """

        _require_positive(match_id, "match_id")
        if num_warmups < 0:
            raise ValueError(f"num_warmups must not be negative, got {num_warmups}")

        events = await self.api.get_match_events(match_id)
        if events is NOT_FOUND:
            raise RemoteEntityNotFoundError("match", match_id)

        games = [
            (event.text, game) for event in events if (game := event.game) is not None
        ][num_warmups:]
        if not games:
            raise NoScoredGamesError(match_id, num_warmups)

        with self.unit_of_work_factory() as uow:
            repositories = uow.repositories
            inserted = self._insert(
                uow,
                repositories.matches,
                Match(match_id=match_id, round=games[0][0], tournament_id=tournament_id),
            )
            for _, game in games:
                inserted += await self._reconcile_game(uow, match_id, game)

        log.info(
            "Match %s reconciled over %s game(s): %s row(s) inserted",
            match_id,
            len(games),
            inserted,
        )
        return inserted

    async def add_beatmapset_manual(self, request: BeatmapSetManualRequest) -> int:
        """Store a beatmap set from caller-supplied details."""

        _require_positive(request.beatmap_set_id, "beatmap_set_id")
        mapper = request.mapper
        with self.unit_of_work_factory() as uow:
            repositories = uow.repositories
            inserted = self._insert(uow, repositories.countries, Country(mapper.country_name))
            inserted += self._insert(
                uow,
                repositories.players,
                Player(
                    player_id=mapper.player_id,
                    username=mapper.username,
                    country_name=mapper.country_name,
                    join_date=mapper.join_date,
                    rank=mapper.rank,
                ),
            )
            song_inserted, song_id = self._reconcile_song(uow, request.song)
            inserted += song_inserted
            inserted += self._insert(
                uow,
                repositories.beatmapsets,
                BeatmapSet(
                    beatmap_set_id=request.beatmap_set_id,
                    mapper_id=mapper.player_id,
                    song_id=song_id,
                    creation_date=request.creation_date,
                ),
            )
        log.info(
            "Beatmap set %s stored manually: %s row(s) inserted",
            request.beatmap_set_id,
            inserted,
        )
        return inserted

    async def add_song(self, request: SongRequest) -> int:
        """Store a song and its artist."""

        with self.unit_of_work_factory() as uow:
            inserted, _ = self._reconcile_song(uow, request)
        log.info("Song %r stored: %s row(s) inserted", request.name, inserted)
        return inserted

    async def _reconcile_beatmapset(
        self,
        uow: CatalogUnitOfWork,
        beatmapset_id: int,
    ) -> tuple[int, BeatmapSetInfo]:
        beatmapset = await self.api.get_beatmapset(beatmapset_id)
        if beatmapset is NOT_FOUND:
            raise RemoteEntityNotFoundError("beatmapset", beatmapset_id)
        mapper = await self.api.get_user(beatmapset.mapper_id, key="id")
        if mapper is NOT_FOUND:
            raise RemoteEntityNotFoundError("user", beatmapset.mapper_id)

        repositories = uow.repositories
        inserted = self._insert(uow, repositories.countries, Country(mapper.country_name))
        inserted += self._insert(uow, repositories.artists, Artist(name=beatmapset.artist))
        artist_id = self._id_for_name(repositories.artists.id_for_name, beatmapset.artist)
        inserted += self._insert(uow, repositories.players, _player_from_profile(mapper))
        inserted += self._insert(
            uow,
            repositories.songs,
            Song(
                name=beatmapset.title,
                artist_id=artist_id,
                bpm=beatmapset.bpm,
                genre=beatmapset.genre,
            ),
        )
        song_id = self._id_for_name(repositories.songs.id_for_name, beatmapset.title)
        inserted += self._insert(
            uow,
            repositories.beatmapsets,
            BeatmapSet(
                beatmap_set_id=beatmapset.beatmapset_id,
                mapper_id=mapper.user_id,
                song_id=song_id,
                creation_date=beatmapset.submitted_date,
            ),
        )
        return inserted, beatmapset

    async def _reconcile_beatmap(self, uow: CatalogUnitOfWork, beatmap_id: int) -> _StoredBeatmap | None:
        beatmap = await self.api.get_beatmap(beatmap_id)
        if beatmap is NOT_FOUND:
            log.info("Beatmap %s not found; nothing to store", beatmap_id)
            return None
        if beatmap.ruleset is not SUPPORTED_RULESET:
            log.info("Beatmap %s is a %s beatmap; skipping", beatmap_id, beatmap.ruleset)
            return None
        attributes = await self.api.get_beatmap_attributes(beatmap_id)
        if attributes is NOT_FOUND:
            log.info("No difficulty attributes for beatmap %s; nothing to store", beatmap_id)
            return None

        inserted, beatmapset = await self._reconcile_beatmapset(uow, beatmap.beatmapset_id)

        repositories = uow.repositories
        url = hit_objects_url(beatmap.beatmapset_id)
        inserted += self._insert(
            uow,
            repositories.hit_objects,
            BeatmapHitObjects(
                hit_objects_url=url,
                max_combo=attributes.max_combo,
                hp_drain=beatmap.hp_drain,
                stars=attributes.star_rating,
            ),
        )
        inserted += self._insert(
            uow,
            repositories.beatmaps,
            Beatmap(
                beatmap_set_id=beatmap.beatmapset_id,
                difficulty_name=beatmap.difficulty_name,
                max_combo=attributes.max_combo,
                hp_drain=beatmap.hp_drain,
                hit_objects_url=url,
                mapper_id=beatmapset.mapper_id,
            ),
        )
        inserted += self._insert(
            uow,
            repositories.standard_beatmaps,
            StandardBeatmap(
                beatmap_set_id=beatmap.beatmapset_id,
                difficulty_name=beatmap.difficulty_name,
                circle_size=beatmap.circle_size,
            ),
        )
        return _StoredBeatmap(
            inserted=inserted,
            beatmap_set_id=beatmap.beatmapset_id,
            difficulty_name=beatmap.difficulty_name,
        )

    async def _reconcile_game(self, uow: CatalogUnitOfWork, match_id: int, game: MatchGame) -> int:
        if game.ruleset is not SUPPORTED_RULESET:
            log.warning(
                "Skipping game %s of match %s: played in the %s ruleset",
                game.game_id,
                match_id,
                game.ruleset,
            )
            return 0
        stored = await self._reconcile_beatmap(uow, game.beatmap_id)
        if stored is None:
            log.warning(
                "Skipping game %s of match %s: beatmap %s is unavailable",
                game.game_id,
                match_id,
                game.beatmap_id,
            )
            return 0

        repositories = uow.repositories
        inserted = stored.inserted
        for score in game.scores:
            player = await self.api.get_user(score.user_id, key="id")
            if player is NOT_FOUND:
                log.warning(
                    "Skipping score of unknown user %s in game %s", score.user_id, game.game_id
                )
                continue
            inserted += self._insert(uow, repositories.countries, Country(player.country_name))
            inserted += self._insert(uow, repositories.players, _player_from_profile(player))
            inserted += self._insert(
                uow,
                repositories.scores,
                Score(
                    match_id=match_id,
                    game_id=game.game_id,
                    player_id=player.user_id,
                    beatmap_set_id=stored.beatmap_set_id,
                    difficulty_name=stored.difficulty_name,
                    total_score=score.total_score,
                    combo=score.max_combo,
                    accuracy=score.accuracy,
                    modifier="".join(score.mods),
                    date_set=score.created_at,
                ),
            )
        return inserted

    def _reconcile_song(self, uow: CatalogUnitOfWork, request: SongRequest) -> tuple[int, int]:
        repositories = uow.repositories
        inserted = self._insert(
            uow,
            repositories.artists,
            Artist(name=request.artist_name, is_featured=request.artist_is_featured),
        )
        artist_id = self._id_for_name(repositories.artists.id_for_name, request.artist_name)
        inserted += self._insert(
            uow,
            repositories.songs,
            Song(name=request.name, artist_id=artist_id, bpm=request.bpm, genre=request.genre),
        )
        song_id = self._id_for_name(repositories.songs.id_for_name, request.name)
        return inserted, song_id

    @staticmethod
    def _insert[TRecord](
        uow: CatalogUnitOfWork,
        repository: ConditionalRepository[TRecord],
        record: TRecord,
    ) -> int:
        inserted = repository.add_if_absent(record)
        uow.commit()
        if inserted:
            log.debug("Inserted %r", record)
        return inserted

    @staticmethod
    def _id_for_name(lookup: Callable[[str], int | None], name: str) -> int:
        identifier = lookup(name)
        if identifier is None:
            raise ReconciliationError(f"No stored id for {name!r} after conditional insert")
        return identifier
