from __future__ import annotations

import argparse
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from osudb.app import (
    add_beatmap,
    add_beatmapset,
    add_match,
    add_song,
    beatmapsets_by_bpm,
    best_modifiers_by_accuracy,
    player_average_accuracies,
    players_with_average_score_above,
    players_with_every_standard_beatmap,
)
from osudb.config import configure_logging
from osudb.domain.reconciliation import SongRequest

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _positive_int(value: str) -> int:
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Expected an integer, got {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError(f"Expected a positive integer, got {parsed}")
    return parsed


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Import osu! data into the osudb store")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log at DEBUG level")
    subparsers = parser.add_subparsers(dest="command", required=True)

    beatmapset = subparsers.add_parser(
        "beatmapset",
        help="Add a beatmap set with its mapper, artist and song",
    )
    beatmapset.add_argument("beatmapset_id", type=_positive_int)

    beatmap = subparsers.add_parser("beatmap", help="Add a beatmap and its parents")
    beatmap.add_argument("beatmap_id", type=_positive_int)

    match = subparsers.add_parser("match", help="Add a match with its games and scores")
    match.add_argument("match_id", type=_positive_int)
    match.add_argument(
        "--tournament-id",
        type=_positive_int,
        help="Tournament the match belongs to",
    )
    match.add_argument(
        "--warmups",
        type=int,
        default=0,
        help="Number of leading games to ignore (default: %(default)s)",
    )

    song = subparsers.add_parser("song", help="Add a song and its artist")
    song.add_argument("--name", required=True, help="Song title")
    song.add_argument("--artist", required=True, help="Artist name")
    song.add_argument("--bpm", type=float, help="Beats per minute")
    song.add_argument("--genre", help="Genre label")
    song.add_argument(
        "--featured",
        action="store_true",
        help="Mark the artist as a featured artist",
    )

    report = subparsers.add_parser("report", help="Print aggregate reports from the store")
    reports = report.add_subparsers(dest="report", required=True)
    bpm = reports.add_parser("bpm", help="Beatmap sets whose song bpm lies between bounds")
    bpm.add_argument("--min", dest="bpm_min", type=float, help="Exclusive lower bound")
    bpm.add_argument("--max", dest="bpm_max", type=float, help="Exclusive upper bound")
    average_score = reports.add_parser(
        "average-score",
        help="Players whose average score exceeds a threshold",
    )
    average_score.add_argument("threshold", type=float)
    accuracy = reports.add_parser("accuracy", help="Average accuracy per player")
    accuracy.add_argument("--player", type=_positive_int, help="Only report this player")
    reports.add_parser("best-mods", help="Modifiers with the highest average accuracy")
    reports.add_parser(
        "all-standard",
        help="Players with a score on every stored standard beatmap",
    )

    return parser.parse_args(list(argv))


def _run_command(args: argparse.Namespace) -> int:
    if args.command == "beatmapset":
        return add_beatmapset(args.beatmapset_id)
    if args.command == "beatmap":
        return add_beatmap(args.beatmap_id)
    if args.command == "match":
        return add_match(
            args.match_id,
            tournament_id=args.tournament_id,
            num_warmups=args.warmups,
        )
    if args.command == "song":
        return add_song(
            SongRequest(
                name=args.name,
                artist_name=args.artist,
                bpm=args.bpm,
                genre=args.genre,
                artist_is_featured=args.featured,
            )
        )
    raise ValueError(f"Unsupported command: {args.command}")


def _report_lines(args: argparse.Namespace) -> list[str]:
    if args.report == "bpm":
        return [
            f"{summary.beatmap_set_id}\t{summary.bpm:g} bpm\t{summary.artist_name} - "
            f"{summary.song_name}\tmapped by {summary.mapper_username}"
            for summary in beatmapsets_by_bpm(args.bpm_min, args.bpm_max)
        ]
    if args.report == "average-score":
        return [
            f"{average.player_id}\t{average.username}\t{average.average:.0f}"
            for average in players_with_average_score_above(args.threshold)
        ]
    if args.report == "accuracy":
        return [
            f"{average.player_id}\t{average.username}\t"
            + (f"{average.average:.4f}" if average.average is not None else "-")
            for average in player_average_accuracies(args.player)
        ]
    if args.report == "best-mods":
        return [
            f"{modifier.modifier or 'NM'}\t{modifier.average_accuracy:.4f}"
            for modifier in best_modifiers_by_accuracy()
        ]
    if args.report == "all-standard":
        return [
            f"{player.player_id}\t{player.username}\t{player.country_name}"
            for player in players_with_every_standard_beatmap()
        ]
    raise ValueError(f"Unsupported report: {args.report}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    if parsed_args.command == "match" and parsed_args.warmups < 0:
        log.error("--warmups must not be negative")
        sys.exit(2)

    if parsed_args.command == "report":
        _report(parsed_args)
        return

    try:
        inserted = _run_command(parsed_args)
    except Exception:
        log.exception("Fatal error during %s import", parsed_args.command)
        sys.exit(1)

    log.info("%s row(s) inserted", inserted)


def _report(args: argparse.Namespace) -> None:
    try:
        lines = _report_lines(args)
    except ValueError as exc:
        log.error("Invalid %s report: %s", args.report, exc)  # noqa: TRY400
        sys.exit(2)
    except Exception:
        log.exception("Fatal error during %s report", args.report)
        sys.exit(1)

    for line in lines:
        sys.stdout.write(f"{line}\n")
    log.info("%s row(s) reported", len(lines))


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


if __name__ == "__main__":
    main()
