"""Command line entry point for inspecting and managing progress."""
import argparse
import logging
import sys
from datetime import datetime
from typing import List, Optional

from wordhunt.app import WordHunt
from wordhunt.config import ensure_directories, settings
from wordhunt.logging_config import setup_logging
from wordhunt.services.progress_tracker import ProgressTracker

logger = logging.getLogger("wordhunt")


def _format_time(ms: int) -> str:
    return datetime.fromtimestamp(ms / 1000).strftime("%Y-%m-%d %H:%M") if ms else "never"


def show_dashboard(tracker: ProgressTracker, limit: int) -> None:
    """Print the progress dashboard."""
    progress = tracker.get_progress()
    print(f"Sessions played: {progress.total_sessions}")
    print(f"Words learned:   {progress.total_words_learned}")
    print(f"Last session:    {_format_time(progress.last_session)}")
    print(f"Time played:     {tracker.get_total_time_played() // 60} min")

    print("\nWords by status:")
    for status, overviews in tracker.get_words_by_status().items():
        print(f"  {status:<13} {len(overviews)}")

    struggling = tracker.get_struggling_words()
    if struggling:
        print("\nStruggling words:")
        for overview in struggling:
            record = overview.record
            print(f"  {record.word:<8} {record.correct}/{record.attempts} correct ({overview.difficulty})")

    sessions = tracker.get_recent_sessions(limit)
    if sessions:
        print("\nRecent sessions:")
        for session in sessions:
            print(
                f"  {_format_time(session.date)}  {session.difficulty:<12} "
                f"{session.words_correct}/{session.words_attempted}  score {session.score}"
            )


def show_selection(tracker: ProgressTracker, difficulty: str, count: int) -> int:
    """Print the words the next game would use."""
    words = tracker.select_adaptive_words(difficulty, count)
    if not words:
        print(f"No words available for difficulty '{difficulty}'")
        return 1

    for word in words:
        record = tracker.get_word_data(word)
        mastery = tracker.calculate_mastery(word)
        print(
            f"{word:<8} box {record.box} ({tracker.get_box_label(record.box)}), "
            f"mastery {mastery} ({tracker.get_mastery_label(mastery)}), "
            f"{tracker.get_distractor_count(word)} buttons"
        )
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="wordhunt", description="Word Hunt progress tools")
    parser.add_argument("--database-url", default=None, help="SQLAlchemy database URL")
    subparsers = parser.add_subparsers(dest="command", required=True)

    dashboard = subparsers.add_parser("dashboard", help="show learning progress")
    dashboard.add_argument("--limit", type=int, default=10, help="recent sessions to list")

    select = subparsers.add_parser("select", help="preview the next game's words")
    select.add_argument("--difficulty", default="alphabet")
    select.add_argument("--count", type=int, default=settings.game.words_per_game)

    reset = subparsers.add_parser("reset", help="delete all progress")
    reset.add_argument("--yes", action="store_true", help="confirm the reset")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Run the command line tool."""
    args = build_parser().parse_args(argv)

    app = WordHunt(database_url=args.database_url)
    try:
        tracker = app.start()
        if args.command == "dashboard":
            show_dashboard(tracker, args.limit)
        elif args.command == "select":
            return show_selection(tracker, args.difficulty, args.count)
        elif args.command == "reset":
            if not args.yes:
                print("Refusing to reset progress without --yes")
                return 1
            removed = tracker.reset_all_progress()
            print(f"Removed {removed} stored entries")
        return 0
    finally:
        app.stop()


def run() -> None:
    """Console script entry: configure logging, then run."""
    # Ensure all required directories exist
    ensure_directories()

    setup_logging("Starting Word Hunt progress tools...")

    try:
        sys.exit(main())
    except KeyboardInterrupt:
        logger.info("Received keyboard interrupt, shutting down...")


if __name__ == "__main__":
    run()
