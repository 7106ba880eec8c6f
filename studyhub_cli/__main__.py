"""CLI interface for StudyHub.

Usage:
    python -m studyhub_cli describe 88 92 75 81          Summarize a sample
    python -m studyhub_cli correlate --x 1 2 3 --y 2 4 7 Correlate two series
    python -m studyhub_cli impact 100 --earned 850 --total 1000 --current 85
    python -m studyhub_cli add "front" "back"            Add a flashcard
    python -m studyhub_cli due                           List due flashcards
    python -m studyhub_cli review 3 --quality 4          Review a flashcard
"""

import argparse
import asyncio
import logging
import sys

from studyhub.analytics.correlation import analyze_correlation
from studyhub.analytics.descriptive import descriptive_stats, format_descriptive_stats
from studyhub.config import utcnow
from studyhub.database import async_session, init_db
from studyhub.errors import StudyHubError
from studyhub.planner.impact import CourseGradeContext, calculate_impact
from studyhub.srs.service import (
    FlashcardNotFoundError,
    create_flashcard,
    list_due_flashcards,
    review_flashcard,
)
from studyhub.srs.sm2 import quality_from_answer


def cmd_describe(args: argparse.Namespace) -> None:
    """Print descriptive statistics for the given values."""
    stats = descriptive_stats(args.values)
    print()
    for line in format_descriptive_stats(stats).splitlines():
        print(f"  {line}")
    print()


def cmd_correlate(args: argparse.Namespace) -> None:
    """Print the correlation between two series."""
    result = analyze_correlation(args.x, args.y)
    print(f"  {result.description}")
    print(f"  Significance: {result.significance}")


def cmd_impact(args: argparse.Namespace) -> None:
    """Print how an assignment can move the course grade."""
    context = CourseGradeContext(
        current_grade=args.current,
        total_points=args.total,
        earned_points=args.earned,
    )
    impact = calculate_impact(args.points, context)

    print(f"\n  {impact.explanation}")
    print(f"  {'Priority:':<20} {impact.priority.value}")
    print(f"  {'Impact score:':<20} {impact.impact_score:.3f}")
    print(
        f"  {'Grade range:':<20} "
        f"{impact.grade_change_range.min:.2f}% - {impact.grade_change_range.max:.2f}%"
    )
    for letter, needed in impact.target_score_for.items():
        shown = f"{needed:.1f}%" if needed is not None else "-"
        print(f"  {'Needed for ' + letter + ':':<20} {shown}")
    print()


async def cmd_add(args: argparse.Namespace) -> None:
    """Add a new flashcard."""
    await init_db()
    async with async_session() as db:
        card = await create_flashcard(db, args.front, args.back, deck=args.deck)
    print(f"  Added flashcard {card.id} to '{card.deck}' (due now).")


async def cmd_due(args: argparse.Namespace) -> None:
    """List flashcards due for review."""
    await init_db()
    async with async_session() as db:
        cards = await list_due_flashcards(db, now=utcnow(), limit=args.limit, deck=args.deck)

    if not cards:
        print("  No cards due for review. You're all caught up!")
        return

    print(f"  {len(cards)} cards due:")
    for card in cards:
        when = card.next_review.strftime("%Y-%m-%d") if card.next_review else "new"
        print(f"  [{card.id}] {card.front}  ({when})")


async def cmd_review(args: argparse.Namespace) -> None:
    """Record a review for one flashcard."""
    if args.quality is not None:
        quality = args.quality
    else:
        quality = quality_from_answer(args.correct, args.confidence)

    await init_db()
    async with async_session() as db:
        try:
            outcome = await review_flashcard(db, args.card_id, quality)
        except FlashcardNotFoundError as exc:
            print(f"  {exc}", file=sys.stderr)
            raise SystemExit(1) from None

    schedule = outcome.schedule
    print(
        f"  Next review in {schedule.interval} days "
        f"({schedule.next_review:%Y-%m-%d}), ease {schedule.ease_factor:.2f}"
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="studyhub",
        description="Grade analytics, assignment planning and flashcard review",
    )
    parser.add_argument("-v", "--verbose", action="store_true")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # describe
    describe_parser = subparsers.add_parser("describe", help="Summarize a numeric sample")
    describe_parser.add_argument("values", nargs="+", type=float)

    # correlate
    correlate_parser = subparsers.add_parser("correlate", help="Correlate two series")
    correlate_parser.add_argument("--x", nargs="+", type=float, required=True)
    correlate_parser.add_argument("--y", nargs="+", type=float, required=True)

    # impact
    impact_parser = subparsers.add_parser("impact", help="Score an assignment's grade impact")
    impact_parser.add_argument("points", type=float, help="Assignment points possible")
    impact_parser.add_argument("--earned", type=float, required=True, help="Points earned so far")
    impact_parser.add_argument("--total", type=float, required=True, help="Total course points")
    impact_parser.add_argument("--current", type=float, required=True, help="Current grade (%%)")

    # add
    add_parser = subparsers.add_parser("add", help="Add a flashcard")
    add_parser.add_argument("front")
    add_parser.add_argument("back")
    add_parser.add_argument("-d", "--deck", default="default")

    # due
    due_parser = subparsers.add_parser("due", help="List flashcards due for review")
    due_parser.add_argument("-d", "--deck", default=None)
    due_parser.add_argument("-n", "--limit", type=int, default=None)

    # review
    review_parser = subparsers.add_parser("review", help="Review a flashcard")
    review_parser.add_argument("card_id", type=int)
    review_group = review_parser.add_mutually_exclusive_group(required=True)
    review_group.add_argument("-q", "--quality", type=int, help="Recall quality 0-5")
    review_group.add_argument("--correct", action="store_true", default=None)
    review_group.add_argument("--incorrect", dest="correct", action="store_false")
    review_parser.add_argument(
        "-c", "--confidence", type=int, default=3, help="Confidence 1-5 (default: 3)"
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    """Entry point for the StudyHub CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    if not args.command:
        parser.print_help()
        return

    sync_commands = {
        "describe": cmd_describe,
        "correlate": cmd_correlate,
        "impact": cmd_impact,
    }
    async_commands = {
        "add": cmd_add,
        "due": cmd_due,
        "review": cmd_review,
    }

    try:
        if args.command in sync_commands:
            sync_commands[args.command](args)
        else:
            asyncio.run(async_commands[args.command](args))
    except StudyHubError as exc:
        print(f"  error ({exc.kind}): {exc}", file=sys.stderr)
        raise SystemExit(2) from None


if __name__ == "__main__":
    main()
