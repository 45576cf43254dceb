# ABOUTME: CLI entry point for the newsletter analytics engine.
# ABOUTME: Provides subcommands: recompute-risk, report.

import argparse
import asyncio
import sys
from collections.abc import Awaitable, Callable

import structlog
from pydantic import BaseModel

from newsletter_analytics.config import get_settings
from newsletter_analytics.db.session import close_db, get_session
from newsletter_analytics.logging_config import configure_logging
from newsletter_analytics.services import Analytics, build_analytics

ReportQuery = Callable[[Analytics, argparse.Namespace], Awaitable[BaseModel]]

REPORTS: dict[str, ReportQuery] = {
    "health": lambda a, args: a.health.get_health_details(args.days),
    "subscribers": lambda a, args: a.subscribers.get_subscriber_summary(args.days),
    "content": lambda a, args: a.content.get_content_intelligence(args.days),
    "newsletters": lambda a, args: a.newsletters.get_newsletter_summary(args.limit),
    "overview": lambda a, args: a.overview.get_comprehensive_overview(args.days),
    "location": lambda a, args: a.audience.get_location_audience_analytics(args.days),
    "clicks": lambda a, args: a.clicks.get_click_analytics(args.days),
}


async def _recompute_risk() -> BaseModel:
    try:
        async with get_session() as session:
            return await build_analytics(session).engagement.update_risk_levels()
    finally:
        await close_db()


async def _run_report(args: argparse.Namespace) -> BaseModel:
    try:
        async with get_session() as session:
            return await REPORTS[args.name](build_analytics(session), args)
    finally:
        await close_db()


def cmd_recompute_risk(_args: argparse.Namespace) -> int:
    """Recompute engagement scores and risk tiers for all active subscribers."""
    log = structlog.get_logger()
    log.info("cmd_recompute_risk_start")

    try:
        result = asyncio.run(_recompute_risk())
    except Exception:
        log.exception("cmd_recompute_risk_failed")
        return 1

    log.info("cmd_recompute_risk_complete", processed=result.processed)
    print(result.model_dump_json(by_alias=True, indent=2))
    return 0


def cmd_report(args: argparse.Namespace) -> int:
    """Print one analytics report as JSON."""
    log = structlog.get_logger()
    log.info("cmd_report_start", report=args.name, days=args.days)

    max_days = get_settings().max_window_days
    if args.days > max_days:
        log.error("cmd_report_invalid", report=args.name, error=f"Window exceeds {max_days} days")
        return 1

    try:
        result = asyncio.run(_run_report(args))
    except ValueError as e:
        log.error("cmd_report_invalid", report=args.name, error=str(e))
        return 1
    except Exception:
        log.exception("cmd_report_failed", report=args.name)
        return 1

    print(result.model_dump_json(by_alias=True, indent=2))
    return 0


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with subcommands."""
    settings = get_settings()

    parser = argparse.ArgumentParser(
        prog="newsletter_analytics",
        description="Newsletter analytics - engagement, health, and content reports",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # recompute-risk command
    subparsers.add_parser(
        "recompute-risk",
        help="Recompute engagement scores and risk levels for active subscribers",
    )

    # report command
    report_parser = subparsers.add_parser(
        "report",
        help="Print an analytics report as JSON",
    )
    report_parser.add_argument(
        "name",
        choices=sorted(REPORTS),
        help="Report to print",
    )
    report_parser.add_argument(
        "--days",
        type=int,
        default=settings.default_window_days,
        help=f"Trailing window in days (default: {settings.default_window_days})",
    )
    report_parser.add_argument(
        "--limit",
        type=int,
        default=settings.newsletter_comparison_limit,
        help=f"Newsletters to compare (default: {settings.newsletter_comparison_limit})",
    )

    return parser


def main() -> int:
    """Main entry point."""
    configure_logging()

    parser = create_parser()
    args = parser.parse_args()

    commands = {
        "recompute-risk": cmd_recompute_risk,
        "report": cmd_report,
    }

    handler = commands.get(args.command)
    if handler:
        return handler(args)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
