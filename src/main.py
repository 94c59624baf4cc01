# src/main.py - v2
"""CLI entry point.

Usage:
    pathwise categories
    pathwise roadmap "Data Scientist" [--slug data-scientist]
    pathwise skill "Public Speaking"
    pathwise quiz '{"activity": "Building things"}' [--type long]
    pathwise lookup <fingerprint> [--type quick]
    pathwise view <slug-or-id> [--kind skill]
    pathwise stats
    pathwise migrate-categories [--dry-run]

Results are printed to stdout as JSON; logs go through pathwise.logging.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

from pathwise.version import __version__

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    from pathwise.config.settings import ConfigurationError, load_settings
    from pathwise.logging.context import set_request_context
    from pathwise.logging.logger import setup_logging_from_settings

    try:
        settings = load_settings(**_overrides(args))
    except ConfigurationError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2
    setup_logging_from_settings(settings)
    set_request_context()

    try:
        return asyncio.run(args.func(args, settings))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as exc:
        logger.error("Command failed: %s", exc, exc_info=args.verbose)
        return 1


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="pathwise",
        description=f"pathwise v{__version__} - career content identity & resolution engine",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--store", choices=["memory", "json", "sqlite", "redis"], default=None,
        help="Override STORE_BACKEND",
    )

    subparsers = parser.add_subparsers(dest="command")

    p_categories = subparsers.add_parser("categories", help="List merged career categories")
    p_categories.set_defaults(func=_cmd_categories)

    p_roadmap = subparsers.add_parser("roadmap", help="Resolve or generate a career roadmap")
    p_roadmap.add_argument("name", help="Career name")
    p_roadmap.add_argument("--slug", default=None, help="Explicit slug")
    p_roadmap.set_defaults(func=_cmd_roadmap)

    p_skill = subparsers.add_parser("skill", help="Resolve or generate a soft-skill roadmap")
    p_skill.add_argument("name", help="Soft skill name")
    p_skill.set_defaults(func=_cmd_skill)

    p_quiz = subparsers.add_parser("quiz", help="Career suggestions for quiz answers")
    p_quiz.add_argument(
        "answers",
        help="Answers as a JSON list or object, or @path to a JSON file",
    )
    p_quiz.add_argument("--type", dest="quiz_type", default="quick", help="quick (default) or long")
    p_quiz.set_defaults(func=_cmd_quiz)

    p_lookup = subparsers.add_parser("lookup", help="Fetch a cached quiz result by fingerprint")
    p_lookup.add_argument("fingerprint", help="32-char answer fingerprint")
    p_lookup.add_argument("--type", dest="quiz_type", default=None, help="quick or long")
    p_lookup.set_defaults(func=_cmd_lookup)

    p_view = subparsers.add_parser("view", help="Record a view")
    p_view.add_argument("target", help="Entity slug or id")
    p_view.add_argument("--kind", choices=["roadmap", "skill"], default="roadmap")
    p_view.set_defaults(func=_cmd_view)

    p_stats = subparsers.add_parser("stats", help="Show platform statistics")
    p_stats.set_defaults(func=_cmd_stats)

    p_migrate = subparsers.add_parser(
        "migrate-categories", help="Persist inferred categories for legacy roadmaps",
    )
    p_migrate.add_argument("--dry-run", action="store_true", help="Report without writing")
    p_migrate.set_defaults(func=_cmd_migrate)

    return parser


def _overrides(args: argparse.Namespace) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    if args.verbose:
        overrides["log_level"] = "DEBUG"
    if args.store:
        overrides["store_backend"] = args.store
    return overrides


def _engine(settings: Any) -> Any:
    from pathwise.api.facade import ContentEngine

    return ContentEngine.from_settings(settings)


async def _cmd_categories(args: argparse.Namespace, settings: Any) -> int:
    categories = await _engine(settings).list_merged_categories()
    _print_json([c.model_dump() for c in categories])
    return 0


async def _cmd_roadmap(args: argparse.Namespace, settings: Any) -> int:
    result = await _engine(settings).resolve_or_create_roadmap(args.name, slug=args.slug)
    _print_json(result.model_dump(mode="json"))
    return 0


async def _cmd_skill(args: argparse.Namespace, settings: Any) -> int:
    result = await _engine(settings).resolve_or_create_skill(args.name)
    _print_json(result.model_dump(mode="json"))
    return 0


async def _cmd_quiz(args: argparse.Namespace, settings: Any) -> int:
    answers = _load_answers(args.answers)
    result = await _engine(settings).resolve_quiz_result(answers, args.quiz_type)
    _print_json(result.model_dump(mode="json"))
    return 0


async def _cmd_lookup(args: argparse.Namespace, settings: Any) -> int:
    result = await _engine(settings).lookup_quiz_result(args.fingerprint, args.quiz_type)
    if result is None:
        logger.error("No cached result for %s", args.fingerprint)
        return 1
    _print_json(result.model_dump(mode="json"))
    return 0


async def _cmd_view(args: argparse.Namespace, settings: Any) -> int:
    outcome = await _engine(settings).record_view(args.target, kind=args.kind)
    if not outcome.ok:
        logger.error("View not recorded: %s", outcome.error)
        return 1
    print(f"View recorded for {args.kind} {args.target}")
    return 0


async def _cmd_stats(args: argparse.Namespace, settings: Any) -> int:
    stats = await _engine(settings).stats()
    print("\nPlatform statistics:")
    print(f"  Roadmaps:            {stats.total_roadmaps}")
    print(f"  Generated roadmaps:  {stats.generated_roadmaps}")
    print(f"  Soft skills:         {stats.total_skills}")
    print(f"  Categories in use:   {stats.total_categories}")
    print(f"  Total views:         {stats.total_views}")
    for kind, count in sorted(stats.quiz_results_by_kind.items()):
        print(f"  Quiz results ({kind}): {count}")
    return 0


async def _cmd_migrate(args: argparse.Namespace, settings: Any) -> int:
    from pathwise.taxonomy.migration import migrate_categories

    engine = _engine(settings)
    report = await migrate_categories(engine.store, engine.categories, dry_run=args.dry_run)

    print(f"\nCategory migration{' (dry run)' if report.dry_run else ''}:")
    print(f"  Scanned:    {report.scanned}")
    print(f"  Changes:    {len(report.changes)}")
    print(f"  Updated:    {report.updated}")
    print(f"  Unmatched:  {len(report.unmatched)}")
    for change in report.changes:
        print(f"    {change.slug}: {change.old_category!r} -> {change.new_category!r} ({change.source})")
    return 0 if not report.failed else 1


def _load_answers(raw: str) -> Any:
    """Parse answers from a JSON literal or an @file reference."""
    text = Path(raw[1:]).read_text(encoding="utf-8") if raw.startswith("@") else raw
    return json.loads(text)


def _print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False, default=str))


if __name__ == "__main__":
    sys.exit(main())
