# src/main.py — v2
"""CLI entry point: analyze and validate commands.

Usage:
    soilsense analyze <file> --district D --state S --area A --season KHARIF
    soilsense validate <file>
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from soilsense.core.models import ReportStatus, Season
from soilsense.version import __version__

if TYPE_CHECKING:
    from soilsense.config.settings import Settings

logger = logging.getLogger(__name__)

CLI_OWNER_ID = "cli"


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    from soilsense.config.settings import ConfigurationError, load_settings

    try:
        settings = load_settings()
    except ConfigurationError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2

    _setup_logging(settings, args.verbose)

    try:
        return asyncio.run(args.func(args, settings))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return 1


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="soilsense",
        description=f"soilsense v{__version__}: soil report analysis",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- analyze ---
    p_analyze = subparsers.add_parser(
        "analyze", help="Analyze a soil report and print the completed record",
    )
    p_analyze.add_argument("file", type=Path, help="Path to the report file")
    p_analyze.add_argument("--district", required=True)
    p_analyze.add_argument("--state", required=True)
    p_analyze.add_argument("--area", required=True)
    p_analyze.add_argument(
        "--season", required=True, type=str.upper,
        choices=[s.value for s in Season],
        help="Cropping season",
    )
    p_analyze.add_argument(
        "--detailed", action="store_true",
        help="Also print detailed recommendations",
    )
    p_analyze.set_defaults(func=_cmd_analyze)

    # --- validate ---
    p_validate = subparsers.add_parser(
        "validate", help="Check whether a file looks like a soil report",
    )
    p_validate.add_argument("file", type=Path, help="Path to the report file")
    p_validate.set_defaults(func=_cmd_validate)

    return parser


async def _cmd_analyze(args: argparse.Namespace, settings: Settings) -> int:
    """Run one report through the pipeline and wait for the result."""
    from soilsense.api.facade import ReportPipeline

    file_path: Path = args.file
    if not file_path.exists():
        logger.error("File not found: %s", file_path)
        return 1

    async with ReportPipeline.from_settings(settings) as pipeline:
        receipt = await pipeline.submit_report(
            owner_id=CLI_OWNER_ID,
            file_path=file_path,
            district=args.district,
            state=args.state,
            area=args.area,
            season=args.season,
        )
        await pipeline.lifecycle.drain()
        record = await pipeline.get_report(receipt.report.id)

        output = {"report": record.to_dict()}
        if args.detailed:
            detailed = await pipeline.get_detailed_recommendations(
                record.id, CLI_OWNER_ID, "USER",
            )
            output["detailedRecommendations"] = detailed.to_dict()

    print(json.dumps(output, ensure_ascii=False, indent=2))
    return 0 if record.status == ReportStatus.COMPLETED else 1


async def _cmd_validate(args: argparse.Namespace, settings: Settings) -> int:
    """Print the content-gate report for a file."""
    from soilsense.api.facade import ReportPipeline

    file_path: Path = args.file
    if not file_path.exists():
        logger.error("File not found: %s", file_path)
        return 1

    pipeline = ReportPipeline.from_settings(settings, llm_client=None)
    report = await pipeline.check_content(file_path)
    print(json.dumps(report.to_dict(), ensure_ascii=False, indent=2))
    return 0 if report.is_valid else 1


def _setup_logging(settings: Settings, verbose: bool) -> None:
    """Configure logging for CLI usage: console output on stderr."""
    from soilsense.logging.logger import setup_logging

    setup_logging(
        level="DEBUG" if verbose else settings.log_level,
        log_format=settings.log_format,
        log_file=str(settings.log_file) if settings.log_file else None,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
        stream=sys.stderr,
    )
    # Quiet noisy libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


if __name__ == "__main__":
    sys.exit(main())
