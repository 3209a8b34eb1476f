"""
Command-line driver for the place-in-area pipeline.

Usage:
    place-in-area run INPUT [OUTPUT_DIR] [--name NAME] [--force] [--report PATH]
    place-in-area plan INPUT [OUTPUT_DIR] [--name NAME] [--force]
    place-in-area check

Exit status: 0 on success (including nothing to do), the failing command's
status when an external command fails, 1 for other pipeline errors, 2 for
usage errors, 130 when interrupted.
"""

import argparse
import logging
import sys
from typing import Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError

from libs.models import PipelineSettings, PostGISSettings, ToolSettings
from libs.pipeline import PipelineDriver, PipelineError, PipelineLayout

from .assets.health_checks import _check_toolchain
from .ops import ToolchainExecutor
from .resources import (
    Osm2pgsqlResource,
    OsmiumResource,
    PostGISResource,
    ReportResource,
)

logger = logging.getLogger("place_in_area")

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2
EXIT_INTERRUPTED = 130


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="place-in-area",
        description="Find every administrative boundary containing each OSM place",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Debug logging"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    def add_pipeline_args(sub: argparse.ArgumentParser) -> None:
        sub.add_argument("input", help="Root OSM extract (e.g. ireland.osm.pbf)")
        sub.add_argument(
            "output_dir",
            nargs="?",
            default=None,
            help="Directory for derived artifacts (default: PLACE_IN_AREA_OUTPUT_DIR or .)",
        )
        sub.add_argument("--name", help="Pipeline name (default: from the input filename)")
        sub.add_argument("--style", help="osm2pgsql style file (default: bundled style)")
        sub.add_argument(
            "--force", action="store_true", help="Re-run every stage regardless of freshness"
        )

    run = subparsers.add_parser("run", help="Run stale stages and the report")
    add_pipeline_args(run)
    run.add_argument(
        "--report",
        default=None,
        help="Report location relative to OUTPUT_DIR (default: PLACE_IN_AREA_REPORT_PATH)",
    )

    plan = subparsers.add_parser("plan", help="Show which stages would run")
    add_pipeline_args(plan)

    subparsers.add_parser("check", help="Check osmium, osm2pgsql and PostGIS")
    return parser


def _build_resources(tools: ToolSettings, database: PostGISSettings):
    osmium = OsmiumResource(binary=tools.osmium_bin)
    osm2pgsql = Osm2pgsqlResource(
        binary=tools.osm2pgsql_bin,
        cache_mb=tools.osm2pgsql_cache_mb,
        number_processes=tools.osm2pgsql_processes,
    )
    postgis = PostGISResource(
        host=database.host,
        port=database.port,
        user=database.user,
        password=database.password,
        database=database.database,
    )
    return osmium, osm2pgsql, postgis


def _layout_from_args(args, settings: PipelineSettings, tools: ToolSettings) -> PipelineLayout:
    output_dir = args.output_dir if args.output_dir is not None else settings.output_dir
    style = args.style or tools.osm2pgsql_style or None
    return PipelineLayout.from_input(
        args.input, output_dir, name=args.name, style_path=style
    )


def _run(args, settings: PipelineSettings, tools: ToolSettings, database: PostGISSettings) -> int:
    layout = _layout_from_args(args, settings, tools)
    if not layout.input_path.is_file():
        logger.error(f"Input extract not found: {layout.input_path}")
        return EXIT_USAGE

    osmium, osm2pgsql, postgis = _build_resources(tools, database)
    executor = ToolchainExecutor(
        osmium, osm2pgsql, postgis, progress_every=settings.progress_every
    )
    report = ReportResource(command=settings.report_command)
    driver = PipelineDriver(
        layout,
        executor,
        report=report if report.enabled else None,
        report_path=args.report or settings.report_path,
        log=logger,
    )

    summary = driver.run(force=args.force)
    for stage in summary.stages:
        rows = f", {stage.rows_written:,} rows" if stage.rows_written is not None else ""
        logger.info(f"  {stage.stage}: {stage.outcome.value}{rows}")
    logger.info(f"Export: {summary.export_path}")
    if summary.report_path:
        logger.info(f"Report: {summary.report_path}")
    return EXIT_OK


def _plan(args, settings: PipelineSettings, tools: ToolSettings, database: PostGISSettings) -> int:
    layout = _layout_from_args(args, settings, tools)
    if not layout.input_path.is_file():
        logger.error(f"Input extract not found: {layout.input_path}")
        return EXIT_USAGE

    osmium, osm2pgsql, postgis = _build_resources(tools, database)
    driver = PipelineDriver(layout, ToolchainExecutor(osmium, osm2pgsql, postgis), log=logger)
    for stage, runs in driver.plan(force=args.force):
        status = "run" if runs else "up to date"
        after = ", ".join(driver.graph.predecessors(stage.name))
        line = f"{stage.name:<22} {status:<11} {driver.store.resolve(stage.output)}"
        print(f"{line}  (after {after})" if after else line)
    return EXIT_OK


def _check(args, settings: PipelineSettings, tools: ToolSettings, database: PostGISSettings) -> int:
    osmium, osm2pgsql, postgis = _build_resources(tools, database)
    try:
        results = _check_toolchain(osmium, osm2pgsql, postgis, logger)
    except RuntimeError as e:
        logger.error(str(e))
        return EXIT_FAILURE
    for key, value in results.items():
        print(f"{key}: {value}")
    return EXIT_OK


COMMANDS = {
    "run": _run,
    "plan": _plan,
    "check": _check,
}


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    CLI entry point.

    Returns:
        Process exit status
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = PipelineSettings()
    except ValueError as e:
        parser.error(f"invalid settings: {e}")

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else getattr(logging, settings.log_level),
        format="%(asctime)s %(levelname)s %(message)s",
    )

    try:
        return COMMANDS[args.command](args, settings, ToolSettings(), PostGISSettings())
    except KeyboardInterrupt:
        logger.error("Interrupted")
        return EXIT_INTERRUPTED
    except PipelineError as e:
        logger.error(str(e))
        return e.exit_status
    except SQLAlchemyError as e:
        logger.error(f"Database error: {e}")
        return EXIT_FAILURE
    except ValueError as e:
        # Unusable pipeline name, style path or settings
        logger.error(str(e))
        return EXIT_USAGE


if __name__ == "__main__":
    sys.exit(main())
