"""Shared plumbing for the admin scripts: arguments, reports and exit status"""

import argparse
import asyncio
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncEngine

from agenthub.config import settings
from agenthub.db.database import script_engine
from agenthub.db.migrations import MIGRATIONS, MigrationReport, StepStatus, run_migration
from agenthub.logging_config import configure_logging
from agenthub.services.document_service import IngestionReport

STATUS_ICONS = {
    StepStatus.APPLIED: "✅",
    StepStatus.SKIPPED: "ℹ️ ",
    StepStatus.FAILED: "❌",
}


def build_parser(description: str) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=description)
    add_common_arguments(parser)
    return parser


def add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--database-url",
        default=None,
        help=(
            "Database to run against instead of DATABASE_URL. "
            "DATABASE_URL must still be set, settings are loaded at import"
        ),
    )
    parser.add_argument(
        "--strict",
        action=argparse.BooleanOptionalAction,
        default=settings.scripts_strict,
        help="Exit with status 1 when any step fails (default from SCRIPTS_STRICT)",
    )


def exit_code(ok: bool, strict: bool) -> int:
    """0 on success; on failure 1 when strict, 0 in best-effort mode."""
    if ok or not strict:
        return 0
    return 1


def print_migration_report(name: str, report: MigrationReport) -> None:
    for result in report.results:
        line = f"{STATUS_ICONS[result.status]} {result.name}: {result.status.value}"
        if result.error:
            line += f" ({result.error})"
        print(line)
    print(
        f"📋 {name}: {len(report.applied)} applied, "
        f"{len(report.skipped)} skipped, {len(report.failed)} failed"
    )


def print_ingestion_report(name: str, report: IngestionReport) -> None:
    for item, error in report.errors.items():
        print(f"❌ {item}: {error}")
    print(f"📋 {name}: {report.succeeded} succeeded, {report.failed} failed")


async def apply_named_migration(
    name: str,
    engine: Optional[AsyncEngine] = None,
    database_url: Optional[str] = None,
) -> MigrationReport:
    """Run one of the named migrations against engine, or a short-lived script engine."""
    steps = MIGRATIONS[name]
    if engine is not None:
        return await run_migration(engine, steps)
    async with script_engine(database_url) as bind:
        return await run_migration(bind, steps)


def migration_main(name: str, description: str, argv=None) -> int:
    args = build_parser(description).parse_args(argv)
    configure_logging()

    print(f"🧠 Running migration {name}...")
    report = asyncio.run(apply_named_migration(name, database_url=args.database_url))
    print_migration_report(name, report)
    return exit_code(report.ok, args.strict)
