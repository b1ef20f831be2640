#!/usr/bin/env python3
"""
Import text files as knowledge base entries with embeddings.

    import_knowledge <dir> [--agent-id ID] [--split-headers]

Without --agent-id entries are global (visible to every agent).
With --split-headers each "## " section becomes its own entry.
"""

import asyncio
import sys
from pathlib import Path
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncEngine

from agenthub.db.database import script_engine, session_maker_for
from agenthub.logging_config import configure_logging
from agenthub.scripts.common import build_parser, exit_code, print_ingestion_report
from agenthub.services.document_service import IngestionReport
from agenthub.services.knowledge_service import KnowledgeService


async def import_knowledge(
    directory: Path,
    agent_id: Optional[str] = None,
    split_headers: bool = False,
    engine: Optional[AsyncEngine] = None,
    knowledge_service: Optional[KnowledgeService] = None,
    database_url: Optional[str] = None,
) -> IngestionReport:
    if engine is None:
        async with script_engine(database_url) as bind:
            return await import_knowledge(
                directory, agent_id, split_headers, bind, knowledge_service
            )

    service = knowledge_service or KnowledgeService()
    async with session_maker_for(engine)() as db:
        return await service.import_directory(
            db, directory, agent_id=agent_id, split_headers=split_headers
        )


def main(argv=None) -> int:
    parser = build_parser("Import text files into the knowledge base")
    parser.add_argument("directory", type=Path)
    parser.add_argument("--agent-id", default=None, help="Owning agent; omit for global knowledge")
    parser.add_argument("--split-headers", action="store_true", help="One entry per '## ' section")
    args = parser.parse_args(argv)
    configure_logging()

    if not args.directory.is_dir():
        print(f"❌ Not a directory: {args.directory}")
        return exit_code(False, args.strict)

    print(f"📚 Importing knowledge from {args.directory} ({args.agent_id or 'global'})...")
    try:
        report = asyncio.run(import_knowledge(
            args.directory,
            agent_id=args.agent_id,
            split_headers=args.split_headers,
            database_url=args.database_url,
        ))
    except Exception as e:
        print(f"❌ Import failed: {e}")
        return exit_code(False, args.strict)

    print_ingestion_report("import_knowledge", report)
    return exit_code(report.failed == 0, args.strict)


if __name__ == "__main__":
    sys.exit(main())
