#!/usr/bin/env python3
"""
agenthub - Command-line interface for database setup and ingestion.

Usage:
    agenthub setup-db
    agenthub migrate-tables --no-strict
    agenthub create-default-user
    agenthub seed --mode full
    agenthub read-docx ./docs
    agenthub import-knowledge ./docs/extracted --agent-id <id> --split-headers
    agenthub check-tables
    agenthub serve --port 8000
"""
import argparse
import sys

from agenthub.scripts import (
    add_embedding,
    check_tables,
    create_default_user,
    import_knowledge,
    migrate_agent_integration,
    migrate_tables,
    read_docx,
    seed_data,
    setup_db,
)

# command -> (script main, help)
SCRIPT_COMMANDS = {
    "setup-db": (setup_db.main, "Enable pgvector and create all tables"),
    "add-embedding": (add_embedding.main, "Add the knowledge_base.embedding column"),
    "migrate-tables": (migrate_tables.main, "Add missing knowledge_base columns and indexes"),
    "migrate-agent-integration": (migrate_agent_integration.main, "Add per-agent Google integration columns"),
    "create-default-user": (create_default_user.main, "Create the default user and print its id"),
    "seed": (seed_data.main, "Seed a default user, agent and sample data"),
    "read-docx": (read_docx.main, "Extract text from .docx documents"),
    "import-knowledge": (import_knowledge.main, "Import text files into the knowledge base"),
    "check-tables": (check_tables.main, "Report missing tables and columns"),
}


def cmd_serve(args) -> int:
    """Run the API with uvicorn."""
    import uvicorn

    uvicorn.run("agenthub.main:app", host=args.host, port=args.port, reload=args.reload)
    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        prog="agenthub",
        description="AgentHub CLI - database setup, seeding and knowledge ingestion",
    )
    sub = parser.add_subparsers(dest="command", help="Command")

    for name, (func, help_text) in SCRIPT_COMMANDS.items():
        # Script options are parsed by the script itself
        p = sub.add_parser(name, help=help_text, add_help=False)
        p.set_defaults(script=func)

    p_serve = sub.add_parser("serve", help="Run the HTTP API")
    p_serve.add_argument("--host", default="0.0.0.0")
    p_serve.add_argument("--port", type=int, default=8000)
    p_serve.add_argument("--reload", action="store_true")
    p_serve.set_defaults(func=cmd_serve)

    args, script_args = parser.parse_known_args(argv)
    if not args.command:
        parser.print_help()
        return 0

    if hasattr(args, "script"):
        return args.script(script_args)
    if script_args:
        parser.error(f"unrecognized arguments: {' '.join(script_args)}")
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
