#!/usr/bin/env python3
"""
Extract text from Word documents into .txt files.

    read_docx <input_dir> [--output-dir DIR]

Every .docx (and .txt/.md) in input_dir becomes <name>.txt in the output
directory (default: <input_dir>/extracted). A document that cannot be read
is reported and skipped; the others are still extracted.
"""

import sys
from pathlib import Path

from agenthub.logging_config import configure_logging
from agenthub.scripts.common import build_parser, exit_code, print_ingestion_report
from agenthub.services.document_service import get_document_service


def main(argv=None) -> int:
    parser = build_parser("Extract text from .docx documents")
    parser.add_argument("input_dir", type=Path)
    parser.add_argument("--output-dir", type=Path, default=None)
    args = parser.parse_args(argv)
    configure_logging()

    if not args.input_dir.is_dir():
        print(f"❌ Not a directory: {args.input_dir}")
        return exit_code(False, args.strict)

    print(f"📄 Extracting documents from {args.input_dir}...")
    report = get_document_service().extract_directory(args.input_dir, args.output_dir)
    for output in report.outputs:
        print(f"  ✅ {output}")
    print_ingestion_report("read_docx", report)
    return exit_code(report.failed == 0, args.strict)


if __name__ == "__main__":
    sys.exit(main())
