"""
Dump the schema metadata of a SQLite file as JSON or YAML.

Usage:
    sqlite-schema path/to/db.sqlite [--format json|yaml] [--out FILE]
                  [--tables-query SQL] [--indent N] [--log-level LEVEL]

SCHEMA_TABLES_QUERY (environment or .env) supplies the default --tables-query.

Exit codes: 0 ok, 2 source access failure, 3 data-integrity failure,
4 rejected tables query.
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

import yaml  # type: ignore[import-untyped]
from dotenv import load_dotenv

from sqlite_parser.errors.exceptions import SchemaParseError
from sqlite_parser.errors.mapper import exit_code_for
from sqlite_parser.parser import parse
from sqlite_parser.types import Schema

log = logging.getLogger("sqlite_parser.cli")


def _render(schema: Schema, fmt: str, indent: int) -> str:
    payload = schema.to_dict()
    if fmt == "yaml":
        return yaml.safe_dump(payload, sort_keys=False, indent=indent)
    return json.dumps(payload, indent=indent if indent > 0 else None)


def build_arg_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="sqlite-schema",
        description="Extract table/column/foreign-key metadata from a SQLite file.",
    )
    ap.add_argument("db_path", help="Path to the SQLite database file")
    ap.add_argument("--format", choices=("json", "yaml"), default="json")
    ap.add_argument("--out", default=None, help="Write to this file instead of stdout")
    ap.add_argument(
        "--tables-query",
        default=os.getenv("SCHEMA_TABLES_QUERY", "").strip() or None,
        help="SELECT returning table names in its first column "
        "(default: $SCHEMA_TABLES_QUERY, else every table in sqlite_master)",
    )
    ap.add_argument("--indent", type=int, default=2)
    ap.add_argument("--log-level", default="WARNING")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv()
    args = build_arg_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    rendered: List[str] = []

    def sink(schema: Schema) -> None:
        rendered.append(_render(schema, args.format, args.indent))

    try:
        parse(args.db_path, sink, tables_query=args.tables_query)
    except SchemaParseError as exc:
        code = exc.code.value if exc.code else "unknown"
        print(f"error [{code}]: {exc}", file=sys.stderr)
        for d in exc.details or []:
            print(f"  {d}", file=sys.stderr)
        return exit_code_for(exc.code)

    text = rendered[0]
    if args.out:
        Path(args.out).write_text(text + "\n", encoding="utf-8")
        log.info("Wrote schema to %s", args.out)
    else:
        sys.stdout.write(text + "\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
