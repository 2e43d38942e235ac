"""
cli.py – manage fetch sources and run fetches from the shell.

Commands
--------
list                      Show configured fetch sources.
add                       Add a source (all fields optional).
edit ID                   Change fields of a source.
delete ID                 Remove a source.
import FILE|-             Append sources from a JSON array (``-`` reads stdin).
export [--source ID]      Print sources marked for export (or one source).
fetch NAME_OR_ID...       Fetch records and write notes.

Example
-------
python run_fetch.py fetch "Reading list" --filter week
python run_fetch.py export > sources.json
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Callable, List, Optional, Sequence, TextIO

from .config import ConfigManager, GlobalConfig
from .exceptions import TableFetchError
from .models import DATE_FILTER_OPTIONS, DateFilterOption, FetchSource, find_date_filter
from .pipeline import Pipeline
from .utils.logging_cfg import configure_logging
from .utils.run_summary import Summary

log = logging.getLogger(__name__)


# ── recency prompt ────────────────────────────────────────────────────────
def prompt_date_filter(
    read: Callable[[str], str] = input, out: TextIO = sys.stdout
) -> DateFilterOption:
    """Ask until the user picks one of the fixed recency options."""
    for index, option in enumerate(DATE_FILTER_OPTIONS, start=1):
        out.write(f"{index}. {option.name}\n")

    while True:
        choice = find_date_filter(read("Choose notes to fetch [1-6]: "))
        if choice is not None:
            return choice
        out.write("Please pick one of the listed options.\n")


# ── sub-commands ──────────────────────────────────────────────────────────
def _cmd_list(pipeline: Pipeline, args: argparse.Namespace) -> int:
    for source in pipeline.settings.sources:
        key = "••••••••" if source.api_key else "(none)"
        flag = "export" if source.will_export else "no-export"
        print(f"{source.id}  {source.display_name}  [{flag}]")
        print(f"    URL: {source.url}")
        print(f"    Path: {source.path}")
        print(f"    API Key: {key}")
    return 0


def _cmd_add(pipeline: Pipeline, args: argparse.Namespace) -> int:
    source = pipeline.settings.add(
        FetchSource(
            name=args.name or "",
            url=args.url or "",
            api_key=args.api_key or "",
            path=args.path or "",
            will_export=args.export,
        )
    )
    print(source.id)
    return 0


def _cmd_edit(pipeline: Pipeline, args: argparse.Namespace) -> int:
    pipeline.settings.update(
        args.id,
        name=args.name,
        url=args.url,
        api_key=args.api_key,
        path=args.path,
        will_export=args.export,
    )
    return 0


def _cmd_delete(pipeline: Pipeline, args: argparse.Namespace) -> int:
    pipeline.settings.delete(args.id)
    return 0


def _cmd_import(pipeline: Pipeline, args: argparse.Namespace) -> int:
    text = sys.stdin.read() if args.file == "-" else Path(args.file).read_text(encoding="utf-8")
    imported = pipeline.settings.import_sources(text)
    if imported is None:
        return 1
    print(f"Imported {len(imported)} fetch sources")
    return 0


def _cmd_export(pipeline: Pipeline, args: argparse.Namespace) -> int:
    if args.source:
        print(pipeline.settings.export_source(args.source))
    else:
        print(pipeline.settings.export_sources())
    return 0


def _cmd_fetch(pipeline: Pipeline, args: argparse.Namespace) -> int:
    try:
        option = find_date_filter(args.filter) if args.filter else prompt_date_filter()
    except (EOFError, KeyboardInterrupt):
        print(file=sys.stderr)
        log.error("❌ No recency filter chosen; nothing fetched.")
        return 2
    if option is None:
        log.error("❌ Unknown filter '%s'", args.filter)
        return 2

    results = pipeline.run(args.sources or None, option.value)
    pipeline.summary.dump()
    return 0 if results and all(r is not None for r in results) else 1


def _export_flag(parser: argparse.ArgumentParser, default: Optional[bool]) -> None:
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--export", dest="export", action="store_true", default=default,
                       help="Include this source in exports.")
    group.add_argument("--no-export", dest="export", action="store_false", default=default,
                       help="Leave this source out of exports.")


def _source_fields(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--name", help="A descriptive name for this fetch source.")
    parser.add_argument("--url", help="The Airtable or Vika view URL.")
    parser.add_argument("--api-key", help="API key for the provider.")
    parser.add_argument("--path", help="Folder (inside the vault) where notes are written.")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Fetch table records into note files.")
    parser.add_argument("--config", type=Path, help="YAML config file.")
    parser.add_argument("--settings", type=Path, help="Fetch-source settings JSON file.")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="Show fetch sources.").set_defaults(func=_cmd_list)

    p_add = sub.add_parser("add", help="Add a fetch source.")
    _source_fields(p_add)
    _export_flag(p_add, True)
    p_add.set_defaults(func=_cmd_add)

    p_edit = sub.add_parser("edit", help="Edit a fetch source.")
    p_edit.add_argument("id", help="Source id or name.")
    _source_fields(p_edit)
    _export_flag(p_edit, None)
    p_edit.set_defaults(func=_cmd_edit)

    p_del = sub.add_parser("delete", help="Delete a fetch source.")
    p_del.add_argument("id", help="Source id or name.")
    p_del.set_defaults(func=_cmd_delete)

    p_imp = sub.add_parser("import", help="Import fetch sources from JSON.")
    p_imp.add_argument("file", help="JSON file, or - for stdin.")
    p_imp.set_defaults(func=_cmd_import)

    p_exp = sub.add_parser("export", help="Export fetch sources as JSON.")
    p_exp.add_argument("--source", help="Export only this source (id or name).")
    p_exp.set_defaults(func=_cmd_export)

    p_fetch = sub.add_parser("fetch", help="Fetch records and write notes.")
    p_fetch.add_argument("sources", nargs="*", help="Source names or ids (default: all).")
    p_fetch.add_argument(
        "--filter",
        help="Recency filter: " + ", ".join(o.id for o in DATE_FILTER_OPTIONS) + " (prompted when omitted).",
    )
    p_fetch.set_defaults(func=_cmd_fetch)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config: GlobalConfig = ConfigManager().load_global_config(args.config)
    except TableFetchError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2

    configure_logging(
        level_on_console=config.logging.console_level,
        log_dir=config.logging.log_dir,
        level=config.logging.level,
    )

    try:
        pipeline = Pipeline(args.settings, config=config, summary=Summary())
        return args.func(pipeline, args)
    except TableFetchError as exc:
        log.error("❌ %s", exc)
        return 1


__all__: List[str] = ["main", "build_parser", "prompt_date_filter"]
