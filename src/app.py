"""Application entry point for actgate."""

from __future__ import annotations

import argparse
import dataclasses
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional

from art import tprint

import settings
from adapters.formatting import (
    format_error,
    format_info,
    format_mapping_table,
    format_query_rows,
    format_replay,
    format_show_rows,
)
from adapters.memory_host import InMemoryHost
from adapters.session_file import SessionFileError, iter_events, load_session, replay
from core.loader import MapFileError, SaveNotImplementedError
from core.mappings import MappingService
from core.rules_engine import CHANNEL, QUERY, WINDOW

NAME = "ACTGATE"
FONT = "tarty-1"

LOGGER = logging.getLogger(__name__)

USAGE_GUIDE = """\
map file lines are: kind pattern min.level
  kind       window, channel or query
  pattern    full name, /regexp/ (any matching punctuation pair) or *
  min.level  all, messages, hilights, none, or 1-4

the first matching line wins; the fallback_thresholds setting applies when
nothing matches. An item below its threshold also holds back its window
and the beep that follows it.
"""


def _print_banner() -> None:
    tprint(NAME, FONT, space=1)


def _configure_logging(config: dict, base_dir: str) -> None:
    if not config.get("enabled", False):
        return

    level_name = str(config.get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    fmt = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"
    formatter = logging.Formatter(fmt=fmt, datefmt=datefmt)

    handlers: list[logging.Handler] = []

    if config.get("console", True):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    file_cfg = config.get("file", {})
    if file_cfg.get("enabled", False):
        path = file_cfg.get("path", "logs/actgate.log")
        if not os.path.isabs(path):
            path = os.path.join(base_dir, path)
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        max_bytes = int(file_cfg.get("max_bytes", 5 * 1024 * 1024))
        backup_count = int(file_cfg.get("backup_count", 5))
        file_handler = RotatingFileHandler(
            path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    if not handlers:
        return

    logging.basicConfig(level=level, handlers=handlers)


class _ConsoleSink:
    """Diagnostic sink that writes traces to stdout."""

    def print_diagnostic(self, message: str) -> None:
        print(message)


def _error(message: str) -> int:
    """Report a user-facing error; every error goes through here."""

    print(format_error(message), file=sys.stderr)
    return 1


def _load(service: MappingService, announce: bool = False) -> bool:
    if announce:
        print(format_info(f"loading mappings from {service.config.map_file}"))
    try:
        result = service.load()
    except MapFileError as exc:
        _error(str(exc))
        return False
    if result.created:
        print(format_info(f"created new/empty mappings file: {service.config.map_file}"))
    if announce:
        print(format_info(f"{len(result.table)} mappings loaded"))
    if result.skipped:
        print(format_info(f"skipped {result.skipped} malformed line(s)"))
    return True


def _open_session(path: Optional[str]) -> InMemoryHost:
    if not path:
        return InMemoryHost()
    return load_session(path)


def _cmd_list(service: MappingService, args: argparse.Namespace) -> int:
    listing = service.list_mappings()
    for kind, rows in ((WINDOW, listing.window), (CHANNEL, listing.channel), (QUERY, listing.query)):
        print(format_info(f"{kind} mappings"))
        if rows:
            print(format_mapping_table(rows))
    return 0


def _cmd_query(service: MappingService, args: argparse.Namespace) -> int:
    rows = service.query(args.names, args.kind or CHANNEL)
    if rows:
        print(format_query_rows(rows))
    return 0


def _cmd_show(service: MappingService, args: argparse.Namespace) -> int:
    try:
        host = _open_session(args.session)
    except (OSError, SessionFileError) as exc:
        return _error(str(exc))

    rows = service.show(host, args.kind)
    kinds = (args.kind,) if args.kind else (CHANNEL, QUERY, WINDOW)
    for kind in kinds:
        print(format_info(f"{kind} mappings:"))
        kind_rows = [row for row in rows if row.kind == kind]
        if kind_rows:
            print(format_show_rows(kind_rows))
    return 0


def _cmd_load(service: MappingService, args: argparse.Namespace) -> int:
    return 0 if _load(service, announce=True) else 1


def _cmd_save(service: MappingService, args: argparse.Namespace) -> int:
    try:
        service.save()
    except SaveNotImplementedError as exc:
        return _error(str(exc))
    return 0


def _cmd_replay(service: MappingService, args: argparse.Namespace) -> int:
    try:
        host = _open_session(args.session)
        host.attach(service)
        with open(args.events, "r", encoding="utf-8") as handle:
            steps = replay(host, iter_events(handle))
    except KeyError as exc:
        return _error(str(exc.args[0]))
    except (OSError, ValueError) as exc:
        return _error(str(exc))

    for line in host.output:
        print(line)
    if steps:
        print(format_replay(steps))
    print(format_info(f"replayed {len(steps)} event(s), {host.beeps} beep(s) let through"))
    return 0


def _cmd_inspect(service: MappingService, args: argparse.Namespace) -> int:
    _print_banner()
    from frontend.app import MapInspectorApp

    MapInspectorApp(service).run()
    return 0


COMMANDS = {
    "list": _cmd_list,
    "query": _cmd_query,
    "show": _cmd_show,
    "load": _cmd_load,
    "reload": _cmd_load,
    "save": _cmd_save,
    "replay": _cmd_replay,
    "inspect": _cmd_inspect,
}


class _KindFlag(argparse.Action):
    """Store a kind flag; a second one is recorded as an error for ``_error``."""

    def __init__(self, option_strings, dest, const=None, **kwargs):
        super().__init__(option_strings, dest, nargs=0, const=const, **kwargs)

    def __call__(self, parser, namespace, values, option_string=None):
        current = getattr(namespace, self.dest, None)
        if current is not None:
            if getattr(namespace, "kind_error", None) is None:
                namespace.kind_error = f"can't specify {option_string} after --{current}"
            return
        setattr(namespace, self.dest, self.const)


def _add_kind_flags(parser: argparse.ArgumentParser) -> None:
    parser.set_defaults(kind=None, kind_error=None)
    parser.add_argument("--window", "--windows", dest="kind", action=_KindFlag, const=WINDOW)
    parser.add_argument("--channel", "--channels", dest="kind", action=_KindFlag, const=CHANNEL)
    parser.add_argument("--query", "--queries", dest="kind", action=_KindFlag, const=QUERY)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="actgate",
        description="Per-channel, per-query and per-window control over activity indication.",
        epilog=USAGE_GUIDE,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--config", help="Path to config.json (default: ACTGATE_CONFIG or ./config.json)")
    parser.add_argument("--map-file", help="Read mappings from this file instead of the configured one")
    parser.add_argument("--debug", action="store_true", help="Print match and decision traces")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("list", help="List all mappings")

    query_parser = subparsers.add_parser("query", help="Show the applicable level for names")
    query_parser.add_argument("names", nargs="*")
    _add_kind_flags(query_parser)

    show_parser = subparsers.add_parser("show", help="Show the applicable level for every live entity")
    show_parser.add_argument("--session", help="Session snapshot JSON describing windows and items")
    _add_kind_flags(show_parser)

    subparsers.add_parser("load", help="Load the mappings file")
    subparsers.add_parser("reload", help="Reload the mappings file")
    subparsers.add_parser("save", help="Save mappings (not implemented)")
    subparsers.add_parser("help", help="Show this help")

    replay_parser = subparsers.add_parser("replay", help="Replay an event script against a session")
    replay_parser.add_argument("events", help="JSON lines event script")
    replay_parser.add_argument("--session", help="Session snapshot JSON describing windows and items")

    subparsers.add_parser("inspect", help="Launch the map inspector TUI")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args, unknown = parser.parse_known_args(argv)
    for arg in unknown:
        # Names after an unrecognized flag still belong to the query.
        if args.command == "query" and not arg.startswith("-"):
            args.names.append(arg)
        else:
            _error(f"Unknown argument: {arg}")

    if args.command in {None, "help"}:
        print(parser.format_help())
        return 0
    if getattr(args, "kind_error", None):
        return _error(args.kind_error)

    try:
        loaded = settings.load_settings(args.config)
    except (OSError, ValueError) as exc:
        return _error(f"config error: {exc}")

    engine_config = loaded.engine
    if args.map_file:
        engine_config = dataclasses.replace(engine_config, map_file=os.path.abspath(args.map_file))
    if args.debug:
        engine_config = dataclasses.replace(engine_config, debug=True)

    _configure_logging(loaded.logging, os.path.dirname(os.path.abspath(loaded.path or settings.DEFAULT_CONFIG_PATH)))

    LOGGER.info("Running %s with map %s", args.command, engine_config.map_file)
    service = MappingService(engine_config, sink=_ConsoleSink())
    if args.command in {"load", "reload"}:
        return COMMANDS[args.command](service, args)
    if not _load(service):
        return 1
    return COMMANDS[args.command](service, args)


if __name__ == "__main__":
    raise SystemExit(main())
