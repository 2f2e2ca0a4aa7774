"""CLI entry point for inspecting serialized permission snapshots."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import cast

from permix import __version__
from permix.core.config import load_permix_config
from permix.core.container import create_permix, hydrate
from permix.core.errors import PermixError
from permix.core.models import Definition, parse_definition
from permix.core.serialization import loads_state


def _load_definition(path: Path | None) -> Definition | None:
    if path is None:
        return None
    return parse_definition(json.loads(path.read_text()))


def _cmd_validate(args: argparse.Namespace) -> None:
    snapshot = cast(Path, args.snapshot)
    config = load_permix_config()

    definition = _load_definition(cast(Path | None, args.definition))
    rules = loads_state(snapshot.read_text(), definition, strict=config.strict_snapshots)

    actions = sum(len(a) for a in rules.values())
    print(f"{snapshot.name}: valid ({len(rules)} entities, {actions} actions)")


def _cmd_check(args: argparse.Namespace) -> None:
    snapshot = cast(Path, args.snapshot)
    entity = cast(str, args.entity)
    actions = cast(list[str], args.actions)
    config = load_permix_config()

    raw_definition = None
    if args.definition is not None:
        raw_definition = json.loads(cast(Path, args.definition).read_text())

    permix = create_permix(raw_definition, config=config)
    hydrate(permix, json.loads(snapshot.read_text()))

    selector: str | list[str] = actions[0] if len(actions) == 1 else actions
    if permix.check(entity, selector):
        print("allowed")
    else:
        print("denied")
        sys.exit(1)


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="permix",
        description="Inspect serialized permission snapshots",
    )
    _ = parser.add_argument("-V", "--version", action="version", version=f"permix {__version__}")
    _ = parser.add_argument(
        "-v", "--verbose", action="store_true", help="Show diagnostics on stderr"
    )
    subparsers = parser.add_subparsers(dest="command")

    # validate subcommand
    validate_p = subparsers.add_parser("validate", help="Validate a snapshot file")
    _ = validate_p.add_argument("snapshot", type=Path, help="Path to snapshot JSON")
    _ = validate_p.add_argument(
        "--definition", type=Path, default=None, help="Definition JSON to check names against"
    )

    # check subcommand
    check_p = subparsers.add_parser("check", help="Check actions against a snapshot")
    _ = check_p.add_argument("snapshot", type=Path, help="Path to snapshot JSON")
    _ = check_p.add_argument("entity", help="Entity name")
    _ = check_p.add_argument("actions", nargs="+", help="Action names, or 'all'")
    _ = check_p.add_argument(
        "--definition", type=Path, default=None, help="Definition JSON to check names against"
    )

    args = parser.parse_args(sys.argv[1:])
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    dispatch = {
        "validate": _cmd_validate,
        "check": _cmd_check,
    }
    command = cast(str | None, args.command)
    handler = dispatch.get(command) if command is not None else None
    if handler is None:
        parser.print_help()
        sys.exit(1)

    try:
        handler(args)
    except (PermixError, OSError, json.JSONDecodeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        for reason in getattr(e, "reasons", []):
            print(f"  - {reason}", file=sys.stderr)
        sys.exit(1)
