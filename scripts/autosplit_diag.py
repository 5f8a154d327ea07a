"""autosplit-timer diagnostics CLI."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

from autosplit_timer.bundles import BundleLoader
from autosplit_timer.config import AutosplitSettings
from autosplit_timer.splits import MalformedConfigError, SplitsFile, load_splits
from autosplit_timer.watcher import LogWatcher


def load_definition(path: Path) -> SplitsFile:
    try:
        return load_splits(path)
    except MalformedConfigError as exc:
        print(f"Invalid splits file: {exc}")
        raise SystemExit(1)


def cmd_games(args: argparse.Namespace) -> None:
    settings = AutosplitSettings()
    loader = BundleLoader(settings.bundle_paths)
    bundles = loader.discover()
    payload = [
        {
            "name": bundle.name,
            "game": bundle.display_name,
            "folder": str(bundle.folder),
            "log_location": bundle.config.log_location,
        }
        for bundle in bundles
    ]
    if args.json:
        print(json.dumps({"bundles": payload, "errors": loader.errors}, indent=2))
    else:
        for item in payload:
            print(f"{item['name']} [{item['game']}] -> {item['log_location']}")
        for error in loader.errors:
            print(f"warning: {error}")


def cmd_check(args: argparse.Namespace) -> None:
    splits = load_definition(args.splits)
    summary = {
        "game": splits.game,
        "category": splits.category,
        "splits": len(splits.splits),
        "auto_splits": sum(1 for trigger in splits.split_triggers if trigger is not None),
        "start_trigger": splits.start_trigger,
        "reset_trigger": splits.reset_trigger,
    }
    print(json.dumps(summary, indent=2))


def cmd_replay(args: argparse.Namespace) -> None:
    splits = load_definition(args.splits)
    try:
        watcher = LogWatcher.from_splits(args.log, splits, from_start=True)
    except OSError as exc:
        print(f"Log file unavailable: {exc}")
        raise SystemExit(1)

    with watcher:
        events = watcher.poll()

    payload = [
        {
            "event": event.kind.value,
            "split_index": event.index,
            "split_name": splits.splits[event.index].name if event.index is not None else None,
        }
        for event in events
    ]
    print(json.dumps(payload, indent=2))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="autosplit-timer diagnostics")
    sub = parser.add_subparsers(dest="cmd")

    p_games = sub.add_parser("games", help="List discovered auto-splitter bundles")
    p_games.add_argument("--json", action="store_true", help="Output JSON")
    p_games.set_defaults(func=cmd_games)

    p_check = sub.add_parser("check", help="Validate a splits definition")
    p_check.add_argument("splits", type=Path)
    p_check.set_defaults(func=cmd_check)

    p_replay = sub.add_parser(
        "replay",
        help="Run an existing log through the trigger watcher from the start",
    )
    p_replay.add_argument("log", type=Path)
    p_replay.add_argument("--splits", type=Path, required=True)
    p_replay.set_defaults(func=cmd_replay)

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not hasattr(args, "func"):
        parser.print_help()
        return
    args.func(args)


if __name__ == "__main__":
    main()
