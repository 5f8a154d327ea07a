"""Command-line entry point for autosplit-timer."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from textual.logging import TextualHandler

from . import __version__
from .bundles import BundleLoader, BundleNotFoundError
from .config import AutosplitSettings, get_settings
from .session import Session, load_bundle_session, load_session
from .splits import MalformedConfigError
from .tui import SplitTimerApp


def configure_logging(level: str, log_file: Path | None = None, *, handler: logging.Handler | None = None) -> None:
    """Configure root logging.

    Records go to ``log_file`` when given, otherwise to ``handler``, otherwise
    to stderr.
    """

    kwargs: dict = {}
    if log_file is not None:
        kwargs["filename"] = str(log_file)
        kwargs["encoding"] = "utf-8"
    elif handler is not None:
        kwargs["handlers"] = [handler]
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="[%(asctime)s] [%(levelname)s] %(name)s: %(message)s",
        force=True,
        **kwargs,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="autosplit-timer",
        description="Terminal speedrun timer with auto-splitting support",
    )
    parser.add_argument("-s", "--splits", type=Path, help="Path to splits JSON or YAML file")
    parser.add_argument(
        "-w",
        "--watch",
        type=Path,
        help="Path to game log file to watch for auto-splitting",
    )
    parser.add_argument(
        "-g",
        "--game",
        help="Load a discovered auto-splitter by folder or game name",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def build_session(args: argparse.Namespace, settings: AutosplitSettings) -> Session:
    if args.game:
        loader = BundleLoader(settings.bundle_paths)
        bundle = loader.get(args.game)
        return load_bundle_session(bundle)
    return load_session(args.splits, args.watch)


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.game and (args.splits or args.watch):
        parser.error("--game cannot be combined with --splits or --watch")

    settings = get_settings()
    if settings.log_file is None:
        configure_logging(settings.log_level, handler=TextualHandler())
    else:
        configure_logging(settings.log_level, settings.log_file)

    try:
        session = build_session(args, settings)
    except BundleNotFoundError as exc:
        parser.exit(2, f"{parser.prog}: error: {exc}\n")
    except MalformedConfigError as exc:
        parser.exit(1, f"{parser.prog}: error: {exc}\n")

    bundles = BundleLoader(settings.bundle_paths).discover()
    logging.getLogger(__name__).info(
        "Launching autosplit-timer",
        extra={
            "version": __version__,
            "game": session.splits.game,
            "auto_split": session.watcher is not None,
            "bundles": len(bundles),
        },
    )

    app = SplitTimerApp(session, bundles=bundles, poll_interval=settings.poll_interval)
    app.run()


if __name__ == "__main__":
    main()
