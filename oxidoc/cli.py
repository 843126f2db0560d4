"""Command line entry point for indexing crates and searching their docs."""

import argparse
import logging
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from oxidoc import __version__
from oxidoc.errors import OxidocError
from oxidoc.index_crate import index_crate, index_registry
from oxidoc.load_config import load_config
from oxidoc.markdown_renderer import RenderOptions
from oxidoc.query_facade import SearchIndex
from oxidoc.registry_paths import registry_root
from oxidoc.store import Store

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="oxidoc",
        description="Index Rust crate documentation and search it from the terminal.",
    )
    action = ap.add_mutually_exclusive_group()
    action.add_argument(
        "-g",
        "--generate",
        type=Path,
        metavar="PATH",
        help="Index the crate whose Cargo.toml is in PATH",
    )
    action.add_argument(
        "--all",
        action="store_true",
        help="Re-index every crate unpacked under <registry>/src",
    )
    action.add_argument(
        "-s",
        "--search",
        metavar="QUERY",
        help="Print the ranked matches of QUERY and exit",
    )
    ap.add_argument("--registry", help="Registry root (default: ~/.cargo/registry)")
    ap.add_argument("--config", help="Path to configuration file")
    ap.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Log more (-v for info, -vv for debug)",
    )
    ap.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return ap


def configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def render_options(config: dict[str, Any]) -> RenderOptions:
    render = config.get("render") or {}
    return RenderOptions(
        style=render.get("style", "monokai"),
        default_language=render.get("default_language", "rust"),
        color=bool(render.get("color", True)),
        width=render.get("width"),
    )


def report_error(error: BaseException) -> None:
    """Print an error and the chain of exceptions that caused it."""
    print(f"error: {error}", file=sys.stderr)
    cause = error.__cause__ or error.__context__
    while cause is not None:
        print(f"caused by: {cause}", file=sys.stderr)
        cause = cause.__cause__ or cause.__context__


def run(args: argparse.Namespace) -> int:
    """Execute the selected action."""
    config = load_config(args.config)
    registry = registry_root(config, args.registry)
    store = Store(registry)
    logger.info("Using registry %s", registry)

    if args.generate is not None:
        locations = index_crate(args.generate, store, config)
        print(f"Indexed {len(locations)} items from {args.generate} into {store.root}")
        return 0

    if args.all:
        report = index_registry(registry, store, config)
        print(f"Indexed {len(report.indexed)} crates, {len(report.failed)} failed")
        for crate_dir, error in report.failed:
            print(f"  {crate_dir}: {error}")
        return 1 if report.failed else 0

    index = SearchIndex((config.get("search") or {}).get("visible_limit", 40))
    index.register(store.all_locations())

    if args.search is not None:
        for display, _ in index.run_query(args.search):
            print(display)
        return 0

    from oxidoc.tui import run_tui

    run_tui(index, store, render_options(config))
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Parse arguments and run; errors are printed and exit with status 1."""
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)
    try:
        return run(args)
    except OxidocError as e:
        report_error(e)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
