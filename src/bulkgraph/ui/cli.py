from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from bulkgraph.app import build_policy_factory, load_graph
from bulkgraph.config import (
    ConfigurationError,
    WritePolicyKind,
    configure_logging,
    get_loader_config,
    level_for,
)
from bulkgraph.domain.write_policy import PolicyHookLoadError

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from bulkgraph.config import LoaderConfig
    from bulkgraph.domain.model import WriteCounters

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Bulk-load graphs into a graph store")
    subparsers = parser.add_subparsers(dest="command", required=True)

    load = subparsers.add_parser("load", help="Materialize a JSON-lines graph file")
    load.add_argument("input", type=Path, help="JSON-lines file, one vertex per line")
    load.add_argument(
        "--elements",
        action="store_true",
        help="Treat the input as an element list (vertex and edge lines)",
    )
    load.add_argument(
        "--partitions",
        type=int,
        help="Number of input partitions / map tasks (defaults to config)",
    )
    load.add_argument(
        "--max-workers",
        type=int,
        help="Number of tasks run concurrently (defaults to config)",
    )
    load.add_argument(
        "--policy",
        choices=[kind.value for kind in WritePolicyKind],
        help="Write policy (defaults to config)",
    )
    load.add_argument(
        "--merge-key",
        type=str,
        help="Property identifying existing vertices for the merge policy",
    )
    load.add_argument(
        "--hook",
        type=str,
        help="Policy hook reference: module, module:attribute or path/to/file.py",
    )
    load.add_argument(
        "--database-uri",
        type=str,
        help="SQLAlchemy database URI (overrides DATABASE_URI)",
    )
    load.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return parser.parse_args(list(argv))


def _loader_config(args: argparse.Namespace) -> LoaderConfig:
    """Merge command line overrides into the environment configuration."""

    write_policy: WritePolicyKind | None = None
    if args.policy is not None:
        write_policy = WritePolicyKind(args.policy)
    elif args.hook is not None:
        write_policy = WritePolicyKind.HOOK
    return get_loader_config(
        partitions=args.partitions,
        max_workers=args.max_workers,
        write_policy=write_policy,
        merge_key=args.merge_key,
        policy_hook=args.hook,
    )


def _print_counters(counters: WriteCounters) -> None:
    width = max(len(name) for name in counters.as_dict())
    for name, value in counters.as_dict().items():
        print(f"{name:<{width}}  {value}")  # noqa: T201


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=level_for(verbose=parsed_args.verbose))
    try:
        config = _loader_config(parsed_args)
        if not parsed_args.input.is_file():
            raise ValueError(f"Input file not found: {parsed_args.input}")  # noqa: TRY301
        policy_factory = build_policy_factory(config)
    except (ValueError, ConfigurationError, PolicyHookLoadError):
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        result = load_graph(
            parsed_args.input,
            config=config,
            policy_factory=policy_factory,
            elements=parsed_args.elements,
            database_uri=parsed_args.database_uri,
        )
    except Exception:
        log.exception("Fatal error during graph load")
        sys.exit(1)

    _print_counters(result.counters)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console script entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
