"""Shared logging helpers for bulkgraph."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(*, level: int = logging.INFO, force: bool = False) -> None:
    """Initialise the root logger once with a terse CLI format.

    Pass ``force=True`` to reconfigure, e.g. when ``--verbose`` lowers the level
    after the defaults were already installed.
    """

    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt="%H:%M:%S", force=force)


def level_for(*, verbose: bool) -> int:
    return logging.DEBUG if verbose else logging.INFO
