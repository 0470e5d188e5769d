"""Logging set-up for the command line entry point."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(*, level: int = logging.INFO, force: bool = False) -> None:
    """Initialise the root logger once with a terse CLI-friendly format.

    Pass ``force=True`` to reconfigure during tests or when ``--verbose`` is
    requested after logging was already set up.
    """

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt="%H:%M:%S",
        force=force,
    )
