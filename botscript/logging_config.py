"""Logging setup for the BotScript command-line runner.

Library modules only create their own loggers. The CLI calls
:func:`configure_logging` once with the number of ``-v`` flags it was given:
none shows warnings and errors, one adds run start/finish, two or more add
a line per statement and command.
"""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

_LEVELS = [logging.WARNING, logging.INFO, logging.DEBUG]


def configure_logging(verbosity: int = 0) -> int:
    """Route botscript logs to stdout at the level chosen by ``verbosity``.

    An application that already installed root handlers keeps them; only the
    level is applied then. Returns the level that was set.
    """
    level = _LEVELS[max(0, min(verbosity, len(_LEVELS) - 1))]
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler(stream=sys.stdout)
        handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT))
        root.addHandler(handler)
    logging.getLogger('botscript').setLevel(level)
    return level
