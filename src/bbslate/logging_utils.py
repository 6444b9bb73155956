"""Root logging setup for the bbslate command line."""

from __future__ import annotations

import logging
import sys
from typing import Optional

TRACE_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s"
TRACE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
PLAIN_FORMAT = "%(levelname)s: %(message)s"


def configure_logging(log_level: int, log_file: Optional[str] = None, trace_mode: bool = False) -> None:
    """Replace the root handlers with a stderr handler and an optional file handler.

    Library modules only create named loggers; this is called by the CLI alone.

    Parameters
    ----------
    log_level : int
        Numeric logging level
    log_file : str, optional
        Also append log records to this file
    trace_mode : bool, default False
        Include timestamps and logger names

    """
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    file_error = None
    if log_file:
        try:
            handlers.append(logging.FileHandler(log_file, mode="a", encoding="utf-8"))
        except OSError as e:
            file_error = e

    formatter = logging.Formatter(TRACE_FORMAT, TRACE_DATE_FORMAT) if trace_mode else logging.Formatter(PLAIN_FORMAT)
    for handler in handlers:
        handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers[:] = handlers
    root.setLevel(log_level)

    if file_error is not None:
        logging.getLogger(__name__).warning("Could not open log file %s: %s", log_file, file_error)
