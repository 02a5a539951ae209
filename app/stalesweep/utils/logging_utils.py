"""Logging setup for the CLI.

Library modules only create loggers; the CLI decides where records go.
"""

import logging

from rich.logging import RichHandler

from stalesweep.utils.formatting import err_console


def configure_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Route stalesweep log records to stderr through Rich.

    Args:
        verbose: Log everything down to DEBUG.
        quiet: Only log errors.
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING

    handler = RichHandler(
        console=err_console,
        show_path=False,
        show_time=verbose,
        markup=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))

    logger = logging.getLogger("stalesweep")
    for existing in list(logger.handlers):
        logger.removeHandler(existing)
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
