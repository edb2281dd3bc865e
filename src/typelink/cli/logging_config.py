"""Centralized logging configuration for CLI commands."""

import logging
import os


def configure_logging(verbose: bool) -> None:
    """Configure logging levels based on verbose flag.

    Called once at CLI startup before any command runs.

    Args:
        verbose: If True, show DEBUG+ logs from typelink. If False, show only WARNING+ logs.
    """
    # Tests manage their own logging
    if os.getenv("PYTEST_CURRENT_TEST"):
        return

    level = logging.DEBUG if verbose else logging.WARNING
    if not logging.getLogger().handlers:
        logging.basicConfig(level=level, format="%(levelname)s: %(name)s: %(message)s")
    else:
        logging.getLogger().setLevel(level)

    logging.getLogger("typelink").setLevel(level)
