"""
Package logging setup.

Debug output is gated behind the ``debug_logs`` setting.
"""
import logging

PACKAGE_LOGGER = "OverviewColors"


def set_debug_enabled(enabled: bool) -> None:
    """Toggle DEBUG output for every logger in the package."""
    logging.getLogger(PACKAGE_LOGGER).setLevel(logging.DEBUG if enabled else logging.INFO)