"""
Logging utilities for the callback service.

Provides a consistent logging format and a helper for masking credentials.
"""

import logging
import sys


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging with a sensible default format."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        stream=sys.stdout,
    )


def mask_secret(value: str | None, visible: int = 8) -> str:
    """Render an identifier for logs without exposing it in full."""
    if not value:
        return "NOT_SET"
    if len(value) <= visible:
        return "*" * len(value)
    return f"{value[:visible]}..."


__all__ = ["configure_logging", "mask_secret"]
