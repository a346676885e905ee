from __future__ import annotations

import logging
import os

# Policy defaults, matching what the signing UI starts with.
DEFAULT_X = 400.0
DEFAULT_Y = 50.0
DEFAULT_SCALE = 15.0
DEFAULT_OPACITY = 1.0

# The preview maps percentages against a US Letter page regardless of the
# document's real page size.
UI_PAGE_WIDTH = 612.0
UI_PAGE_HEIGHT = 792.0

DEFAULT_OUTPUT_PREFIX = "signed_"
OUTPUT_PREFIX_ENV = "PDF_SIGN_OUTPUT_PREFIX"

DEFAULT_LOG_LEVEL = "WARNING"
LOG_LEVEL_ENV = "PDF_SIGN_LOG_LEVEL"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_output_prefix() -> str:
    return os.environ.get(OUTPUT_PREFIX_ENV, DEFAULT_OUTPUT_PREFIX)


def get_log_level() -> int:
    """
    Resolve the configured log level.

    Accepts level names (``"debug"``, ``"INFO"``) or numeric strings. Unknown
    values fall back to ``DEFAULT_LOG_LEVEL``.
    """
    raw = os.environ.get(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL).strip()
    if raw.isdigit():
        return int(raw)
    level = logging.getLevelName(raw.upper())
    if isinstance(level, int):
        return level
    return logging.getLevelName(DEFAULT_LOG_LEVEL)


def configure_logging() -> None:
    # Logs go to stderr; stdout carries the MCP stdio transport.
    logging.basicConfig(level=get_log_level(), format=LOG_FORMAT)
