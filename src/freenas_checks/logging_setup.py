import logging
import os
import sys


def setup_logging(level: str | None = None) -> None:
    # stdout is reserved for the verdict line.
    level = (level or os.getenv("LOG_LEVEL", "WARNING")).upper()
    if not isinstance(logging.getLevelName(level), int):
        level = "WARNING"
    fmt = '%(asctime)s level=%(levelname)s name=%(name)s msg="%(message)s"'
    logging.basicConfig(level=level, format=fmt, stream=sys.stderr)
