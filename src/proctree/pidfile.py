from __future__ import annotations

import logging
import os

logger = logging.getLogger(__name__)


def read_pid_from_file(path: str | os.PathLike[str]) -> str | None:
    """
    Return the first line of a pid-file, or None when the file does not exist
    or cannot be read.
    """
    try:
        with open(path, encoding="utf-8") as f:
            line = f.readline()
    except FileNotFoundError:
        logger.debug("PidFile doesn't exist : %s", path)
        return None
    except (OSError, UnicodeDecodeError):
        logger.error("Failed to read from %s", path, exc_info=True)
        return None

    return line.rstrip("\r\n")
