"""Shared file reading for the tolerant parsers."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional


def read_text(path: Path, logger: logging.Logger) -> Optional[str]:
    """Return the file contents, or None when it is absent or unreadable.

    Absence is routine (most projects lack some artifacts) and logs at DEBUG;
    any other I/O failure logs at WARNING so CI operators can tell them apart.
    """
    try:
        return path.read_text(encoding="utf-8", errors="replace")
    except FileNotFoundError:
        logger.debug("File not found: %s", path)
    except IsADirectoryError:
        logger.warning("Expected a file but found a directory: %s", path)
    except OSError as exc:
        logger.warning("Unable to read %s: %s", path, exc)
    return None
