"""
The per-file search task run on pool workers
"""

from pathlib import Path
from typing import Optional, Pattern

from threadgrep.utils import get_logger

from .constants import HEADER_SUFFIX
from .matcher import find_matches
from .synchronized_writer import SharedSink, SynchronizedWriter

logger = get_logger(__name__)


def search_file(path: Path, pattern: Pattern[str], sink: SharedSink,
                show_line_numbers: bool = True) -> Optional[int]:
    """
    Search one file and emit its matches as a single unit on ``sink``

    Read and decode failures are logged and end the task; matches found
    before the failure are still written.

    Returns:
        Number of matching lines, or None if the file could not be searched
    """
    try:
        f = open(path, 'r', encoding='utf-8')
    except OSError as e:
        logger.error(f"could not read file {path}: {e.strerror or e}")
        return None

    # header will only be printed if something was actually written
    header = f"{path}{HEADER_SUFFIX}"
    with f, SynchronizedWriter(sink, header) as writer:
        try:
            return find_matches(f, writer, pattern, show_line_numbers)
        except UnicodeDecodeError as e:
            logger.error(f"failed to read {path}: invalid UTF-8 ({e.reason})")
        except OSError as e:
            logger.error(f"failed to read {path}: {e.strerror or e}")
    return None
