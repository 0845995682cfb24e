"""
Depth-first directory walker that yields searchable text files

Nested ignore files are picked up as directories are entered and dropped as
they are left. Symlinks are never followed, so the walk always sees a tree.
"""

import codecs
import os
import stat
from pathlib import Path
from typing import Hashable, Iterable, Iterator, List, Optional, Set, Tuple

from threadgrep.exceptions import WalkRootError
from threadgrep.utils import get_logger

from .constants import TEXT_SAMPLE_SIZE
from .ignore import ALWAYS_IGNORED_DIRS, IgnoreRuleSet, IgnoreStack

logger = get_logger(__name__)


def is_text_file(path: Path, sample_size: int = TEXT_SAMPLE_SIZE) -> bool:
    """
    Sniff the start of a file to decide whether it is UTF-8 text

    The sample must hold no NUL byte and decode as UTF-8. A multi-byte
    sequence cut off by the end of the sample is accepted.
    """
    try:
        with open(path, 'rb') as f:
            sample = f.read(sample_size)
    except OSError as e:
        logger.debug(f"Could not sample {path}: {e}")
        return False

    if b'\x00' in sample:
        return False

    decoder = codecs.getincrementaldecoder('utf-8')()
    try:
        decoder.decode(sample, final=len(sample) < sample_size)
    except UnicodeDecodeError:
        return False
    return True


def _identity(path: Path, st: os.stat_result) -> Hashable:
    """Canonical identity of a file system entry"""
    if st.st_ino:
        return (st.st_dev, st.st_ino)
    return os.path.realpath(path)


class Walker:
    """
    Collects candidate file paths below one or more roots

    Args:
        max_depth: Directory levels to descend below each root. None means
            unlimited; 0 searches only the files directly inside the root.
        sample_size: Bytes sniffed per file for the text check
    """

    def __init__(self, max_depth: Optional[int] = None,
                 sample_size: int = TEXT_SAMPLE_SIZE):
        if max_depth is not None and max_depth < 0:
            raise ValueError(f"max_depth must be non-negative, got {max_depth}")
        self.max_depth = max_depth
        self.sample_size = sample_size
        self.ignore_stack = IgnoreStack()
        self._seen: Set[Hashable] = set()

    def walk(self, root_paths: Iterable[Path]) -> Iterator[Path]:
        """
        Start a walk over ``root_paths``

        Every root is checked up front; the paths themselves are produced
        lazily as the returned iterator is consumed.

        Raises:
            WalkRootError: A root's metadata cannot be read
        """
        roots: List[Tuple[Path, os.stat_result]] = []
        for root in root_paths:
            root = Path(root)
            try:
                roots.append((root, root.lstat()))
            except OSError as e:
                raise WalkRootError(root, e) from e

        self._seen = set()
        return self._walk_roots(roots)

    def _walk_roots(self, roots: List[Tuple[Path, os.stat_result]]) -> Iterator[Path]:
        # The root is one level above its children, hence the extra level
        remaining = None if self.max_depth is None else self.max_depth + 1
        for root, st in roots:
            if stat.S_ISLNK(st.st_mode):
                logger.warning(f"Not following symlink {root}")
                continue
            logger.debug(f"Walking {root} (max depth: {self.max_depth})")
            yield from self._visit(root, st, remaining)

    def _visit(self, path: Path, st: os.stat_result,
               remaining: Optional[int]) -> Iterator[Path]:
        identity = _identity(path, st)
        if identity in self._seen:
            return
        self._seen.add(identity)

        mode = st.st_mode
        if stat.S_ISLNK(mode):
            logger.trace(f"Skipping symlink {path}")
            return

        if stat.S_ISREG(mode):
            if self.ignore_stack.is_ignored(path, is_dir=False):
                return
            if is_text_file(path, self.sample_size):
                yield path
            else:
                logger.trace(f"Skipping non-text file {path}")
            return

        if not stat.S_ISDIR(mode):
            return

        if path.name in ALWAYS_IGNORED_DIRS or self.ignore_stack.is_ignored(path, is_dir=True):
            logger.trace(f"Pruning {path}")
            return

        if remaining == 0:
            return
        child_remaining = None if remaining is None else remaining - 1

        with self.ignore_stack.scoped(IgnoreRuleSet.for_directory(path)):
            for child in self._list_dir(path):
                try:
                    child_st = child.lstat()
                except OSError as e:
                    logger.debug(f"Could not stat {child}: {e}")
                    continue
                yield from self._visit(child, child_st, child_remaining)

    def _list_dir(self, path: Path) -> List[Path]:
        try:
            return sorted(path.iterdir())
        except OSError as e:
            logger.warning(f"Could not read directory {path}: {e}")
            return []


def walk(root_paths: Iterable[Path], max_depth: Optional[int] = None) -> Iterator[Path]:
    """Walk ``root_paths`` with a fresh :class:`Walker`"""
    return Walker(max_depth=max_depth).walk(root_paths)
