"""
Rule sets: the compiled patterns of the ignore file(s) in one directory
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional

from threadgrep.utils import get_logger

from .constants import IGNORE_FILENAMES, MAX_IGNORE_FILE_SIZE, PATH_SEPARATOR
from .pattern import CompiledPattern, compile_pattern

logger = get_logger(__name__)


@dataclass
class IgnoreRuleSet:
    """
    Patterns from the ignore file(s) of a single directory

    ``include_patterns`` put matching paths into the ignored set;
    ``exclude_patterns`` are the ``!`` rules that carve paths back out.
    Within one rule set an exclude match always wins.
    """
    root: Path
    include_patterns: List[CompiledPattern] = field(default_factory=list)
    exclude_patterns: List[CompiledPattern] = field(default_factory=list)
    sources: List[Path] = field(default_factory=list)

    @classmethod
    def from_lines(cls, root: Path, lines: Iterable[str],
                   source: Optional[Path] = None) -> 'IgnoreRuleSet':
        """
        Compile ignore file content rooted at ``root``

        Args:
            root: Directory the patterns are relative to
            lines: Raw lines of the ignore file
            source: File the lines came from, for diagnostics

        Returns:
            Rule set holding every line that compiled to a pattern
        """
        rule_set = cls(root=Path(root))
        if source is not None:
            rule_set.sources.append(source)
        rule_set.add_lines(lines, source)
        return rule_set

    @classmethod
    def from_file(cls, ignore_path: Path) -> 'IgnoreRuleSet':
        """
        Load one ignore file; never raises

        Unsupported file names, oversized files and unreadable files all
        give an empty rule set rooted at the file's directory.
        """
        rule_set = cls(root=ignore_path.parent)
        rule_set.load_file(ignore_path)
        return rule_set

    @classmethod
    def for_directory(cls, directory: Path) -> Optional['IgnoreRuleSet']:
        """
        Rule set for the ignore files present in ``directory``

        Returns:
            Combined rule set (``.gitignore`` rules first), or None if the
            directory has no ignore file (or cannot be inspected)
        """
        found: List[Path] = []
        for name in IGNORE_FILENAMES:
            ignore_path = directory / name
            try:
                if ignore_path.is_file():
                    found.append(ignore_path)
            except OSError as e:
                logger.warning(f"Could not check ignore file {ignore_path}: {e}")
        if not found:
            return None

        rule_set = cls(root=directory)
        for ignore_path in found:
            rule_set.load_file(ignore_path)
        return rule_set

    def load_file(self, ignore_path: Path) -> int:
        """
        Add the patterns of an ignore file to this rule set

        Returns:
            Number of patterns added
        """
        if ignore_path.name not in IGNORE_FILENAMES:
            logger.debug(f"Unsupported ignore file: {ignore_path.name}")
            return 0

        try:
            file_size = ignore_path.stat().st_size
            if file_size > MAX_IGNORE_FILE_SIZE:
                logger.warning(
                    f"Skipping {ignore_path}: {file_size} bytes "
                    f"(max: {MAX_IGNORE_FILE_SIZE})"
                )
                return 0
            content = ignore_path.read_text(encoding='utf-8', errors='replace')
        except OSError as e:
            logger.warning(f"Could not read ignore file {ignore_path}: {e}")
            return 0

        self.sources.append(ignore_path)
        added = self.add_lines(content.splitlines(), ignore_path)
        logger.debug(f"Loaded {added} patterns from {ignore_path}")
        return added

    def add_lines(self, lines: Iterable[str], source: Optional[Path] = None) -> int:
        added = 0
        for line_num, line in enumerate(lines, 1):
            pattern = compile_pattern(line)
            if pattern is None:
                continue
            if pattern.never_matches:
                logger.debug(f"{source or self.root}:{line_num}: rule {line!r} can never match")
            self.add(pattern)
            added += 1
        return added

    def add(self, pattern: CompiledPattern) -> None:
        if pattern.is_negation:
            self.exclude_patterns.append(pattern)
        else:
            self.include_patterns.append(pattern)

    @property
    def is_empty(self) -> bool:
        return not self.include_patterns and not self.exclude_patterns

    def __len__(self) -> int:
        return len(self.include_patterns) + len(self.exclude_patterns)

    def subject_for(self, path: Path, is_dir: bool) -> Optional[str]:
        """
        Normalized form of ``path`` that this rule set's patterns test

        Returns:
            Relative ``/``-separated path, with a trailing ``/`` for
            directories, or None if ``path`` is not strictly below the root
        """
        try:
            relative = path.relative_to(self.root)
        except ValueError:
            return None
        if not relative.parts:
            return None
        subject = relative.as_posix()
        return subject + PATH_SEPARATOR if is_dir else subject

    def match(self, subject: str) -> Optional[bool]:
        """
        Verdict of this rule set alone

        Returns:
            True if ignored, False if re-included by a ``!`` rule, None if no
            pattern in this rule set matches
        """
        if any(pattern.matches(subject) for pattern in self.exclude_patterns):
            return False
        if any(pattern.matches(subject) for pattern in self.include_patterns):
            return True
        return None

    def is_ignored(self, path: Path, is_dir: bool = False) -> bool:
        subject = self.subject_for(path, is_dir)
        if subject is None:
            return False
        return bool(self.match(subject))
