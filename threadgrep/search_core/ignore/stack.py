"""
Stack of rule sets mirroring the directories entered during a walk
"""

from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional

from threadgrep.utils import get_logger

from .rule_set import IgnoreRuleSet

logger = get_logger(__name__)


class IgnoreStack:
    """
    Rule sets from the root down to the directory currently being walked

    Lookup goes from the innermost rule set outwards and the first one with
    a verdict decides. A deeper ``!`` rule can therefore re-include a path
    that an ancestor ignores, while an ancestor's ``!`` rule cannot undo a
    deeper ignore, which is how git resolves nested ignore files.
    """

    def __init__(self):
        self._rule_sets: List[IgnoreRuleSet] = []

    def __len__(self) -> int:
        return len(self._rule_sets)

    @property
    def depth(self) -> int:
        return len(self._rule_sets)

    def push(self, rule_set: IgnoreRuleSet) -> None:
        self._rule_sets.append(rule_set)
        logger.trace(f"Pushed {len(rule_set)} rules for {rule_set.root} (depth {self.depth})")

    def pop(self) -> IgnoreRuleSet:
        rule_set = self._rule_sets.pop()
        logger.trace(f"Popped rules for {rule_set.root} (depth {self.depth})")
        return rule_set

    @contextmanager
    def scoped(self, rule_set: Optional[IgnoreRuleSet]) -> Iterator[None]:
        """
        Keep ``rule_set`` on the stack for the duration of the block

        Empty or missing rule sets are not pushed at all. The pop happens on
        every exit path, including exceptions and generator close.
        """
        if rule_set is None or rule_set.is_empty:
            yield
            return

        self.push(rule_set)
        try:
            yield
        finally:
            popped = self.pop()
            if popped is not rule_set:
                raise RuntimeError(f"Ignore stack out of order: expected {rule_set.root}, got {popped.root}")

    def is_ignored(self, path: Path, is_dir: bool = False) -> bool:
        """
        Check a path against every active rule set

        Args:
            path: Path as produced by the walk (joined from a root)
            is_dir: Test the directory form ``<path>/``

        Returns:
            True if the innermost rule set with a verdict ignores the path
        """
        for rule_set in reversed(self._rule_sets):
            subject = rule_set.subject_for(path, is_dir)
            if subject is None:
                continue
            verdict = rule_set.match(subject)
            if verdict is not None:
                if verdict:
                    logger.trace(f"Ignored {subject} by rules in {rule_set.root}")
                return verdict
        return False
