"""
Ignore file processing for threadgrep

Compiles gitignore-style rules and tracks the nested ignore files that apply
while a directory tree is walked:
- ``.gitignore`` and ``.ignore`` files at any directory level
- Negation (``!``), anchoring, directory-only and ``**`` rules
- Innermost-first evaluation across nested files
"""

from .constants import ALWAYS_IGNORED_DIRS, IGNORE_FILENAMES
from .pattern import CompiledPattern, NEVER_MATCHES, compile_pattern, glob_to_regex
from .rule_set import IgnoreRuleSet
from .stack import IgnoreStack

__all__ = [
    'ALWAYS_IGNORED_DIRS',
    'IGNORE_FILENAMES',
    'CompiledPattern',
    'NEVER_MATCHES',
    'compile_pattern',
    'glob_to_regex',
    'IgnoreRuleSet',
    'IgnoreStack',
]
