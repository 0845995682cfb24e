"""
Compiles gitignore rule lines into regular expressions

Subjects are paths relative to the directory holding the ignore file, using
``/`` separators. Directories are tested with a trailing ``/`` appended, so a
rule ending in ``/`` can only ever match a directory (or something beneath it).
"""

import re
from dataclasses import dataclass
from typing import List, NamedTuple, Optional, Pattern

from threadgrep.search_core.escaping import (
    ESCAPE_CHAR,
    find_unescaped,
    has_dangling_escape,
    split_unescaped,
    trim_unescaped_end,
)
from threadgrep.utils import get_logger

from .constants import COMMENT_CHAR, NEGATION_CHAR, PATH_SEPARATOR

logger = get_logger(__name__)

# Matches no string at all, including the empty one
NEVER_MATCHES: Pattern[str] = re.compile(r'(?!)')

DOUBLE_STAR = '**'
ANY_SEGMENTS = '(?:.*/)?'
NON_SEPARATOR = '[^/]'


@dataclass(frozen=True)
class CompiledPattern:
    """
    One compiled ignore rule

    Attributes:
        source: The rule line as it appeared in the ignore file
        is_negation: True for ``!`` rules, which re-include paths
        regex: Automaton tested against normalized subject paths
        directory_only: Rule ended in ``/``
        anchored: Rule is relative to the ignore file's directory only
    """
    source: str
    is_negation: bool
    regex: Pattern[str]
    directory_only: bool = False
    anchored: bool = False

    @property
    def never_matches(self) -> bool:
        return self.regex is NEVER_MATCHES

    def matches(self, subject: str) -> bool:
        """Test a normalized subject path (``a/b.txt`` or ``a/dir/``)"""
        return self.regex.match(subject) is not None


def _find_bracket_end(part: str, start: int) -> Optional[int]:
    """Index of the ``]`` closing the bracket expression opened at ``start``"""
    idx = start + 1
    if idx < len(part) and part[idx] in '!^':
        idx += 1
    # A leading ] is a member of the set, not its end
    if idx < len(part) and part[idx] == ']':
        idx += 1
    while idx < len(part):
        if part[idx] == ESCAPE_CHAR:
            idx += 2
            continue
        if part[idx] == ']':
            return idx
        idx += 1
    return None


def _translate_bracket(content: str) -> str:
    negate = content[:1] in ('!', '^')
    if negate:
        content = content[1:]

    members: List[str] = []
    idx = 0
    while idx < len(content):
        char = content[idx]
        if char == ESCAPE_CHAR and idx + 1 < len(content):
            idx += 1
            members.append(re.escape(content[idx]))
        elif char == '-' and 0 < idx < len(content) - 1:
            members.append('-')
        else:
            members.append(re.escape(char))
        idx += 1

    body = ''.join(members)
    if negate:
        return f'[^/{body}]'
    return f'[{body}]'


def _translate_part(part: str) -> str:
    """Translate one path segment of a glob into a regex fragment"""
    out: List[str] = []
    idx = 0
    while idx < len(part):
        char = part[idx]
        if char == ESCAPE_CHAR:
            # Callers reject dangling escapes, so a character always follows.
            # An escaped `/` never split the rule and stays a literal slash here.
            idx += 1
            out.append(re.escape(part[idx]))
        elif char == '*':
            out.append(NON_SEPARATOR + '*')
        elif char == '?':
            out.append(NON_SEPARATOR)
        elif char == '[':
            end = _find_bracket_end(part, idx)
            if end is None:
                out.append(re.escape(char))
            else:
                out.append(_translate_bracket(part[idx + 1:end]))
                idx = end
        else:
            out.append(re.escape(char))
        idx += 1
    return ''.join(out)


class GlobRegex(NamedTuple):
    source: str
    directory_only: bool
    anchored: bool


def glob_to_regex(glob: str) -> Optional[GlobRegex]:
    """
    Translate a cleaned glob (no comment, no negation prefix) into a regex

    Args:
        glob: Pattern text with escapes still in place

    Returns:
        GlobRegex whose source is anchored at both ends, or None if the glob
        has no path segments
    """
    parts = split_unescaped(glob, PATH_SEPARATOR)

    directory_only = len(parts) > 1 and parts[-1] == ''
    if directory_only:
        parts = parts[:-1]

    # Any separator left (leading or interior) ties the rule to its root
    anchored = len(parts) > 1
    parts = [part for part in parts if part]
    if not parts:
        return None

    pieces: List[str] = []
    for idx, part in enumerate(parts):
        last = idx == len(parts) - 1
        if part == DOUBLE_STAR:
            pieces.append('.+' if last else ANY_SEGMENTS)
            continue
        pieces.append(_translate_part(part))
        if not last:
            pieces.append(PATH_SEPARATOR)

    if parts[-1] == DOUBLE_STAR:
        # `**/` still needs the directory separator after what `**` consumed
        suffix = '/.*' if directory_only else ''
    elif directory_only:
        suffix = '/.*'
    else:
        # Whole segment: the name itself, or anything beneath it
        suffix = '(?:/.*)?'

    prefix = '' if anchored else ANY_SEGMENTS
    return GlobRegex(
        source='^' + prefix + ''.join(pieces) + suffix + r'\Z',
        directory_only=directory_only,
        anchored=anchored,
    )


def compile_pattern(rule_line: str) -> Optional[CompiledPattern]:
    """
    Compile one line of an ignore file

    Never raises. Blank and comment lines give None; a rule that cannot be
    matched (trailing lone backslash, bad bracket range) gives a pattern that
    never matches, so the rest of the file still loads.

    Args:
        rule_line: Raw line, trailing newline allowed

    Returns:
        CompiledPattern, or None if the line holds no rule
    """
    line = rule_line.rstrip('\r\n')

    comment_at = find_unescaped(line, COMMENT_CHAR)
    if comment_at is not None:
        line = line[:comment_at]

    line = trim_unescaped_end(line)
    if not line.strip():
        return None

    negation = line.startswith(NEGATION_CHAR)
    if negation:
        line = line[1:]
        if not line.strip():
            return None

    if has_dangling_escape(line):
        logger.debug(f"Rule {rule_line!r} ends in a lone escape and will never match")
        return CompiledPattern(source=rule_line, is_negation=negation, regex=NEVER_MATCHES)

    translated = glob_to_regex(line)
    if translated is None:
        return None

    try:
        regex = re.compile(translated.source, re.DOTALL)
    except re.error as e:
        logger.debug(f"Rule {rule_line!r} compiled to invalid regex {translated.source!r}: {e}")
        regex = NEVER_MATCHES

    logger.trace(f"Compiled rule {rule_line!r} -> {regex.pattern!r}")
    return CompiledPattern(
        source=rule_line,
        is_negation=negation,
        regex=regex,
        directory_only=translated.directory_only,
        anchored=translated.anchored,
    )
