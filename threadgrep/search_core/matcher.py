"""
Line-oriented regex matching
"""

import re
from typing import Iterable, Pattern, TextIO

from threadgrep.exceptions import SearchPatternError


def compile_search_pattern(pattern: str, ignore_case: bool = False) -> Pattern[str]:
    """
    Compile the user's search expression

    Raises:
        SearchPatternError: The expression is not a valid regular expression
    """
    flags = re.IGNORECASE if ignore_case else 0
    try:
        return re.compile(pattern, flags)
    except re.error as e:
        raise SearchPatternError(pattern, str(e)) from e


def find_matches(lines: Iterable[str], writer: TextIO, pattern: Pattern[str],
                 show_line_numbers: bool = True) -> int:
    """
    Write every line matching ``pattern`` to ``writer``, in input order

    Args:
        lines: Line stream, line endings optional
        writer: Destination for matched lines
        pattern: Compiled search expression
        show_line_numbers: Prefix each line with its 1-based number and ``:``

    Returns:
        Number of matching lines
    """
    matched = 0
    for line_number, line in enumerate(lines, 1):
        text = line.rstrip('\n').rstrip('\r')
        if pattern.search(text) is None:
            continue
        matched += 1
        if show_line_numbers:
            writer.write(f"{line_number}:{text}\n")
        else:
            writer.write(f"{text}\n")
    return matched
