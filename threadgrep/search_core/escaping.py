"""
Helpers for strings that use backslash escapes, as found in ignore files
"""

from typing import Iterator, List, Optional

ESCAPE_CHAR = '\\'


def find_unescaped(text: str, target: str) -> Optional[int]:
    """
    Find the first occurrence of ``target`` that is not preceded by an escape

    Args:
        text: String to search
        target: Single character to look for

    Returns:
        Index of the character, or None if every occurrence is escaped
    """
    escaped = False
    for idx, char in enumerate(text):
        if char == target and not escaped:
            return idx
        escaped = char == ESCAPE_CHAR and not escaped
    return None


def trim_unescaped_end(text: str) -> str:
    """
    Strip trailing spaces unless they are escaped

    ``r"abc\\  "`` becomes ``r"abc\\ "``; ``r"\\\\ "`` becomes ``r"\\\\"``
    because the backslash there escapes another backslash, not the space.
    """
    end = len(text)
    while end > 0 and text[end - 1] == ' ':
        # Count the backslashes right before this space
        backslashes = 0
        idx = end - 1
        while idx > 0 and text[idx - 1] == ESCAPE_CHAR:
            backslashes += 1
            idx -= 1
        if backslashes % 2 == 1:
            break
        end -= 1
    return text[:end]


def has_dangling_escape(text: str) -> bool:
    """True if the string ends in an escape character that escapes nothing"""
    trailing = len(text) - len(text.rstrip(ESCAPE_CHAR))
    return trailing % 2 == 1


def iter_unescaped_split(text: str, separator: str) -> Iterator[str]:
    """
    Split ``text`` on unescaped occurrences of ``separator``

    Escape sequences are kept verbatim in the yielded parts. Like
    ``str.split`` an empty string yields a single empty part.
    """
    if separator == ESCAPE_CHAR:
        raise ValueError("cannot split on the escape character")

    part: List[str] = []
    escaped = False
    for char in text:
        if escaped:
            part.append(char)
            escaped = False
        elif char == ESCAPE_CHAR:
            part.append(char)
            escaped = True
        elif char == separator:
            yield ''.join(part)
            part = []
        else:
            part.append(char)
    yield ''.join(part)


def split_unescaped(text: str, separator: str) -> List[str]:
    """List form of :func:`iter_unescaped_split`"""
    return list(iter_unescaped_split(text, separator))
