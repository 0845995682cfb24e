"""
Tests for gitignore rule compilation
"""

import pathspec
import pytest

from threadgrep.search_core.ignore import NEVER_MATCHES, compile_pattern


def matches(rule: str, subject: str) -> bool:
    pattern = compile_pattern(rule)
    assert pattern is not None, f"{rule!r} should compile"
    return pattern.matches(subject)


@pytest.mark.parametrize("rule", [
    "",
    "   ",
    "\t",
    "# comment",
    "#",
    "   # indented comment",
    "!",
    "/",
    "\n",
])
def test_lines_without_rules_compile_to_nothing(rule):
    assert compile_pattern(rule) is None


@pytest.mark.parametrize("rule,subject,expected", [
    # plain names match a whole segment at any depth
    ("foo", "foo", True),
    ("foo", "a/foo", True),
    ("foo", "a/foo/", True),
    ("foo", "foo/bar.txt", True),
    ("foo", "foobar", False),
    ("foo", "xfoo", False),
    ("foo", "a/xfoo/b", False),
    # single star stays inside one segment
    ("*.txt", "a.txt", True),
    ("*.txt", "dir/a.txt", True),
    ("*.txt", "a.txt.bak", False),
    ("a*c", "abbbc", True),
    ("a*c", "a/c", False),
    ("a?c", "abc", True),
    ("a?c", "ac", False),
    ("a?c", "a/c", False),
    # leading or interior separator anchors to the rule set root
    ("/foo", "foo", True),
    ("/foo", "a/foo", False),
    ("doc/frotz", "doc/frotz", True),
    ("doc/frotz", "doc/frotz/nested.txt", True),
    ("doc/frotz", "a/doc/frotz", False),
    ("doc/*.txt", "doc/a.txt", True),
    ("doc/*.txt", "doc/sub/a.txt", False),
    # double star
    ("**/foo", "foo", True),
    ("**/foo", "x/y/foo", True),
    ("foo/**", "foo/x", True),
    ("foo/**", "foo/x/y", True),
    ("foo/**", "foo", False),
    ("foo/**", "foo/", False),
    ("**", "anything/at/all", True),
    # regex metacharacters are literal
    ("foo.bar", "foo.bar", True),
    ("foo.bar", "fooxbar", False),
    ("a+b(c)|d", "a+b(c)|d", True),
    ("^$x{1}", "^$x{1}", True),
    # bracket expressions
    ("[ab]c", "ac", True),
    ("[ab]c", "cc", False),
    ("[!ab]c", "cc", True),
    ("[!ab]c", "ac", False),
    ("[a-c]x", "bx", True),
    ("[a-c]x", "dx", False),
    ("[abc", "[abc", True),
    # escapes
    ("\\#file", "#file", True),
    ("\\!important", "!important", True),
    ("\\*", "*", True),
    ("\\*", "x", False),
    ("\\?", "?", True),
    ("a\\\\b", "a\\b", True),
    # trailing spaces and comments
    ("foo   ", "foo", True),
    ("foo\\ ", "foo ", True),
    ("foo\\ ", "foo", False),
    ("foo # trailing comment", "foo", True),
    ("foo\\#bar", "foo#bar", True),
])
def test_rule_semantics(rule, subject, expected):
    assert matches(rule, subject) is expected


@pytest.mark.parametrize("subject,expected", [
    ("a/b", True),
    ("a/x/b", True),
    ("a/x/y/b", True),
    ("ab", False),
    ("a/bc", False),
    ("x/a/b", False),
])
def test_interior_double_star_matches_zero_or_more_segments(subject, expected):
    assert matches("a/**/b", subject) is expected


@pytest.mark.parametrize("subject,expected", [
    ("target/", True),
    ("a/target/", True),
    ("a/b/target/", True),
    ("target/deep/file.rs", True),
    ("target", False),
    ("a/target", False),
    ("targets/", False),
])
def test_trailing_slash_matches_directories_only(subject, expected):
    assert matches("target/", subject) is expected


def test_pattern_attributes():
    pattern = compile_pattern("build/")
    assert pattern.directory_only
    assert not pattern.anchored
    assert not pattern.is_negation

    pattern = compile_pattern("/build")
    assert pattern.anchored
    assert not pattern.directory_only

    pattern = compile_pattern("src/gen/")
    assert pattern.anchored
    assert pattern.directory_only


def test_negation_is_tagged_and_stripped():
    pattern = compile_pattern("!keep.txt")
    assert pattern.is_negation
    assert pattern.matches("keep.txt")
    assert pattern.matches("dir/keep.txt")
    assert not pattern.matches("other.txt")


@pytest.mark.parametrize("rule", [
    "abc\\",
    "abc\\\\\\",
    "!abc\\",
    "*\\",
    "dir/\\",
])
def test_trailing_lone_backslash_never_matches(rule):
    pattern = compile_pattern(rule)
    assert pattern is not None
    assert pattern.never_matches
    assert pattern.regex is NEVER_MATCHES
    for subject in ["", "abc", "abc\\", "x/abc", "abc/", "dir/", "anything"]:
        assert not pattern.matches(subject)


def test_even_trailing_backslashes_are_a_literal_backslash():
    pattern = compile_pattern("abc\\\\")
    assert not pattern.never_matches
    assert pattern.matches("abc\\")


def test_invalid_bracket_range_never_matches():
    pattern = compile_pattern("[z-a]x")
    assert pattern is not None
    assert pattern.never_matches


@pytest.mark.parametrize("rule", [
    "*.txt",
    "foo",
    "/foo",
    "doc/frotz",
    "a/**/b",
    "**/foo",
    "doc/*.txt",
    "a?c",
    "[ab]c",
])
@pytest.mark.parametrize("path", [
    "foo",
    "a/foo",
    "foo/bar",
    "foobar",
    "doc/frotz",
    "a/doc/frotz",
    "doc/frotz/x",
    "a/b",
    "a/x/b",
    "a/x/y/b",
    "ab",
    "x.txt",
    "d/x.txt",
    "doc/a.txt",
    "doc/sub/a.txt",
    "abc",
    "ac",
    "bc",
    "x/bc",
])
def test_agrees_with_git_wildmatch(rule, path):
    spec = pathspec.GitIgnoreSpec.from_lines([rule])
    assert matches(rule, path) is spec.match_file(path)


@pytest.mark.parametrize("rule,subject,expected", [
    ("**/", "x.txt", False),
    ("**/", "x/", True),
    ("**/", "a/b/", True),
    ("foo/**/", "foo/x", False),
    ("foo/**/", "foo/x/", True),
    ("foo/**/", "foo/x/y.txt", True),
    ("foo/**/", "foo/", False),
])
def test_directory_only_double_star_needs_a_directory(rule, subject, expected):
    assert matches(rule, subject) is expected


@pytest.mark.parametrize("path", ["x.txt", "foo", "bar.py"])
def test_directory_only_double_star_agrees_with_git_wildmatch(path):
    spec = pathspec.GitIgnoreSpec.from_lines(["**/"])
    assert matches("**/", path) is spec.match_file(path)


def test_escaped_slash_is_a_literal_inside_one_segment():
    pattern = compile_pattern("a\\/b")

    assert not pattern.anchored
    assert pattern.matches("a/b")
    assert pattern.matches("x/a/b")
    assert not pattern.matches("a/c")
