"""
Translation of CODEOWNERS file patterns into glob expressions, and the
check that every pattern matches at least one file.
"""

import glob
from collections.abc import Callable, Iterable

import structlog

logger = structlog.get_logger(__name__)

MATCH_EVERYTHING = "*"

GlobFunc = Callable[[str, str], list[str]]


def to_glob(file_pattern: str) -> str:
    """
    Translate a CODEOWNERS file pattern into a standard glob expression.

    Args:
        file_pattern: CODEOWNERS pattern (e.g., "*.go", "/README.md", "src/")

    Returns:
        Glob expression relative to the repository root
    """
    if file_pattern.startswith("/"):
        # https://docs.gitlab.com/ee/user/project/codeowners/reference.html#absolute-paths
        translated = "." + file_pattern
    else:
        # https://docs.gitlab.com/ee/user/project/codeowners/reference.html#relative-paths
        translated = "./**/" + file_pattern

    if file_pattern.endswith("/"):
        # https://docs.gitlab.com/ee/user/project/codeowners/reference.html#directory-paths
        translated += "**/*"

    return translated


def escape_for_glob(expression: str) -> str:
    """Resolve backslash escapes ("\\ ", "\\*", "\\!") so glob matches the escaped character literally."""
    result = []
    chars = iter(expression)
    for char in chars:
        if char == "\\":
            escaped = next(chars, None)
            if escaped is None:
                result.append("\\")
            else:
                # Only "*", "?" and "[" need a bracket expression; "[!]" would be an unterminated class
                result.append(glob.escape(escaped))
        else:
            result.append(char)
    return "".join(result)


def repo_glob(expression: str, root_dir: str) -> list[str]:
    """Recursive glob under root_dir, including hidden files."""
    return glob.glob(escape_for_glob(expression), root_dir=root_dir, recursive=True, include_hidden=True)


def find_unmatched_patterns(
    file_patterns: Iterable[str], root_dir: str = ".", glob_func: GlobFunc = repo_glob
) -> list[str]:
    """
    Verify that each file pattern matches at least one file.

    Args:
        file_patterns: Unique file patterns from the CODEOWNERS file
        root_dir: Repository root the patterns are relative to
        glob_func: Callable taking (expression, root_dir) and returning matches

    Returns:
        Sorted list of patterns with no matches
    """
    unmatched = []

    for pattern in sorted(file_patterns):
        logger.debug("checking_file_pattern", pattern=pattern)
        # Always matches at least the CODEOWNERS file itself
        if pattern == MATCH_EVERYTHING:
            continue

        expression = to_glob(pattern)
        matches = glob_func(expression, root_dir)
        logger.debug("file_pattern_matches", pattern=pattern, expression=expression, matches=len(matches))

        if not matches:
            unmatched.append(pattern)

    return unmatched
