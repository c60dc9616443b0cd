"""
Analysis of a whole CODEOWNERS file.

Assumes the working directory (or the given root) is the root of a Git repo
that holds the CODEOWNERS file in one of GitLab's supported locations, see
https://docs.gitlab.com/ee/user/project/codeowners/#codeowners-file
"""

from collections.abc import Iterable
from pathlib import Path

import structlog

from validate_codeowners.analysis.line_parser import parse_line
from validate_codeowners.analysis.owners import classify_owner_patterns
from validate_codeowners.core.errors import CodeownersNotFoundError, CodeownersReadError
from validate_codeowners.core.models import FileFacts

logger = structlog.get_logger(__name__)

# In order of precedence
CODEOWNERS_LOCATIONS = ("CODEOWNERS", "docs/CODEOWNERS", ".gitlab/CODEOWNERS")


def locate_codeowners_file(root_dir: str | Path = ".") -> Path:
    """
    Return the path of the first CODEOWNERS file found at GitLab's supported locations.

    Raises:
        CodeownersNotFoundError: If none of the locations holds a regular file
    """
    root = Path(root_dir)
    for location in CODEOWNERS_LOCATIONS:
        candidate = root / location
        if candidate.is_dir():
            logger.debug("codeowners_location_is_directory", path=str(candidate))
            continue
        if candidate.is_file():
            logger.debug("codeowners_file_found", path=str(candidate))
            return candidate

    raise CodeownersNotFoundError(
        f"Unable to find a CODEOWNERS file at GitLab's {len(CODEOWNERS_LOCATIONS)} supported paths: "
        f"{', '.join(CODEOWNERS_LOCATIONS)}"
    )


def read_codeowners_lines(path: str | Path) -> list[str]:
    """Read the file and split it on Windows and Linux line endings."""
    try:
        content = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise CodeownersReadError(f"Unable to read CODEOWNERS file at path '{path}': {e}") from e
    return content.replace("\r\n", "\n").split("\n")


def analyze_lines(lines: Iterable[str]) -> FileFacts:
    """
    Collect the unique section headings, file patterns and owners of every line.

    Args:
        lines: CODEOWNERS lines in file order

    Returns:
        FileFacts built from a single pass over the lines
    """
    section_headings: set[str] = set()
    file_patterns: set[str] = set()
    user_and_group_names: set[str] = set()
    email_addresses: set[str] = set()
    ignored_tokens: set[str] = set()

    for line in lines:
        parsed = parse_line(line)
        owners = classify_owner_patterns(parsed.owner_patterns)
        logger.debug(
            "codeowners_line_processed",
            line=line,
            section_heading=parsed.section_heading,
            file_pattern=parsed.file_pattern,
            users_or_groups=owners.users_or_groups,
            emails=owners.emails,
            ignored=owners.ignored,
        )

        if parsed.section_heading is not None:
            section_headings.add(parsed.section_heading)
        if parsed.file_pattern is not None:
            file_patterns.add(parsed.file_pattern)
        user_and_group_names.update(owners.users_or_groups)
        email_addresses.update(owners.emails)
        ignored_tokens.update(owners.ignored)

    # A lone "@" yields an empty name; it is parsing junk, not an owner
    collected = (section_headings, file_patterns, user_and_group_names, email_addresses, ignored_tokens)
    for values in collected:
        values.discard("")

    return FileFacts(
        section_headings=frozenset(section_headings),
        file_patterns=frozenset(file_patterns),
        user_and_group_names=frozenset(user_and_group_names),
        email_addresses=frozenset(email_addresses),
        ignored_tokens=frozenset(ignored_tokens),
    )


def analyze_file(path: str | Path) -> FileFacts:
    """Read and analyze a CODEOWNERS file."""
    lines = read_codeowners_lines(path)
    facts = analyze_lines(lines)
    logger.info(
        "codeowners_file_analyzed",
        path=str(path),
        lines=len(lines),
        file_patterns=len(facts.file_patterns),
        users_or_groups=len(facts.user_and_group_names),
        emails=len(facts.email_addresses),
    )
    return facts
