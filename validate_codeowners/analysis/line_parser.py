"""
Splitting of a single CODEOWNERS line.

A line has a [section heading] or a file pattern on the left and owner
patterns on the right, separated by the first unescaped space or tab that
is not inside the heading's brackets.
See https://docs.gitlab.com/ee/user/project/codeowners/reference.html
"""

from validate_codeowners.core.models import ParsedLine

ESCAPE = "\\"
DELIMITERS = (" ", "\t")


def parse_line(line: str) -> ParsedLine:
    """
    Split a raw CODEOWNERS line into its heading or file pattern and its owner patterns.

    Never fails: every string yields some ParsedLine.

    Args:
        line: One line of the CODEOWNERS file

    Returns:
        ParsedLine with at most one of section_heading/file_pattern set
    """
    line = line.strip()

    # Blank and comment lines carry nothing
    if not line or line.startswith("#"):
        return ParsedLine()

    # "[Section]" or "^[Optional section]"
    is_heading = line.startswith("[") or line.startswith("^[")

    split_position = _find_split_position(line, is_heading)

    if split_position is None:
        left, owner_patterns = line, ""
    else:
        left, owner_patterns = line[:split_position], line[split_position + 1 :]

    if is_heading:
        return ParsedLine(section_heading=left, owner_patterns=owner_patterns)
    return ParsedLine(file_pattern=left, owner_patterns=owner_patterns)


def _find_split_position(line: str, is_heading: bool) -> int | None:
    escaped = False
    heading_open = is_heading

    for index, char in enumerate(line):
        if escaped:
            escaped = False
            continue

        if char == ESCAPE:
            escaped = True
            continue

        if heading_open:
            if char == "]":
                heading_open = False
            continue

        if char in DELIMITERS:
            return index

    return None
