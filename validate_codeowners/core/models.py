from collections.abc import AsyncIterable, Iterable
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class MemberRelation(str, Enum):
    """How a user reaches a project, as understood by GitLab's projectMembers query."""

    DIRECT = "DIRECT"
    INVITED_GROUPS = "INVITED_GROUPS"


class ParsedLine(BaseModel):
    """
    A single CODEOWNERS line split into its left and right sides.

    At most one of section_heading/file_pattern is set. Blank and comment
    lines leave every field empty.
    """

    model_config = ConfigDict(frozen=True)

    section_heading: str | None = None
    file_pattern: str | None = None
    owner_patterns: str = ""


class OwnerPatterns(BaseModel):
    """Owner tokens of one line, classified in input order."""

    model_config = ConfigDict(frozen=True)

    users_or_groups: list[str] = Field(default_factory=list)
    emails: list[str] = Field(default_factory=list)
    ignored: list[str] = Field(default_factory=list)


class FileFacts(BaseModel):
    """Unique patterns found in a CODEOWNERS file."""

    model_config = ConfigDict(frozen=True)

    section_headings: frozenset[str] = frozenset()
    file_patterns: frozenset[str] = frozenset()
    user_and_group_names: frozenset[str] = frozenset()
    email_addresses: frozenset[str] = frozenset()
    ignored_tokens: frozenset[str] = frozenset()


class ReconciliationResult(BaseModel):
    """Owners that could not be confirmed as direct project members."""

    model_config = ConfigDict(frozen=True)

    remaining_users_or_groups: list[str] = Field(default_factory=list)
    remaining_emails: list[str] = Field(default_factory=list)

    @property
    def passed(self) -> bool:
        return not self.remaining_users_or_groups and not self.remaining_emails


class Member(BaseModel):
    """A project member as returned by one page of a membership query."""

    username: str
    emails: list[str] = Field(default_factory=list)


class MemberPage(BaseModel):
    """One page of a cursor-paginated membership query."""

    items: list[Member] = Field(default_factory=list)
    next_cursor: str | None = None


def merge_pages(pages: Iterable[MemberPage]) -> tuple[list[str], list[str]]:
    """
    Concatenate every page into flat username and email lists.

    Args:
        pages: Pages in the order they were fetched

    Returns:
        Tuple of (usernames, emails)
    """
    usernames: list[str] = []
    emails: list[str] = []
    for page in pages:
        for member in page.items:
            usernames.append(member.username)
            emails.extend(member.emails)
    return usernames, emails


async def collect_pages(pages: AsyncIterable[MemberPage]) -> tuple[list[str], list[str]]:
    """Drain an async page iterator and merge the result."""
    fetched = [page async for page in pages]
    return merge_pages(fetched)
