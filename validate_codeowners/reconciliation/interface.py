"""
Membership sources consulted when checking owners against a project.
"""

from typing import Protocol

from validate_codeowners.core.models import MemberRelation

__all__ = ["GroupMemberSource", "MemberRelation", "UserMemberSource"]


class GroupMemberSource(Protocol):
    """Lists groups that are direct members of a project."""

    async def get_direct_group_members(self, project_path: str) -> list[str]:
        """Return the full paths of groups the project is shared with."""
        ...


class UserMemberSource(Protocol):
    """Lists users (and their emails) that are members of a project."""

    async def get_direct_user_members(self, project_path: str, relation: MemberRelation) -> tuple[list[str], list[str]]:
        """
        Return (usernames, emails) of every member reached through `relation`.

        All result pages must already be merged.
        """
        ...
