"""
Checks CODEOWNERS owners against a project's direct membership.

User and group owners are both written as "@name" and cannot be told apart
until checked, so they are tracked in one combined list. Each stage asks one
membership source and checks off what it finds; later stages only run while
something is still unverified.
"""

from collections.abc import Iterable

import structlog

from validate_codeowners.core.models import MemberRelation, ReconciliationResult
from validate_codeowners.reconciliation.interface import GroupMemberSource, UserMemberSource

logger = structlog.get_logger(__name__)


def subtract(remaining: list[str], found: Iterable[str]) -> list[str]:
    """
    Remove one occurrence of every found element from remaining.

    Found elements that are not in remaining are ignored, since member lookups
    can return names that were never owner candidates.

    Args:
        remaining: Candidates not yet verified (may contain duplicates)
        found: Names returned by a membership source

    Returns:
        New list with the matched occurrences removed; order is not preserved
    """
    result = list(remaining)
    for element in found:
        try:
            index = result.index(element)
        except ValueError:
            continue
        # Swap with the last element and drop it
        result[index] = result[-1]
        result.pop()
    return result


async def reconcile(
    project_path: str,
    candidate_users_or_groups: Iterable[str],
    candidate_emails: Iterable[str],
    group_source: GroupMemberSource,
    user_source: UserMemberSource,
) -> ReconciliationResult:
    """
    Find owners that are not direct members of the project.

    Any error raised by a source propagates; no partial result is returned.

    Args:
        project_path: Full path of the project (e.g., "my-group/my-project")
        candidate_users_or_groups: @user/@group owners with the "@" removed
        candidate_emails: Email owners
        group_source: Source of groups shared with the project
        user_source: Source of project user members

    Returns:
        ReconciliationResult with whatever could not be verified
    """
    remaining_users_or_groups = list(candidate_users_or_groups)
    remaining_emails = list(candidate_emails)

    def done() -> bool:
        return not remaining_users_or_groups and not remaining_emails

    if done():
        return ReconciliationResult()

    logger.debug("checking_direct_group_members", project=project_path)
    groups_found = await group_source.get_direct_group_members(project_path)
    remaining_users_or_groups = subtract(remaining_users_or_groups, groups_found)

    for relation in (MemberRelation.INVITED_GROUPS, MemberRelation.DIRECT):
        if done():
            break
        logger.debug("checking_direct_user_members", project=project_path, relation=relation.value)
        usernames_found, emails_found = await user_source.get_direct_user_members(project_path, relation)
        remaining_users_or_groups = subtract(remaining_users_or_groups, usernames_found)
        remaining_emails = subtract(remaining_emails, emails_found)

    return ReconciliationResult(
        remaining_users_or_groups=sorted(remaining_users_or_groups),
        remaining_emails=sorted(remaining_emails),
    )
