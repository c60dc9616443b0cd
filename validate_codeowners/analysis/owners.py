"""
Classification of the owner side of a CODEOWNERS line.
"""

from validate_codeowners.core.models import OwnerPatterns


def classify_owner_patterns(owner_patterns: str) -> OwnerPatterns:
    """
    Split owner patterns into @user/@group references, emails, and ignored tokens.

    Owner tokens that don't contain "@" are ignored by GitLab, see
    https://docs.gitlab.com/ee/user/project/codeowners/reference.html#example-codeowners-file

    Args:
        owner_patterns: Right-hand side of a CODEOWNERS line

    Returns:
        OwnerPatterns with the "@" prefix removed from user/group names
    """
    users_or_groups: list[str] = []
    emails: list[str] = []
    ignored: list[str] = []

    for token in owner_patterns.split():
        if token.startswith("@"):
            # The "@" is owner syntax, not part of a GitLab username or group path
            users_or_groups.append(token[1:])
        elif "@" in token:
            emails.append(token)
        else:
            ignored.append(token)

    return OwnerPatterns(users_or_groups=users_or_groups, emails=emails, ignored=ignored)
