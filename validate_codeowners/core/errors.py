"""
Core error classes for the CODEOWNERS validator.
"""

from typing import Any


class ConfigurationError(ValueError):
    """Raised when required settings are missing or malformed."""

    def __init__(self, problems: list[str]) -> None:
        self.problems = problems
        super().__init__(f"Configuration errors: {', '.join(problems)}")


class CodeownersNotFoundError(Exception):
    """Raised when no CODEOWNERS file exists at any supported location."""

    pass


class CodeownersReadError(Exception):
    """Raised when the CODEOWNERS file exists but cannot be read."""

    pass


class CodeownersSyntaxError(Exception):
    """Raised when GitLab reports the CODEOWNERS file as invalid."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = errors
        super().__init__("; ".join(errors))


class GitLabGraphQLError(Exception):
    """Raised when GitLab GraphQL API returns errors in the response."""

    def __init__(self, errors: list[dict[str, Any]]) -> None:
        self.errors = errors
        messages = [str(error.get("message", error)) for error in errors]
        super().__init__(f"GraphQL errors: {'; '.join(messages)}")


class ProjectNotFoundError(Exception):
    """Raised when a project is not found or inaccessible."""

    pass


class MembershipQueryError(Exception):
    """Raised when a membership source cannot be queried."""

    pass


class GitLabResponseError(Exception):
    """Raised when a GitLab API response is not shaped as expected."""

    pass
