from collections.abc import AsyncIterator
from typing import Any

import httpx
import structlog
from pydantic import ValidationError
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from validate_codeowners.core.errors import (
    CodeownersSyntaxError,
    GitLabGraphQLError,
    GitLabResponseError,
    MembershipQueryError,
)
from validate_codeowners.core.models import Member, MemberPage, MemberRelation, collect_pages
from validate_codeowners.integrations.gitlab.models import CodeownerValidation, ProjectMemberConnection

logger = structlog.get_logger(__name__)

_PROJECT_MEMBERS_QUERY = """
query ProjectMembers($fullPath: ID!, $relations: [ProjectMemberRelation!], $after: String) {
  project(fullPath: $fullPath) {
    projectMembers(relations: $relations, after: $after) {
      pageInfo {
        endCursor
        startCursor
        hasNextPage
      }
      nodes {
        id
        user {
          id
          username
          publicEmail
          emails {
            nodes {
              email
            }
          }
        }
      }
    }
  }
}
"""

# https://docs.gitlab.com/ee/api/graphql/reference/#repositoryvalidatecodeownerfile
_VALIDATE_CODEOWNERS_QUERY = """
query ValidateCodeowners($fullPath: ID!, $ref: String!, $path: String!) {
  project(fullPath: $fullPath) {
    repository {
      validateCodeownerFile(ref: $ref, path: $path) {
        total
        validationErrors {
          code
          lines
        }
      }
    }
  }
}
"""


def _get_object(container: dict[str, Any] | None, key: str) -> dict[str, Any] | None:
    """Return container[key] if it is a JSON object, None if it is missing or null."""
    if container is None:
        return None
    value = container.get(key)
    if value is None or isinstance(value, dict):
        return value
    raise GitLabResponseError(f"Expected '{key}' to be a JSON object, got {type(value).__name__}")


class GitLabGraphQLClient:
    """
    A client for GitLab's GraphQL API.

    Only returns users and emails that the token's identity has permission to
    see. For self-managed and dedicated instances an admin token is suggested.
    """

    def __init__(self, endpoint: str, token: str, timeout: float = 30.0):
        self.endpoint = endpoint
        self.token = token
        self.timeout = timeout

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=4, max=10),
        retry=retry_if_exception_type(httpx.TransportError),
        reraise=True,
    )
    async def execute_query(self, query: str, variables: dict[str, Any]) -> dict[str, Any]:
        """
        Executes a GraphQL query against the GitLab API.

        Args:
            query: The GraphQL query string.
            variables: A dictionary of variables for the query.

        Returns:
            The JSON response as a dictionary.

        Raises:
            httpx.HTTPStatusError: If the request fails with a non-2xx status code.
            GitLabGraphQLError: If the response carries GraphQL errors (GitLab
                reports these with HTTP 200).
            GitLabResponseError: If the body is not a JSON object.
        """
        headers = {
            "Authorization": f"Bearer {self.token}",
            "Content-Type": "application/json",
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    self.endpoint, json={"query": query, "variables": variables}, headers=headers
                )
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error("graphql_request_failed", status=e.response.status_code, endpoint=self.endpoint)
            raise

        try:
            data = response.json()
        except ValueError as e:
            logger.error("graphql_response_not_json", endpoint=self.endpoint, body=response.text[:200])
            raise GitLabResponseError(f"GraphQL API returned a non-JSON body from {self.endpoint}") from e
        if not isinstance(data, dict):
            raise GitLabResponseError(f"Expected a JSON object from GraphQL API, got {type(data).__name__}")
        if data.get("errors"):
            logger.error("graphql_query_errors", errors=data["errors"], variables=variables)
            raise GitLabGraphQLError(data["errors"])

        logger.debug("graphql_query_succeeded", variables=variables)
        return data

    async def iter_project_member_pages(
        self, project_path: str, relation: MemberRelation
    ) -> AsyncIterator[MemberPage]:
        """
        Yield every page of the project's members reached through `relation`.

        Pages are fetched one after another; the cursor of a page is needed
        to request the next one.
        """
        cursor: str | None = None
        while True:
            variables = {"fullPath": project_path, "relations": [relation.value], "after": cursor}
            data = await self.execute_query(_PROJECT_MEMBERS_QUERY, variables)

            project = _get_object(_get_object(data, "data"), "project")
            if project is None:
                raise MembershipQueryError(f"Project '{project_path}' not found or not visible to the token")

            try:
                connection = ProjectMemberConnection.model_validate(project.get("projectMembers") or {})
            except ValidationError as e:
                raise GitLabResponseError(f"Unexpected projectMembers response: {e}") from e
            members = [
                Member(username=node.user.username, emails=node.user.all_emails())
                for node in connection.nodes
                if node.user is not None
            ]
            next_cursor = connection.page_info.end_cursor if connection.page_info.has_next_page else None
            yield MemberPage(items=members, next_cursor=next_cursor)

            if next_cursor is None:
                break
            cursor = next_cursor

    async def get_direct_user_members(self, project_path: str, relation: MemberRelation) -> tuple[list[str], list[str]]:
        """
        Return usernames and emails of the project's members reached through `relation`.

        Args:
            project_path: Full project path (e.g., "my-group/my-project")
            relation: DIRECT or INVITED_GROUPS

        Returns:
            Tuple of (usernames, emails) merged across all result pages
        """
        relation = MemberRelation(relation)
        try:
            usernames, emails = await collect_pages(self.iter_project_member_pages(project_path, relation))
        except (httpx.HTTPError, GitLabGraphQLError, GitLabResponseError) as e:
            raise MembershipQueryError(
                f"Unable to list {relation.value} user members of project '{project_path}': {e}"
            ) from e

        logger.debug(
            "direct_user_members_found",
            project=project_path,
            relation=relation.value,
            usernames=len(usernames),
            emails=len(emails),
        )
        return usernames, emails

    async def check_codeowners_syntax(self, codeowners_path: str, project_path: str, branch: str) -> None:
        """
        Ask GitLab to validate the CODEOWNERS file on a branch.

        Raises:
            CodeownersSyntaxError: If GitLab cannot find the file or reports syntax errors
            GitLabResponseError: If the validation result is malformed
        """
        # GitLab doesn't understand relative paths
        path = codeowners_path.removeprefix("./")
        variables = {"fullPath": project_path, "ref": branch, "path": path}
        data = await self.execute_query(_VALIDATE_CODEOWNERS_QUERY, variables)

        project = _get_object(_get_object(data, "data"), "project")
        repository = _get_object(project, "repository")
        validation_data = _get_object(repository, "validateCodeownerFile")
        if validation_data is None:
            raise CodeownersSyntaxError(
                [
                    f"GitLab was unable to find the CODEOWNERS file in project '{project_path}' "
                    f"on branch '{branch}' at the specified path: '{path}'"
                ]
            )

        try:
            validation = CodeownerValidation.model_validate(validation_data)
        except ValidationError as e:
            raise GitLabResponseError(f"Unexpected validateCodeownerFile response: {e}") from e
        if validation.total > 0:
            errors = [
                f"validation error '{error.code}' on lines: {', '.join(str(line) for line in error.lines)}"
                for error in validation.validation_errors
            ]
            raise CodeownersSyntaxError(errors or [f"{validation.total} validation error(s) reported"])
