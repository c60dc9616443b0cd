from urllib.parse import quote

import httpx
import structlog
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from validate_codeowners.core.errors import GitLabResponseError, MembershipQueryError, ProjectNotFoundError
from validate_codeowners.integrations.gitlab.models import Project

logger = structlog.get_logger(__name__)


class GitLabRestClient:
    """A client for the parts of GitLab's REST API (v4) that GraphQL does not cover."""

    def __init__(self, base_url: str, token: str, timeout: float = 30.0):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.headers = {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
        }

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=4, max=10),
        retry=retry_if_exception_type(httpx.TransportError),
        reraise=True,
    )
    async def get_project(self, project_path: str) -> Project:
        """
        Look up a project by its full path (e.g., my-group/my-subgroup/my-project).

        Raises:
            ValueError: If the path has no namespace
            ProjectNotFoundError: If the project does not exist or is not visible to the token
            GitLabResponseError: If the body is not a valid project
        """
        project_path = project_path.strip("/")
        if "/" not in project_path:
            raise ValueError(f"Project path must look like group/project or group/subgroup/project: '{project_path}'")

        url = f"{self.base_url}/projects/{quote(project_path, safe='')}"
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            try:
                response = await client.get(url, headers=self.headers)
                response.raise_for_status()
            except httpx.HTTPStatusError as e:
                if e.response.status_code == 404:
                    raise ProjectNotFoundError(f"Project {project_path} not found.") from e
                logger.error("gitlab_api_error", status=e.response.status_code, response_body=e.response.text)
                raise

        try:
            return Project.model_validate(response.json())
        except ValueError as e:
            # Covers both a non-JSON body and a pydantic ValidationError
            logger.error("gitlab_api_unexpected_response", url=url, response_body=response.text[:200])
            raise GitLabResponseError(f"Unexpected response for project {project_path}: {e}") from e

    async def get_direct_group_members(self, project_path: str) -> list[str]:
        """
        Return the full paths of groups that are direct members of the project.

        These are the groups the project has been shared with; groups the
        project merely inherits from its namespace are not included.
        """
        try:
            project = await self.get_project(project_path)
        except (httpx.HTTPError, GitLabResponseError, ProjectNotFoundError) as e:
            raise MembershipQueryError(f"Unable to list group members of project '{project_path}': {e}") from e

        groups = [group.group_full_path for group in project.shared_with_groups]
        logger.debug("direct_group_members_found", project=project_path, groups=groups)
        return groups
