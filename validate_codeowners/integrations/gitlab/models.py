from pydantic import BaseModel, ConfigDict, Field


class PageInfo(BaseModel):
    """GraphQL cursor pagination info."""

    model_config = ConfigDict(populate_by_name=True)

    end_cursor: str | None = Field(None, alias="endCursor")
    start_cursor: str | None = Field(None, alias="startCursor")
    has_next_page: bool = Field(False, alias="hasNextPage")


class EmailNode(BaseModel):
    email: str


class EmailConnection(BaseModel):
    nodes: list[EmailNode] = Field(default_factory=list)


class UserNode(BaseModel):
    """GitLab user as seen through a project membership."""

    model_config = ConfigDict(populate_by_name=True)

    id: str | None = None
    username: str
    public_email: str | None = Field(None, alias="publicEmail")
    emails: EmailConnection = Field(default_factory=EmailConnection)

    def all_emails(self) -> list[str]:
        """Public email first, then every other email not equal to it."""
        found = [self.public_email] if self.public_email else []
        found.extend(node.email for node in self.emails.nodes if node.email != self.public_email)
        return found


class ProjectMemberNode(BaseModel):
    id: str | None = None
    # Null for members whose user the token cannot see
    user: UserNode | None = None


class ProjectMemberConnection(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    page_info: PageInfo = Field(default_factory=PageInfo, alias="pageInfo")
    nodes: list[ProjectMemberNode] = Field(default_factory=list)


class ValidationErrorNode(BaseModel):
    code: str
    lines: list[int] = Field(default_factory=list)


class CodeownerValidation(BaseModel):
    """Result of GitLab's repository.validateCodeownerFile."""

    model_config = ConfigDict(populate_by_name=True)

    total: int = 0
    validation_errors: list[ValidationErrorNode] = Field(default_factory=list, alias="validationErrors")


class SharedGroup(BaseModel):
    """A group the project has been shared with (REST)."""

    group_id: int
    group_name: str
    group_full_path: str
    group_access_level: int | None = None


class Project(BaseModel):
    """
    GitLab project, REST representation.
    See https://docs.gitlab.com/ee/api/projects.html#get-single-project
    """

    id: int
    path_with_namespace: str | None = None
    shared_with_groups: list[SharedGroup] = Field(default_factory=list)
