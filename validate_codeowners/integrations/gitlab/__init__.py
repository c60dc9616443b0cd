from validate_codeowners.integrations.gitlab.graphql import GitLabGraphQLClient
from validate_codeowners.integrations.gitlab.rest import GitLabRestClient

__all__ = ["GitLabGraphQLClient", "GitLabRestClient"]
