"""
Validate a GitLab CODEOWNERS file from a CI job.

Run from the root of the checked-out repository. Settings come from the
environment (see validate_codeowners.core.config). Exits non-zero when any
check fails.
"""

import asyncio
import sys
from pathlib import Path

import httpx
import structlog

from validate_codeowners.analysis import analyze_file, find_unmatched_patterns, locate_codeowners_file
from validate_codeowners.analysis.patterns import GlobFunc, repo_glob
from validate_codeowners.core.config import Config
from validate_codeowners.core.errors import (
    CodeownersNotFoundError,
    CodeownersReadError,
    CodeownersSyntaxError,
    ConfigurationError,
    GitLabGraphQLError,
    GitLabResponseError,
    MembershipQueryError,
)
from validate_codeowners.core.models import FileFacts
from validate_codeowners.core.utils.logging import configure_logging, log_operation
from validate_codeowners.integrations.gitlab import GitLabGraphQLClient, GitLabRestClient
from validate_codeowners.presentation.report_formatter import (
    CheckResult,
    format_report,
    format_syntax_result,
)
from validate_codeowners.reconciliation import GroupMemberSource, UserMemberSource, reconcile

logger = structlog.get_logger(__name__)


async def check_owners(
    facts: FileFacts, project_path: str, group_source: GroupMemberSource, user_source: UserMemberSource
) -> list[CheckResult]:
    """Check that every user, group and email owner is a direct member of the project."""
    try:
        async with log_operation("membership_check", project=project_path):
            result = await reconcile(
                project_path,
                sorted(facts.user_and_group_names),
                sorted(facts.email_addresses),
                group_source,
                user_source,
            )
    except (MembershipQueryError, ValueError) as e:
        return [
            CheckResult(name="Direct user and group membership check", error=str(e)),
            CheckResult(name="Direct user email membership check", error=str(e)),
        ]

    return [
        CheckResult(name="Direct user and group membership check", failures=result.remaining_users_or_groups),
        CheckResult(name="Direct user email membership check", failures=result.remaining_emails),
    ]


def check_file_patterns(facts: FileFacts, root_dir: str, glob_func: GlobFunc = repo_glob) -> CheckResult:
    """Check that every file pattern matches at least one file."""
    try:
        unmatched = find_unmatched_patterns(facts.file_patterns, root_dir=root_dir, glob_func=glob_func)
    except OSError as e:
        return CheckResult(name="File pattern check", error=str(e))
    return CheckResult(name="File pattern check", failures=unmatched)


def check_ignored_owners(facts: FileFacts) -> CheckResult:
    """Flag owner tokens without "@", which GitLab silently ignores."""
    return CheckResult(
        name="Non user/group owner check",
        failures=sorted(facts.ignored_tokens),
        failure_label="Ignored by GitLab (owners must start with '@' or be an email):",
    )


async def run(
    config: Config,
    graphql_client: GitLabGraphQLClient | None = None,
    rest_client: GitLabRestClient | None = None,
    glob_func: GlobFunc = repo_glob,
) -> int:
    """
    Run every CODEOWNERS check and print the report.

    Returns:
        Process exit code: 0 when all checks pass, 1 otherwise
    """
    gitlab = config.gitlab
    graphql_client = graphql_client or GitLabGraphQLClient(gitlab.graphql_url, gitlab.token, gitlab.timeout_secs)
    rest_client = rest_client or GitLabRestClient(gitlab.rest_url, gitlab.token, gitlab.timeout_secs)

    try:
        codeowners_path = locate_codeowners_file(config.root_dir)
    except CodeownersNotFoundError as e:
        print(f"\n{e}")
        return 1
    relative_path = codeowners_path.relative_to(Path(config.root_dir)).as_posix()

    # No sense in trying to analyze a broken file
    try:
        await graphql_client.check_codeowners_syntax(relative_path, gitlab.project_path, gitlab.branch)
    except CodeownersSyntaxError as e:
        print(format_syntax_result(relative_path, e.errors))
        return 1
    except (httpx.HTTPError, GitLabGraphQLError, GitLabResponseError) as e:
        print(format_syntax_result(relative_path, [f"Syntax check error: {e}"]))
        return 1
    print(format_syntax_result(relative_path))

    try:
        facts = analyze_file(codeowners_path)
    except CodeownersReadError as e:
        print(f"\n{e}")
        return 1

    results = await check_owners(facts, gitlab.project_path, rest_client, graphql_client)
    results.append(check_file_patterns(facts, config.root_dir, glob_func))
    if config.fail_non_users_groups:
        results.append(check_ignored_owners(facts))

    print(format_report(results))

    failed = [result.name for result in results if not result.passed]
    if failed:
        logger.debug("codeowners_checks_failed", checks=failed)
        return 1
    return 0


def main() -> None:
    """Console entry point."""
    try:
        config = Config.from_env()
    except ConfigurationError as e:
        print(f"error reading environment variables: {e}", file=sys.stderr)
        sys.exit(1)

    configure_logging(config.logging.debug, config.logging.format)
    sys.exit(asyncio.run(run(config)))


if __name__ == "__main__":
    main()
