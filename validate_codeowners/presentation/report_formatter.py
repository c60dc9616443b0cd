from pydantic import BaseModel, Field

INDENT = "     "


class CheckResult(BaseModel):
    """Outcome of one validation check."""

    name: str
    failures: list[str] = Field(default_factory=list)
    error: str | None = None
    failure_label: str = "Unable to find:"

    @property
    def passed(self) -> bool:
        return not self.failures and self.error is None


def _status(passed: bool) -> str:
    return "PASSED" if passed else "FAILED"


def format_syntax_result(codeowners_path: str, errors: list[str] | None = None) -> str:
    """Format the outcome of GitLab's syntax check."""
    text = f"\nSyntax check of '{codeowners_path}': {_status(not errors)}"
    for message in errors or []:
        text += f"\n{INDENT}{message}"
    return text


def format_check_result(result: CheckResult) -> str:
    """Format one check as a status line plus indented details."""
    text = f"\n{result.name}: {_status(result.passed)}"
    if result.error is not None:
        text += f"\n{INDENT}{result.name} error: {result.error}"
    elif result.failures:
        text += f"\n{INDENT}{result.failure_label}"
        for failure in result.failures:
            text += f"\n{INDENT}{INDENT}{failure}"
    return text


def format_report(results: list[CheckResult]) -> str:
    """Format every check, followed by a closing line when anything failed."""
    text = "".join(format_check_result(result) for result in results)
    if not all(result.passed for result in results):
        text += "\n\nSee failures noted above."
    return text
