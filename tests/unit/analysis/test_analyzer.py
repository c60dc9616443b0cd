"""Tests for whole-file CODEOWNERS analysis."""

from pathlib import Path

import pytest

from validate_codeowners.analysis.analyzer import (
    CODEOWNERS_LOCATIONS,
    analyze_file,
    analyze_lines,
    locate_codeowners_file,
    read_codeowners_lines,
)
from validate_codeowners.core.errors import CodeownersNotFoundError, CodeownersReadError

SAMPLE_CODEOWNERS = """\
# Default owners
* @default-owner

[Frontend] @team-fe user@corp.com
src/app/ @alice
*.js @alice @team-fe

^[Optional Docs][2]
/docs/ docs-team @bob bob@corp.com
docs/\\ file.md @bob
"""


class TestAnalyzeLines:
    def test_collects_unique_facts(self) -> None:
        facts = analyze_lines(SAMPLE_CODEOWNERS.split("\n"))

        assert facts.section_headings == {"[Frontend]", "^[Optional Docs][2]"}
        assert facts.file_patterns == {"*", "src/app/", "*.js", "/docs/", "docs/\\ file.md"}
        assert facts.user_and_group_names == {"default-owner", "team-fe", "alice", "bob"}
        assert facts.email_addresses == {"user@corp.com", "bob@corp.com"}
        assert facts.ignored_tokens == {"docs-team"}

    def test_empty_string_is_never_collected(self) -> None:
        facts = analyze_lines(["", "# comment", "file.txt @", "[Heading] @"])

        for values in (
            facts.section_headings,
            facts.file_patterns,
            facts.user_and_group_names,
            facts.email_addresses,
            facts.ignored_tokens,
        ):
            assert "" not in values

        assert facts.file_patterns == {"file.txt"}
        assert facts.user_and_group_names == frozenset()

    def test_empty_input(self) -> None:
        facts = analyze_lines([])

        assert facts.file_patterns == frozenset()
        assert facts.section_headings == frozenset()

    def test_facts_are_immutable(self) -> None:
        facts = analyze_lines(["* @owner"])

        with pytest.raises(Exception):
            facts.file_patterns = frozenset({"other"})


class TestLocateCodeownersFile:
    def test_prefers_root_location(self, tmp_path: Path) -> None:
        for location in CODEOWNERS_LOCATIONS:
            path = tmp_path / location
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text("* @owner\n")

        assert locate_codeowners_file(tmp_path) == tmp_path / "CODEOWNERS"

    def test_falls_back_to_gitlab_directory(self, tmp_path: Path) -> None:
        (tmp_path / ".gitlab").mkdir()
        (tmp_path / ".gitlab" / "CODEOWNERS").write_text("* @owner\n")

        assert locate_codeowners_file(tmp_path) == tmp_path / ".gitlab" / "CODEOWNERS"

    def test_skips_directory_named_codeowners(self, tmp_path: Path) -> None:
        (tmp_path / "CODEOWNERS").mkdir()
        (tmp_path / "docs").mkdir()
        (tmp_path / "docs" / "CODEOWNERS").write_text("* @owner\n")

        assert locate_codeowners_file(tmp_path) == tmp_path / "docs" / "CODEOWNERS"

    def test_raises_when_missing(self, tmp_path: Path) -> None:
        with pytest.raises(CodeownersNotFoundError, match="supported paths"):
            locate_codeowners_file(tmp_path)


class TestReadAndAnalyzeFile:
    def test_normalizes_windows_line_endings(self, tmp_path: Path) -> None:
        path = tmp_path / "CODEOWNERS"
        path.write_bytes(b"*.py @py\r\n/README.md @docs\r\n")

        assert read_codeowners_lines(path) == ["*.py @py", "/README.md @docs", ""]

    def test_analyze_file(self, tmp_path: Path) -> None:
        path = tmp_path / "CODEOWNERS"
        path.write_text(SAMPLE_CODEOWNERS)

        facts = analyze_file(path)

        assert "alice" in facts.user_and_group_names
        assert "src/app/" in facts.file_patterns

    def test_unreadable_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(CodeownersReadError):
            read_codeowners_lines(tmp_path / "missing")
