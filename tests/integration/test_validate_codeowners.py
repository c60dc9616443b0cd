"""
Runs the validator against a mocked GitLab API, through the real clients.
"""

import json
from pathlib import Path

import httpx
import pytest
import respx

from validate_codeowners.main import run

GRAPHQL_URL = "https://gitlab.example.com/api/graphql"
PROJECT_URL = "https://gitlab.example.com/api/v4/projects/grp%2Fproj"


def _members(usernames: list[str], emails: list[str]) -> dict:
    nodes = [{"id": f"m-{name}", "user": {"id": f"u-{name}", "username": name, "publicEmail": None}} for name in usernames]
    if emails:
        nodes.append(
            {
                "id": "m-mail",
                "user": {
                    "id": "u-mail",
                    "username": "mail-user",
                    "publicEmail": emails[0],
                    "emails": {"nodes": [{"email": email} for email in emails]},
                },
            }
        )
    return {
        "data": {
            "project": {"projectMembers": {"pageInfo": {"hasNextPage": False, "endCursor": None}, "nodes": nodes}}
        }
    }


def _graphql_responder(members: dict[str, dict]):
    seen: list[str] = []

    def respond(request: httpx.Request) -> httpx.Response:
        variables = json.loads(request.content)["variables"]
        if "ref" in variables:
            seen.append("syntax")
            body = {"data": {"project": {"repository": {"validateCodeownerFile": {"total": 0, "validationErrors": []}}}}}
            return httpx.Response(200, json=body)
        relation = variables["relations"][0]
        seen.append(relation)
        return httpx.Response(200, json=members[relation])

    return respond, seen


@pytest.mark.asyncio
async def test_all_owners_are_direct_members(repo_dir: Path, make_config, capsys) -> None:
    (repo_dir / "CODEOWNERS").write_text("[Frontend] @team-fe user@corp.com\nsrc/app/ @alice\n")
    respond, seen = _graphql_responder(
        {
            "INVITED_GROUPS": _members([], ["user@corp.com"]),
            "DIRECT": _members(["alice"], []),
        }
    )
    project = {
        "id": 7,
        "path_with_namespace": "grp/proj",
        "shared_with_groups": [{"group_id": 3, "group_name": "team-fe", "group_full_path": "team-fe"}],
    }

    async with respx.mock:
        respx.post(GRAPHQL_URL).mock(side_effect=respond)
        respx.get(PROJECT_URL).mock(return_value=httpx.Response(200, json=project))

        exit_code = await run(make_config())

    output = capsys.readouterr().out
    assert exit_code == 0, output
    assert seen == ["syntax", "INVITED_GROUPS", "DIRECT"]
    assert "Direct user and group membership check: PASSED" in output
    assert "Direct user email membership check: PASSED" in output


@pytest.mark.asyncio
async def test_inherited_group_is_not_a_direct_member(repo_dir: Path, make_config, capsys) -> None:
    (repo_dir / "CODEOWNERS").write_text("* @parent-group\n")
    respond, seen = _graphql_responder({"INVITED_GROUPS": _members([], []), "DIRECT": _members(["bob"], [])})

    async with respx.mock:
        respx.post(GRAPHQL_URL).mock(side_effect=respond)
        respx.get(PROJECT_URL).mock(return_value=httpx.Response(200, json={"id": 7, "shared_with_groups": []}))

        exit_code = await run(make_config())

    output = capsys.readouterr().out
    assert exit_code == 1
    assert "parent-group" in output
    assert seen == ["syntax", "INVITED_GROUPS", "DIRECT"]


@pytest.mark.asyncio
async def test_non_json_syntax_response_is_reported(repo_dir: Path, make_config, capsys) -> None:
    (repo_dir / "CODEOWNERS").write_text("* @alice\n")

    async with respx.mock:
        respx.post(GRAPHQL_URL).mock(return_value=httpx.Response(200, text="<html>login</html>"))

        exit_code = await run(make_config())

    output = capsys.readouterr().out
    assert exit_code == 1
    assert "Syntax check of 'CODEOWNERS': FAILED" in output
    assert "Syntax check error: GraphQL API returned a non-JSON body" in output


@pytest.mark.asyncio
async def test_non_json_membership_response_is_reported(repo_dir: Path, make_config, capsys) -> None:
    (repo_dir / "CODEOWNERS").write_text("* @alice\n")

    def respond(request: httpx.Request) -> httpx.Response:
        if "ref" in json.loads(request.content)["variables"]:
            body = {"data": {"project": {"repository": {"validateCodeownerFile": {"total": 0, "validationErrors": []}}}}}
            return httpx.Response(200, json=body)
        return httpx.Response(200, text="<html>login</html>")

    async with respx.mock:
        respx.post(GRAPHQL_URL).mock(side_effect=respond)
        respx.get(PROJECT_URL).mock(return_value=httpx.Response(200, json={"id": 7, "shared_with_groups": []}))

        exit_code = await run(make_config())

    output = capsys.readouterr().out
    assert exit_code == 1
    assert "Direct user and group membership check: FAILED" in output
    assert "Direct user email membership check: FAILED" in output
    assert "non-JSON body" in output
