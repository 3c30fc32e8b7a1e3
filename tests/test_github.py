from __future__ import annotations

import json
from pathlib import Path

import pytest
from conftest import FakeRunner
from test_github_rest_client import _DummyResponse, _DummySession

from ghkit.config import Settings
from ghkit.errors import ApiUnavailable, NotFoundError
from ghkit.github import ISSUE_FIELDS, GitHubClient, issue_rows, pull_rows
from ghkit.github_rest import GitHubRestClient
from ghkit.models import Issue, IssueState, Project, PullState, RepoRef, Row

REPO = RepoRef("acme", "widgets")
ISSUE = {
    "number": 42,
    "title": "Fix crash",
    "state": "OPEN",
    "labels": [{"name": "bug"}, {"name": "p1"}],
    "author": {"login": "octo"},
}
PULL = {
    "number": 7,
    "title": "Add feature",
    "headRefName": "feat/x",
    "state": "MERGED",
    "url": "https://github.com/acme/widgets/pull/7",
    "body": "Original body",
}


@pytest.fixture
def client(runner: FakeRunner, settings: Settings, quiet_logger) -> GitHubClient:
    return GitHubClient(runner, REPO, settings, logger=quiet_logger)


def test_list_issues_command_and_parsing(client: GitHubClient, runner: FakeRunner):
    runner.on_json("gh", "issue", "list", payload=[ISSUE])

    issues = client.list_issues()

    assert runner.calls[-1] == [
        "gh", "issue", "list", "--state", "open", "--limit", "100",
        "--json", ISSUE_FIELDS, "--repo", "acme/widgets",
    ]
    issue = issues[0]
    assert issue.number == 42
    assert issue.state is IssueState.OPEN
    assert issue.labels == frozenset({"bug", "p1"})
    assert issue.author == "octo"


def test_empty_listing_is_not_an_error(client: GitHubClient, runner: FakeRunner):
    runner.on("gh", "pr", "list", stdout="")
    assert client.list_pulls() == []
    runner.on("gh", "issue", "list", stdout="[]\n")
    assert client.list_issues() == []


def test_listing_failure_is_api_unavailable(client: GitHubClient, runner: FakeRunner):
    runner.on("gh", "label", "list", returncode=1, stderr="HTTP 502: Bad Gateway")
    with pytest.raises(ApiUnavailable):
        client.list_labels()


def test_view_missing_issue_is_not_found(client: GitHubClient, runner: FakeRunner):
    runner.on(
        "gh", "issue", "view", returncode=1,
        stderr="GraphQL: Could not resolve to an issue or pull request with the number of 99.",
    )
    with pytest.raises(NotFoundError) as exc:
        client.view_issue(99)
    assert exc.value.message == "Issue #99 not found"


def test_view_pull_other_failure_stays_transport(client: GitHubClient, runner: FakeRunner):
    runner.on("gh", "pr", "view", returncode=1, stderr="HTTP 401: Bad credentials")
    with pytest.raises(ApiUnavailable):
        client.view_pull(7)


def test_view_pull_parses_state(client: GitHubClient, runner: FakeRunner):
    runner.on_json("gh", "pr", "view", payload=PULL)
    pull = client.view_pull(7)
    assert pull.state is PullState.MERGED
    assert pull.branch == "feat/x"
    assert pull_rows([pull]) == [Row("7", "#7 Add feature (feat/x) [MERGED]")]


def test_issue_rows():
    assert issue_rows([Issue(42, "Fix crash")]) == [Row("42", "#42 Fix crash")]


def test_create_issue_uses_body_file_and_parses_url(client: GitHubClient, runner: FakeRunner):
    runner.on(
        "gh", "issue", "create",
        stdout="\nCreating issue in acme/widgets\n\nhttps://github.com/acme/widgets/issues/12\n",
    )

    created = client.create_issue(
        title="Fix bug", body="Details", labels=["bug", "docs"], assignee="octo"
    )

    assert created.url == "https://github.com/acme/widgets/issues/12"
    assert created.number == 12
    argv = runner.called("gh", "issue", "create")[0]
    assert argv[argv.index("--title") + 1] == "Fix bug"
    assert argv[argv.index("--label") + 1] == "bug,docs"
    assert argv[argv.index("--assignee") + 1] == "octo"
    body_path = argv[argv.index("--body-file") + 1]
    assert runner.body_files[body_path] == "Details\n"
    assert not Path(body_path).exists()


def test_create_issue_failure_still_removes_body_file(client: GitHubClient, runner: FakeRunner):
    runner.on("gh", "issue", "create", returncode=1, stderr="label not found")
    with pytest.raises(ApiUnavailable):
        client.create_issue(title="T", body="B", labels=["nope"])
    argv = runner.called("gh", "issue", "create")[0]
    assert not Path(argv[argv.index("--body-file") + 1]).exists()


def test_delete_issue(client: GitHubClient, runner: FakeRunner):
    client.delete_issue(42)
    assert runner.calls[-1] == ["gh", "issue", "delete", "42", "--yes", "--repo", "acme/widgets"]


def test_projects_are_owner_scoped(client: GitHubClient, runner: FakeRunner):
    runner.on_json(
        "gh", "project", "list",
        payload={"projects": [{"number": 3, "title": "Widgets"}], "totalCount": 1},
    )
    assert client.list_projects() == [Project(3, "Widgets")]
    assert runner.calls[-1] == [
        "gh", "project", "list", "--owner", "acme", "--format", "json",
    ]


def test_add_project_item(client: GitHubClient, runner: FakeRunner):
    client.add_project_item(Project(3, "Widgets"), "https://github.com/acme/widgets/pull/7")
    assert runner.calls[-1] == [
        "gh", "project", "item-add", "3", "--owner", "acme",
        "--url", "https://github.com/acme/widgets/pull/7",
    ]


def test_create_label(client: GitHubClient, runner: FakeRunner):
    client.create_label("triage", "ff6600")
    assert runner.calls[-1][:6] == ["gh", "label", "create", "triage", "--color", "ff6600"]


def test_current_login_falls_back_to_none(client: GitHubClient, runner: FakeRunner):
    runner.on("gh", "api", "user", returncode=1, stderr="not logged in")
    assert client.current_login() is None


def test_current_login_via_gh(client: GitHubClient, runner: FakeRunner):
    runner.on("gh", "api", "user", stdout="octo\n")
    assert client.current_login() == "octo"


def test_update_pull_body_via_gh(client: GitHubClient, runner: FakeRunner):
    client.update_pull_body(7, "Body\n\nCloses #3")
    assert runner.calls[-1] == [
        "gh", "api", "repos/acme/widgets/pulls/7", "--method", "PATCH",
        "-f", "body=Body\n\nCloses #3",
    ]


def _rest_client(runner: FakeRunner, settings: Settings, logger, session: _DummySession):
    rest = GitHubRestClient(token="tkn", repo="acme/widgets", session=session)  # type: ignore[arg-type]
    return GitHubClient(runner, REPO, settings, logger=logger, rest=rest)


def test_rest_body_round_trip_skips_gh(runner: FakeRunner, settings: Settings, quiet_logger):
    session = _DummySession(
        [_DummyResponse(200, {"body": "From REST"}), _DummyResponse(200, {"number": 7})]
    )
    client = _rest_client(runner, settings, quiet_logger, session)

    assert client.pull_body(7) == "From REST"
    client.update_pull_body(7, "From REST\n\nRelates to #3")

    assert runner.called("gh") == []
    method, url, kwargs = session.request_log[1]
    assert method == "PATCH"
    assert url.endswith("/repos/acme/widgets/pulls/7")
    assert kwargs["json"] == {"body": "From REST\n\nRelates to #3"}


def test_rest_failure_falls_back_to_gh(runner: FakeRunner, settings: Settings, quiet_logger):
    session = _DummySession([_DummyResponse(500, {"message": "boom"})])
    client = _rest_client(runner, settings, quiet_logger, session)
    runner.on("gh", "pr", "view", stdout=json.dumps({"body": "From gh"}))

    assert client.pull_body(7) == "From gh"
    assert runner.called("gh", "pr", "view")[0][-4:] == ["--json", "body", "--repo", "acme/widgets"]
