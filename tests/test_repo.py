from __future__ import annotations

import pytest
from conftest import FakeRunner

from ghkit.errors import NoRemote, NotARepository, UnparsableRemote
from ghkit.models import RepoRef
from ghkit.repo import parse_remote_url, resolve_repo


@pytest.mark.parametrize(
    "url",
    [
        "https://github.com/acme/widgets.git",
        "https://github.com/acme/widgets",
        "git@github.com:acme/widgets.git",
        "ssh://git@github.com/acme/widgets.git",
        "https://github.com/acme/widgets/",
    ],
)
def test_parse_remote_url_forms(url: str) -> None:
    assert parse_remote_url(url) == RepoRef("acme", "widgets")


def test_parse_remote_url_keeps_dots_in_repo_name() -> None:
    assert parse_remote_url("git@github.com:acme/my.site.git").name == "my.site"


def test_parse_remote_url_rejects_other_hosts() -> None:
    with pytest.raises(UnparsableRemote) as exc:
        parse_remote_url("https://gitlab.com/acme/widgets.git")
    assert exc.value.hint == "Remote URL: https://gitlab.com/acme/widgets.git"


def test_resolve_repo_from_origin(runner: FakeRunner) -> None:
    repo = resolve_repo(runner)
    assert repo.full_name == "acme/widgets"
    assert ["git", "remote", "get-url", "origin"] in runner.calls


def test_resolve_repo_outside_checkout() -> None:
    runner = FakeRunner(remote=None).on("git", "rev-parse", returncode=128, stderr="fatal")
    with pytest.raises(NotARepository):
        resolve_repo(runner)


def test_resolve_repo_without_origin() -> None:
    runner = FakeRunner(remote=None)
    runner.on("git", "rev-parse", stdout="true\n")
    runner.on("git", "remote", "get-url", returncode=2, stderr="error: No such remote")
    with pytest.raises(NoRemote) as exc:
        resolve_repo(runner)
    assert "origin" in exc.value.message


def test_resolve_repo_uses_configured_git() -> None:
    runner = FakeRunner(remote=None)
    runner.on("/opt/git", "rev-parse", stdout="true\n")
    runner.on("/opt/git", "remote", "get-url", stdout="https://github.com/o/r\n")
    assert resolve_repo(runner, git="/opt/git") == RepoRef("o", "r")
