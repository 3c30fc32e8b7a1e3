"""GitHub reads and writes through the ``gh`` CLI.

Encapsulates every ``gh`` invocation ghkit makes so the commands only deal
with typed entities and pickable rows.

Design notes:
 - Reads request only the fields the commands display.
 - Empty results are an empty list, never an error; any ``gh`` failure is an
   :class:`~ghkit.errors.ApiUnavailable` and is not retried.
 - ``view_*`` failures that mean "no such item" become
   :class:`~ghkit.errors.NotFoundError`.
 - When a token is configured the PR body read/patch and the login lookup go
   through :class:`~ghkit.github_rest.GitHubRestClient`, falling back to
   ``gh`` on any REST failure.
 - The issue body is passed via a temporary ``--body-file`` that is removed
   as soon as ``gh issue create`` returns.
"""

from __future__ import annotations

import json
import os
import re
import tempfile
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any

from .config import Settings
from .errors import ApiUnavailable, NotFoundError, TransportError
from .github_rest import GitHubAPIError, GitHubRestClient
from .logging import StructuredLogger, get_logger
from .models import Issue, Project, PullRequest, RepoRef, Row
from .shell import CommandRunner

NUMBER_PATTERN = re.compile(r"/issues/(\d+)")
URL_PATTERN = re.compile(r"https://\S+")
ISSUE_FIELDS = "number,title,state,labels,author"
PULL_LIST_FIELDS = "number,title,headRefName,state,url"
PULL_VIEW_FIELDS = "number,title,headRefName,state,url,body"
_NOT_FOUND_MARKERS = ("could not resolve", "not found", "no pull requests found")


@dataclass(frozen=True)
class CreatedIssue:
    url: str
    number: int | None


def issue_rows(issues: Iterable[Issue]) -> list[Row]:
    return [Row(str(i.number), f"#{i.number} {i.title}") for i in issues]


def pull_rows(pulls: Iterable[PullRequest]) -> list[Row]:
    return [
        Row(str(p.number), f"#{p.number} {p.title} ({p.branch}) [{p.state.value.upper()}]")
        for p in pulls
    ]


class GitHubClient:
    def __init__(
        self,
        runner: CommandRunner,
        repo: RepoRef,
        settings: Settings,
        *,
        logger: StructuredLogger | None = None,
        rest: GitHubRestClient | None = None,
    ) -> None:
        self.runner = runner
        self.repo = repo
        self.settings = settings
        self.logger = logger or get_logger()
        self._rest = rest if rest is not None else self._build_rest_client()

    # --- internal helpers -------------------------------------------------
    def _build_rest_client(self) -> GitHubRestClient | None:
        if not self.settings.rest_available or self.settings.github_token is None:
            return None
        return GitHubRestClient(
            token=self.settings.github_token,
            repo=self.repo.full_name,
            base_url=self.settings.api_url,
        )

    def _gh(self, *parts: str, repo_scoped: bool = True) -> str:
        cmd = [self.settings.gh_path, *parts]
        if repo_scoped:
            cmd.extend(["--repo", self.repo.full_name])
        try:
            return self.runner.run(cmd).stdout
        except ApiUnavailable:
            raise
        except TransportError as exc:
            raise ApiUnavailable(
                exc.message, command=exc.command, returncode=exc.returncode, stderr=exc.stderr
            ) from exc

    def _gh_json(self, *parts: str, repo_scoped: bool = True) -> Any:
        out = self._gh(*parts, repo_scoped=repo_scoped)
        if not out.strip():
            return None
        try:
            return json.loads(out)
        except json.JSONDecodeError as exc:
            raise ApiUnavailable(f"gh {parts[0]} {parts[1]} returned invalid JSON") from exc

    def _view(self, kind: str, number: int, fields: str) -> dict[str, Any]:
        try:
            data = self._gh_json(kind, "view", str(number), "--json", fields)
        except ApiUnavailable as exc:
            detail = f"{exc.message} {exc.stderr}".lower()
            if any(marker in detail for marker in _NOT_FOUND_MARKERS):
                label = "PR" if kind == "pr" else "Issue"
                raise NotFoundError(f"{label} #{number} not found") from exc
            raise
        if not isinstance(data, dict):
            raise ApiUnavailable(f"gh {kind} view {number} returned no data")
        return data

    @staticmethod
    def _records(data: Any) -> list[dict[str, Any]]:
        if not isinstance(data, list):
            return []
        return [entry for entry in data if isinstance(entry, dict)]

    # --- reads ------------------------------------------------------------
    def list_issues(self, state: str = "open") -> list[Issue]:
        data = self._gh_json(
            "issue", "list",
            "--state", state,
            "--limit", str(self.settings.list_limit),
            "--json", ISSUE_FIELDS,
        )
        return [Issue.from_json(entry) for entry in self._records(data)]

    def view_issue(self, number: int) -> Issue:
        return Issue.from_json(self._view("issue", number, ISSUE_FIELDS))

    def list_pulls(self, state: str = "all") -> list[PullRequest]:
        data = self._gh_json(
            "pr", "list",
            "--state", state,
            "--limit", str(self.settings.list_limit),
            "--json", PULL_LIST_FIELDS,
        )
        return [PullRequest.from_json(entry) for entry in self._records(data)]

    def view_pull(self, number: int) -> PullRequest:
        return PullRequest.from_json(self._view("pr", number, PULL_VIEW_FIELDS))

    def pull_body(self, number: int) -> str:
        if self._rest is not None:
            try:
                return self._rest.pull_body(number)
            except GitHubAPIError as exc:
                self.logger.warning("REST pull_body failed; falling back to gh", error=str(exc))
        data = self._view("pr", number, "body")
        return data.get("body") or ""

    def list_projects(self) -> list[Project]:
        data = self._gh_json(
            "project", "list",
            "--owner", self.repo.owner,
            "--format", "json",
            repo_scoped=False,
        )
        projects = data.get("projects") if isinstance(data, dict) else None
        return [Project.from_json(entry) for entry in self._records(projects)]

    def list_labels(self) -> list[str]:
        data = self._gh_json(
            "label", "list", "--limit", str(self.settings.list_limit), "--json", "name"
        )
        return [
            entry["name"] for entry in self._records(data) if isinstance(entry.get("name"), str)
        ]

    def current_login(self) -> str | None:
        """Login of the authenticated user, or ``None`` when it can't be resolved."""
        if self._rest is not None:
            try:
                login = self._rest.authenticated_login()
                if login:
                    return login
            except GitHubAPIError as exc:
                self.logger.warning("REST user lookup failed; falling back to gh", error=str(exc))
        try:
            login = self._gh("api", "user", "--jq", ".login", repo_scoped=False).strip()
        except ApiUnavailable as exc:
            self.logger.warning("could not resolve authenticated user", error=exc.message)
            return None
        return login or None

    # --- writes -----------------------------------------------------------
    def create_issue(
        self,
        *,
        title: str,
        body: str,
        labels: Sequence[str],
        assignee: str | None = None,
    ) -> CreatedIssue:
        fd, body_path = tempfile.mkstemp(prefix="ghkit-issue-", suffix=".md")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(body)
                if not body.endswith("\n"):
                    handle.write("\n")
            parts = ["issue", "create", "--title", title, "--label", ",".join(labels)]
            if assignee:
                parts.extend(["--assignee", assignee])
            parts.extend(["--body-file", body_path])
            out = self._gh(*parts)
        finally:
            os.unlink(body_path)
        urls = URL_PATTERN.findall(out)
        url = urls[-1] if urls else out.strip()
        match = NUMBER_PATTERN.search(url)
        number = int(match.group(1)) if match else None
        self.logger.log_mutation("issue_create", url or title, issue_number=number)
        return CreatedIssue(url=url, number=number)

    def delete_issue(self, number: int) -> None:
        self._gh("issue", "delete", str(number), "--yes")
        self.logger.log_mutation("issue_delete", f"{self.repo}#{number}")

    def create_label(self, name: str, color: str) -> None:
        self._gh("label", "create", name, "--color", color)
        self.logger.log_mutation("label_create", name, color=color)

    def add_project_item(self, project: Project, url: str) -> None:
        self._gh(
            "project", "item-add", str(project.number),
            "--owner", self.repo.owner,
            "--url", url,
            repo_scoped=False,
        )
        self.logger.log_mutation("project_item_add", url, project_number=project.number)

    def update_pull_body(self, number: int, body: str) -> None:
        if self._rest is not None:
            try:
                self._rest.update_pull_body(number, body)
                self.logger.log_mutation("pull_body_update", f"{self.repo}#{number}", via="rest")
                return
            except GitHubAPIError as exc:
                self.logger.warning("REST body patch failed; falling back to gh", error=str(exc))
        self._gh(
            "api", f"repos/{self.repo.full_name}/pulls/{number}",
            "--method", "PATCH",
            "-f", f"body={body}",
            repo_scoped=False,
        )
        self.logger.log_mutation("pull_body_update", f"{self.repo}#{number}", via="gh")


__all__ = ["CreatedIssue", "GitHubClient", "issue_rows", "pull_rows"]
