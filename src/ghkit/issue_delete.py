"""``gh-issue-delete``: delete an issue by number or interactive pick."""

from __future__ import annotations

import re
from dataclasses import dataclass

from .errors import InputError, UserAbort
from .github import GitHubClient, issue_rows
from .models import Issue
from .picker import PickerOptions, pick_until_decided
from .runtime import AppContext
from .ux import print_banner, print_field, print_plain, print_step, print_success, print_warning

NUMBER_RE = re.compile(r"^[0-9]+$")


@dataclass
class DeleteOptions:
    number: str | None = None
    dry_run: bool = False
    yes: bool = False


def parse_number(raw: str, kind: str = "issue") -> int:
    value = raw.strip()
    if not NUMBER_RE.match(value) or int(value) <= 0:
        raise InputError(f"Invalid {kind} number: {raw}")
    return int(value)


def select_issue(ctx: AppContext, client: GitHubClient) -> str | None:
    """Pick an open issue; ``None`` when there are none."""
    print_step("Fetching issues...")
    issues = client.list_issues(state="open")
    if not issues:
        return None
    if ctx.picker.interactive:
        print_step("Select issue to delete:")
    selection = pick_until_decided(
        ctx.picker,
        issue_rows(issues),
        PickerOptions(prompt="Delete issue: "),
        ctx.prompter,
    )
    chosen = selection.first
    if chosen is None:
        raise UserAbort()
    return chosen.key


def show_issue(issue: Issue) -> None:
    print_plain()
    print_field("Issue", f"#{issue.number} - {issue.title}")
    print_field("State", issue.state.value.upper())
    print_field("Author", issue.author)
    print_field("Labels", ", ".join(sorted(issue.labels)) or "none")
    print_plain()


def run_delete(ctx: AppContext, opts: DeleteOptions) -> int:
    repo = ctx.resolve_repo()
    client = ctx.client(repo)

    raw = opts.number
    if raw is None:
        raw = select_issue(ctx, client)
        if raw is None:
            print_warning("No open issues found.")
            return 0
    number = parse_number(raw)

    print_step(f"Fetching issue #{number}...")
    issue = client.view_issue(number)
    show_issue(issue)

    if opts.dry_run or ctx.settings.dry_run_default:
        print_banner("DRY RUN")
        print_plain(f"Would delete issue #{issue.number}: {issue.title}")
        ctx.logger.log_mutation("issue_delete", f"{repo}#{number}", dry_run=True)
        return 0

    if not opts.yes and not ctx.prompter.confirm("Delete this issue permanently?", danger=True):
        raise UserAbort()

    client.delete_issue(number)
    print_success(f"Deleted issue #{number}")
    return 0


__all__ = ["DeleteOptions", "parse_number", "run_delete", "select_issue", "show_issue"]
