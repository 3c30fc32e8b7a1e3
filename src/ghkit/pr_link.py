"""``ghpr-link``: add a pull request to a project and optionally link an issue.

Both execution steps are best-effort: a failed project link is reported and
the body annotation is still attempted, and the command exits ``0`` once it
has run.
"""

from __future__ import annotations

from dataclasses import dataclass

from .errors import InputError, NotFoundError, TransportError, UserAbort
from .github import GitHubClient, issue_rows, pull_rows
from .issue_delete import parse_number
from .models import NO_LINK, IssueLink, LinkKind, Project, PullRequest, Row
from .picker import PickerOptions, Selected, pick_until_decided
from .projects import choose_project
from .runtime import AppContext
from .ux import (
    print_banner,
    print_error,
    print_field,
    print_plain,
    print_step,
    print_success,
    print_warning,
)

LINK_ROWS = [
    Row(LinkKind.NONE.value, "Skip - Don't link to an issue"),
    Row(LinkKind.CLOSES.value, "Closes #X - Auto-close issue when PR merges"),
    Row(LinkKind.RELATES.value, "Relates to #X - Reference only (no auto-close)"),
]


@dataclass
class LinkOptions:
    number: str | None = None
    dry_run: bool = False


@dataclass
class LinkPlan:
    pull: PullRequest
    project: Project
    link: IssueLink = NO_LINK


@dataclass
class LinkOutcome:
    project_linked: bool
    body_updated: bool | None = None


def append_trailer(body: str, trailer: str) -> str:
    """Append ``trailer`` as a new paragraph, or use it alone for a blank body."""
    current = (body or "").rstrip("\n")
    if not current.strip():
        return trailer
    return f"{current}\n\n{trailer}"


def select_pull(ctx: AppContext, client: GitHubClient) -> str | None:
    print_step("Fetching PRs...")
    pulls = client.list_pulls(state="all")
    if not pulls:
        return None
    if ctx.picker.interactive:
        print_step("Select PR to link:")
    selection = pick_until_decided(
        ctx.picker, pull_rows(pulls), PickerOptions(prompt="PR: "), ctx.prompter
    )
    chosen = selection.first
    if chosen is None:
        raise UserAbort()
    return chosen.key


def select_issue_link(ctx: AppContext, client: GitHubClient) -> IssueLink:
    """Ask for ``skip`` / ``closes`` / ``relates`` and the issue to reference.

    Esc in the issue list means "skip" rather than abort.
    """
    if not ctx.picker.interactive:
        return NO_LINK
    print_step("Link to an issue? (optional)")
    choice = pick_until_decided(
        ctx.picker,
        LINK_ROWS,
        PickerOptions(prompt="Issue link: ", sort=False, height="20%"),
        ctx.prompter,
    ).first
    if choice is None or choice.key == LinkKind.NONE.value:
        return NO_LINK
    kind = LinkKind(choice.key)

    print_step("Fetching issues...")
    issues = client.list_issues(state="open")
    if not issues:
        print_warning("No open issues found. Skipping issue link.")
        return NO_LINK
    print_step("Select issue:")
    result = ctx.picker.pick(
        issue_rows(issues), PickerOptions(prompt="Issue: ", header="Enter=select | Esc=skip")
    )
    if not isinstance(result, Selected) or result.first is None:
        print_warning("Skipping issue link.")
        return NO_LINK
    print_field("Issue", result.first.display)
    return IssueLink(kind, int(result.first.key))


def collect_plan(ctx: AppContext, client: GitHubClient, opts: LinkOptions) -> LinkPlan | None:
    """Build the plan; ``None`` when the repository has no PRs at all."""
    raw = opts.number
    if raw is None:
        raw = select_pull(ctx, client)
        if raw is None:
            return None
    number = parse_number(raw, "PR")

    print_step(f"Fetching PR #{number}...")
    pull = client.view_pull(number)
    print_field("PR", f"#{pull.number} - {pull.title}")
    print_field("Branch", pull.branch)
    print_field("State", pull.state.value.upper())

    print_step("Finding projects...")
    projects = client.list_projects()
    if not projects:
        raise NotFoundError(f"No projects found for {client.repo.owner}")
    if len(projects) > 1 and ctx.picker.interactive:
        print_step("Select project:")
    project = choose_project(projects, client.repo, ctx.picker, ctx.prompter, allow_skip=False)
    if project is None:
        raise InputError("No project selected")
    print_field("Project", project.title)

    return LinkPlan(pull=pull, project=project, link=select_issue_link(ctx, client))


def render_dry_run(plan: LinkPlan) -> None:
    print_banner("DRY RUN")
    print_plain(f"Would link PR #{plan.pull.number} to project #{plan.project.number}")
    if plan.link.trailer:
        print_plain(f"Would add '{plan.link.trailer}' to PR body")


def execute_plan(ctx: AppContext, client: GitHubClient, plan: LinkPlan) -> LinkOutcome:
    print_step("Linking PR to project...")
    try:
        client.add_project_item(plan.project, plan.pull.url)
        print_success(f"Linked PR #{plan.pull.number} to project")
        outcome = LinkOutcome(project_linked=True)
    except TransportError as exc:
        ctx.logger.warning("project item-add failed", pr=plan.pull.number, error=exc.message)
        print_error("Failed to link PR to project")
        outcome = LinkOutcome(project_linked=False)

    trailer = plan.link.trailer
    if trailer is None:
        return outcome
    print_step("Linking to issue...")
    try:
        body = client.pull_body(plan.pull.number)
        client.update_pull_body(plan.pull.number, append_trailer(body, trailer))
        print_success(f"Added '{trailer}' to PR body")
        outcome.body_updated = True
    except (TransportError, NotFoundError) as exc:
        ctx.logger.warning("PR body update failed", pr=plan.pull.number, error=exc.message)
        print_error("Failed to update PR body")
        outcome.body_updated = False
    return outcome


def run_link(ctx: AppContext, opts: LinkOptions) -> int:
    repo = ctx.resolve_repo()
    client = ctx.client(repo)
    plan = collect_plan(ctx, client, opts)
    if plan is None:
        print_warning("No PRs found.")
        return 0

    if opts.dry_run or ctx.settings.dry_run_default:
        render_dry_run(plan)
        ctx.logger.log_mutation("pr_link", f"{repo}#{plan.pull.number}", dry_run=True)
        return 0

    execute_plan(ctx, client, plan)
    return 0


__all__ = [
    "LinkOptions",
    "LinkOutcome",
    "LinkPlan",
    "append_trailer",
    "collect_plan",
    "execute_plan",
    "render_dry_run",
    "run_link",
    "select_issue_link",
    "select_pull",
]
