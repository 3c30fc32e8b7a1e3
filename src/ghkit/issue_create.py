"""``gh-issue``: create an issue with label and project pickers.

Collecting builds an :class:`IssueDraft`; the dry-run gate either renders it or
hands it to :func:`execute_draft`. Inline label creation (Ctrl-N in the label
picker) is recorded on the draft and only performed during execution, so a dry
run never mutates anything.
"""

from __future__ import annotations

import webbrowser
from collections.abc import Sequence
from dataclasses import dataclass

from .config import Settings
from .errors import ApiUnavailable, InputError
from .github import CreatedIssue, GitHubClient
from .models import Project, RepoRef, Row
from .picker import Picker, PickerOptions, pick_until_decided
from .projects import choose_project
from .prompts import Prompter
from .runtime import AppContext
from .ux import (
    print_banner,
    print_field,
    print_plain,
    print_step,
    print_success,
    print_warning,
)

NEW_LABEL_KEY = "ctrl-n"
LABEL_HEADER = "Tab=select │ Enter=confirm │ Ctrl-N=new label │ Esc=abort"
ABORT_QUESTION = "Abort creating this issue?"
ERRORS_HEADING = "**Error/Logs:**"


@dataclass
class CreateOptions:
    title: str | None = None
    description: str | None = None
    errors: str | None = None
    positional: Sequence[str] = ()
    dry_run: bool = False
    open_after: bool = False


@dataclass(frozen=True)
class NewLabel:
    name: str
    color: str


@dataclass(frozen=True)
class LabelChoice:
    labels: tuple[str, ...]
    # created during execution, never before the dry-run gate
    pending: NewLabel | None = None


@dataclass
class IssueDraft:
    repo: RepoRef
    title: str
    body: str
    labels: LabelChoice
    project: Project | None = None
    assignee: str | None = None


@dataclass
class CreateOutcome:
    issue: CreatedIssue
    project_added: bool | None = None
    label_created: bool | None = None


def _first_non_empty(*values: str | None) -> str:
    for value in values:
        if value and value.strip():
            return value.strip()
    return ""


def resolve_title(opts: CreateOptions, prompter: Prompter) -> str:
    positional = opts.positional[0] if len(opts.positional) >= 1 else None
    title = _first_non_empty(opts.title, positional)
    if not title:
        title = prompter.ask("Title")
    if not title:
        raise InputError("Title is required")
    return title


def resolve_description(opts: CreateOptions, prompter: Prompter) -> str:
    positional = opts.positional[1] if len(opts.positional) >= 2 else None
    description = _first_non_empty(opts.description, positional)
    if not description:
        description = prompter.ask("Description (Enter to skip)")
    return description


def build_body(description: str, errors: str | None, placeholder: str) -> str:
    body = description or placeholder
    if errors and errors.strip():
        body += f"\n\n---\n{ERRORS_HEADING}\n```\n{errors.rstrip()}\n```"
    return body


def label_rows(available: Sequence[str], default_label: str) -> list[Row]:
    rows = [Row(default_label, f"{default_label} (Default)")]
    rows.extend(Row(name, name) for name in available if name != default_label)
    return rows


def choose_labels(
    client: GitHubClient, picker: Picker, prompter: Prompter, settings: Settings
) -> LabelChoice:
    default = LabelChoice((settings.default_label,))
    if not picker.interactive:
        return default
    print_step("Labels (Tab=select, Enter=confirm):")
    rows = label_rows(client.list_labels(), settings.default_label)
    options = PickerOptions(
        prompt="Labels: ",
        header=LABEL_HEADER,
        multi=True,
        expect=(NEW_LABEL_KEY,),
        sort=False,
    )
    selection = pick_until_decided(picker, rows, options, prompter, ABORT_QUESTION)
    if selection.key == NEW_LABEL_KEY:
        name = prompter.ask("New label name")
        if not name:
            return default
        color = prompter.ask("Label color (hex without #, e.g. 'ff6600')").lstrip("#")
        return LabelChoice((name,), NewLabel(name, color or settings.new_label_color))
    if not selection.rows:
        return default
    return LabelChoice(tuple(row.key for row in selection.rows))


def _choose_project_for(
    ctx: AppContext, client: GitHubClient, repo: RepoRef
) -> Project | None:
    print_step("Finding linked projects...")
    try:
        projects = client.list_projects()
    except ApiUnavailable as exc:
        ctx.logger.warning("project listing failed", error=exc.message)
        print_warning("Warning: Could not list projects. Issue will be created without a project.")
        return None
    if not projects:
        print_warning("No projects found. Issue will be created without a project.")
        return None
    if len(projects) > 1 and ctx.picker.interactive:
        print_step("Select project:")
    project = choose_project(projects, repo, ctx.picker, ctx.prompter, allow_skip=True)
    print_field("Project", project.title if project else "(none)")
    return project


def collect_draft(ctx: AppContext, client: GitHubClient, opts: CreateOptions) -> IssueDraft:
    title = resolve_title(opts, ctx.prompter)
    description = resolve_description(opts, ctx.prompter)
    body = build_body(description, opts.errors, ctx.settings.empty_description)
    assignee = client.current_login()
    labels = choose_labels(client, ctx.picker, ctx.prompter, ctx.settings)
    print_field("Labels", ",".join(labels.labels))
    project = _choose_project_for(ctx, client, client.repo)
    return IssueDraft(
        repo=client.repo,
        title=title,
        body=body,
        labels=labels,
        project=project,
        assignee=assignee,
    )


def render_dry_run(draft: IssueDraft) -> None:
    print_banner("DRY RUN - Would create:")
    print_field("Repository", draft.repo.full_name)
    print_field("Title", draft.title)
    print_field("Labels", ",".join(draft.labels.labels))
    if draft.labels.pending is not None:
        pending = draft.labels.pending
        print_field("New label", f"{pending.name} (#{pending.color}, to be created)")
    if draft.project is not None:
        print_field("Project", f"#{draft.project.number}")
    if draft.assignee:
        print_field("Assignee", draft.assignee)
    print_field("Body", "")
    print_plain(draft.body)


def execute_draft(ctx: AppContext, client: GitHubClient, draft: IssueDraft) -> CreateOutcome:
    label_created: bool | None = None
    pending = draft.labels.pending
    if pending is not None:
        try:
            client.create_label(pending.name, pending.color)
            label_created = True
        except ApiUnavailable as exc:
            # usually "already exists"; the issue can still use the label
            ctx.logger.warning("label creation failed", label=pending.name, error=exc.message)
            print_warning(f"Warning: Could not create label '{pending.name}'")
            label_created = False

    print_step("Creating issue...")
    created = client.create_issue(
        title=draft.title,
        body=draft.body,
        labels=draft.labels.labels,
        assignee=draft.assignee,
    )
    print_success(f"Issue created: {created.url}")

    project_added: bool | None = None
    if draft.project is not None and created.url:
        print_step("Adding to project...")
        try:
            client.add_project_item(draft.project, created.url)
            print_success("Added to project")
            project_added = True
        except ApiUnavailable as exc:
            ctx.logger.warning("project item-add failed", url=created.url, error=exc.message)
            print_warning("Warning: Could not add to project")
            project_added = False
    return CreateOutcome(issue=created, project_added=project_added, label_created=label_created)


def run_create(ctx: AppContext, opts: CreateOptions) -> int:
    repo = ctx.resolve_repo()
    client = ctx.client(repo)
    draft = collect_draft(ctx, client, opts)

    if opts.dry_run or ctx.settings.dry_run_default:
        render_dry_run(draft)
        ctx.logger.log_mutation("issue_create", draft.title, dry_run=True)
        return 0

    outcome = execute_draft(ctx, client, draft)
    if opts.open_after and outcome.issue.url:
        if not webbrowser.open(outcome.issue.url):
            print_plain(f"Open: {outcome.issue.url}")
    print_success("Done!")
    return 0


__all__ = [
    "CreateOptions",
    "CreateOutcome",
    "IssueDraft",
    "LabelChoice",
    "NewLabel",
    "build_body",
    "choose_labels",
    "collect_draft",
    "execute_draft",
    "label_rows",
    "render_dry_run",
    "resolve_description",
    "resolve_title",
    "run_create",
]
