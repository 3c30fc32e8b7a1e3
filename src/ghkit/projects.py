"""Project selection shared by ``issue create`` and ``pr link``.

Zero projects selects nothing, one is taken automatically, several go to the
picker with the project whose title contains the repository name (case
insensitive) listed first as the default.
"""

from __future__ import annotations

from collections.abc import Sequence

from .errors import InputError
from .models import Project, RepoRef, Row
from .picker import Picker, PickerOptions, pick_until_decided
from .prompts import Prompter
from .ux import print_listing, print_plain

SKIP_KEY = "0"
SKIP_DISPLAY = "Skip (Don't link to a Project)"
DEFAULT_SUFFIX = " (Default)"


def default_project(projects: Sequence[Project], repo_name: str) -> Project | None:
    needle = repo_name.lower()
    for project in projects:
        if needle in project.title.lower():
            return project
    return None


def project_rows(
    projects: Sequence[Project], default: Project | None, *, allow_skip: bool
) -> list[Row]:
    rows: list[Row] = []
    if default is not None:
        rows.append(Row(str(default.number), f"{default.title}{DEFAULT_SUFFIX}"))
    if allow_skip:
        rows.append(Row(SKIP_KEY, SKIP_DISPLAY))
    rows.extend(Row(str(p.number), p.title) for p in projects if p != default)
    return rows


def _prompt_for_number(
    projects: Sequence[Project], prompter: Prompter, *, allow_skip: bool
) -> Project | None:
    print_plain("Available projects:")
    print_listing(f"{p.number}: {p.title}" for p in projects)
    question = "Enter project number (or Enter to skip)" if allow_skip else "Enter project number"
    answer = prompter.ask(question)
    if not answer:
        return None
    for project in projects:
        if str(project.number) == answer:
            return project
    raise InputError(f"Unknown project number: {answer}")


def choose_project(
    projects: Sequence[Project],
    repo: RepoRef,
    picker: Picker,
    prompter: Prompter,
    *,
    allow_skip: bool,
) -> Project | None:
    if not projects:
        return None
    if len(projects) == 1:
        return projects[0]
    if not picker.interactive:
        return _prompt_for_number(projects, prompter, allow_skip=allow_skip)
    rows = project_rows(projects, default_project(projects, repo.name), allow_skip=allow_skip)
    selection = pick_until_decided(
        picker, rows, PickerOptions(prompt="Project: ", sort=False), prompter
    )
    chosen = selection.first
    if chosen is None or chosen.key == SKIP_KEY:
        return None
    return next(p for p in projects if str(p.number) == chosen.key)


__all__ = ["SKIP_KEY", "choose_project", "default_project", "project_rows"]
