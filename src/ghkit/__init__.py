"""ghkit - interactive helpers around the GitHub CLI.

Commands (console scripts in brackets):

- ``ghkit create`` [``gh-issue``, ``ghi``]: create an issue with label and
  project pickers
- ``ghkit delete`` [``gh-issue-delete``, ``ghi-delete``]: delete an issue
- ``ghkit link`` [``ghpr-link``, ``gh-pr-link``]: add a PR to a project and
  optionally reference an issue from its body

Requires ``gh`` (authenticated with ``gh auth login``) and ``git``; ``fzf`` is
used for interactive selection when available.
"""

from __future__ import annotations

from .cli import main
from .errors import GhkitError
from .models import Issue, IssueLink, Project, PullRequest, RepoRef

__version__ = "0.2.0"

__all__ = [
    "GhkitError",
    "Issue",
    "IssueLink",
    "Project",
    "PullRequest",
    "RepoRef",
    "__version__",
    "main",
]
