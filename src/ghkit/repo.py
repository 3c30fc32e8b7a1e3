"""Resolve ``owner/repo`` from the local checkout's ``origin`` remote."""

from __future__ import annotations

import re

from .errors import NoRemote, NotARepository, UnparsableRemote
from .models import RepoRef
from .shell import CommandRunner

REMOTE_PATTERN = re.compile(r"github\.com[:/]([^/]+)/([^/]+?)(\.git)?/?$")


def parse_remote_url(url: str) -> RepoRef:
    """Extract the repository from an https or ssh GitHub remote URL."""
    match = REMOTE_PATTERN.search(url.strip())
    if not match:
        raise UnparsableRemote(url.strip())
    return RepoRef(owner=match.group(1), name=match.group(2))


def resolve_repo(runner: CommandRunner, git: str = "git", remote: str = "origin") -> RepoRef:
    inside = runner.run([git, "rev-parse", "--is-inside-work-tree"], check=False)
    if not inside.ok or inside.stdout.strip() != "true":
        raise NotARepository()
    result = runner.run([git, "remote", "get-url", remote], check=False)
    url = result.stdout.strip()
    if not result.ok or not url:
        raise NoRemote(remote)
    return parse_remote_url(url)


__all__ = ["REMOTE_PATTERN", "parse_remote_url", "resolve_repo"]
