"""Transient GitHub entities read per invocation."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class IssueState(str, Enum):
    OPEN = "open"
    CLOSED = "closed"


class PullState(str, Enum):
    OPEN = "open"
    CLOSED = "closed"
    MERGED = "merged"


class LinkKind(str, Enum):
    NONE = "skip"
    CLOSES = "closes"
    RELATES = "relates"


@dataclass(frozen=True)
class RepoRef:
    owner: str
    name: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    def __str__(self) -> str:
        return self.full_name


def _label_names(raw: Any) -> frozenset[str]:
    names: set[str] = set()
    if isinstance(raw, list):
        for lbl in raw:
            if isinstance(lbl, dict) and isinstance(lbl.get("name"), str):
                names.add(lbl["name"])
            elif isinstance(lbl, str):
                names.add(lbl)
    return frozenset(names)


@dataclass(frozen=True)
class Issue:
    number: int
    title: str
    state: IssueState = IssueState.OPEN
    labels: frozenset[str] = field(default_factory=frozenset)
    author: str = ""

    @classmethod
    def from_json(cls, entry: dict[str, Any]) -> Issue:
        author = entry.get("author")
        return cls(
            number=int(entry["number"]),
            title=str(entry.get("title", "")),
            state=IssueState(str(entry.get("state", "open")).lower()),
            labels=_label_names(entry.get("labels")),
            author=author.get("login", "") if isinstance(author, dict) else "",
        )


@dataclass(frozen=True)
class PullRequest:
    number: int
    title: str
    branch: str = ""
    state: PullState = PullState.OPEN
    url: str = ""
    body: str = ""

    @classmethod
    def from_json(cls, entry: dict[str, Any]) -> PullRequest:
        return cls(
            number=int(entry["number"]),
            title=str(entry.get("title", "")),
            branch=str(entry.get("headRefName", "")),
            state=PullState(str(entry.get("state", "open")).lower()),
            url=str(entry.get("url", "")),
            body=entry.get("body") or "",
        )


@dataclass(frozen=True)
class Project:
    number: int
    title: str

    @classmethod
    def from_json(cls, entry: dict[str, Any]) -> Project:
        return cls(number=int(entry["number"]), title=str(entry.get("title", "")))


@dataclass(frozen=True)
class Row:
    """One pickable line: ``key`` identifies it, ``display`` is what the user sees."""

    key: str
    display: str


@dataclass(frozen=True)
class IssueLink:
    kind: LinkKind = LinkKind.NONE
    issue_number: int | None = None

    @property
    def trailer(self) -> str | None:
        if self.kind is LinkKind.NONE or self.issue_number is None:
            return None
        if self.kind is LinkKind.CLOSES:
            return f"Closes #{self.issue_number}"
        return f"Relates to #{self.issue_number}"


NO_LINK = IssueLink()


__all__ = [
    "Issue",
    "IssueLink",
    "IssueState",
    "LinkKind",
    "NO_LINK",
    "Project",
    "PullRequest",
    "PullState",
    "RepoRef",
    "Row",
]
