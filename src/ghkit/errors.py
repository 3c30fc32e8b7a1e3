"""Error taxonomy & redaction for ghkit.

Every failure a command can report to the user derives from
:class:`GhkitError`. The runtime maps them to a printed message and exit
code ``1``; anything else is a bug and propagates.

Categories:
- ``environment``: not a repository, no ``origin`` remote, unparsable remote,
  missing external tool, invalid settings
- ``input``: invalid identifiers, missing title, nothing selected
- ``not_found``: an identifier that does not resolve to an issue/PR
- ``transport``: an external ``gh`` / REST call failed
- ``abort``: explicit user cancellation (not an error, but terminal)
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

_SENSITIVE_PATTERNS: list[re.Pattern[str]] = [
    re.compile(r"ghp_[A-Za-z0-9]{20,40}"),  # classic tokens
    re.compile(r"gh[ousr]_[A-Za-z0-9]{20,}"),  # oauth / app / refresh tokens
    re.compile(r"github_pat_\w{20,}"),  # fine-grained tokens
]

_REDACTION_PLACEHOLDER = "<redacted>"


def redact(text: str) -> str:
    """Replace GitHub token-looking substrings with a placeholder."""
    if not text:
        return text
    redacted = text
    for pat in _SENSITIVE_PATTERNS:
        redacted = pat.sub(_REDACTION_PLACEHOLDER, redacted)
    return redacted


class GhkitError(RuntimeError):
    """Base class for failures reported to the user."""

    category = "generic"
    exit_code = 1

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.hint = hint


class ToolEnvironmentError(GhkitError):
    category = "environment"


class NotARepository(ToolEnvironmentError):
    def __init__(self) -> None:
        super().__init__("Not inside a git repository")


class NoRemote(ToolEnvironmentError):
    def __init__(self, remote: str = "origin") -> None:
        super().__init__(f"No git remote '{remote}' found")
        self.remote = remote


class UnparsableRemote(ToolEnvironmentError):
    def __init__(self, url: str) -> None:
        super().__init__(
            "Could not parse GitHub repo from remote URL", hint=f"Remote URL: {url}"
        )
        self.url = url


class MissingTool(ToolEnvironmentError):
    def __init__(self, tool: str, hint: str | None = None) -> None:
        super().__init__(f"Required tool not found: {tool}", hint=hint)
        self.tool = tool


class InputError(GhkitError):
    category = "input"


class NotFoundError(GhkitError):
    category = "not_found"


class TransportError(GhkitError):
    """An external call failed (non-zero exit, HTTP error, unreachable host)."""

    category = "transport"

    def __init__(
        self,
        message: str,
        *,
        command: Sequence[str] | None = None,
        returncode: int | None = None,
        stderr: str = "",
        hint: str | None = None,
    ) -> None:
        super().__init__(redact(message), hint=hint)
        self.command = tuple(command or ())
        self.returncode = returncode
        self.stderr = redact(stderr)


class ApiUnavailable(TransportError):
    """A GitHub read or write through ``gh`` failed."""


class UserAbort(GhkitError):
    category = "abort"

    def __init__(self, message: str = "Aborted.") -> None:
        super().__init__(message)


@dataclass
class ErrorInfo:
    category: str
    message: str
    original_type: str
    transient: bool = False
    details: dict[str, Any] | None = None


def classify_error(exc: BaseException) -> ErrorInfo:
    """Summarise an exception for structured logs.

    Rate-limit and abuse-detection messages are flagged transient so they
    stand out in logs; nothing is retried on that basis.
    """
    msg = redact(str(exc)) if exc else ""
    low = msg.lower()
    if isinstance(exc, TransportError):
        low = f"{low} {exc.stderr.lower()}"
        details: dict[str, Any] = {"returncode": exc.returncode}
        if exc.command:
            details["command"] = " ".join(exc.command[:3])
        transient = any(k in low for k in ("rate limit", "secondary rate", "abuse"))
        return ErrorInfo(
            exc.category, msg, exc.__class__.__name__, transient=transient, details=details
        )
    if isinstance(exc, GhkitError):
        return ErrorInfo(exc.category, msg, exc.__class__.__name__)
    if isinstance(exc, KeyboardInterrupt):
        return ErrorInfo("abort", "interrupted", exc.__class__.__name__)
    return ErrorInfo("generic", msg, exc.__class__.__name__)


__all__ = [
    "ApiUnavailable",
    "ErrorInfo",
    "GhkitError",
    "InputError",
    "MissingTool",
    "NoRemote",
    "NotARepository",
    "NotFoundError",
    "ToolEnvironmentError",
    "TransportError",
    "UnparsableRemote",
    "UserAbort",
    "classify_error",
    "redact",
]
