"""Synchronous external-command capability.

Every ``gh`` / ``git`` invocation goes through a :class:`CommandRunner` so the
commands can be exercised without the real tools: tests substitute a scripted
runner, production uses :class:`SubprocessRunner`.
"""

from __future__ import annotations

import subprocess  # nosec B404 - running gh/git is the whole point
import time
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from .errors import MissingTool, TransportError, redact
from .logging import StructuredLogger, get_logger

_INSTALL_HINTS = {
    "gh": "Install the GitHub CLI (https://cli.github.com) and run: gh auth login",
    "git": "Install git and run the command inside a repository checkout",
}


@dataclass(frozen=True)
class CommandResult:
    args: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class CommandRunner(Protocol):  # pragma: no cover - interface only
    def run(
        self, cmd: Sequence[str], *, input_text: str | None = None, check: bool = True
    ) -> CommandResult: ...


class SubprocessRunner:
    """Runs commands with captured text output.

    With ``check=True`` a non-zero exit raises :class:`TransportError` carrying
    the (redacted) stderr; with ``check=False`` the caller inspects the result.
    A missing executable always raises :class:`MissingTool`.
    """

    def __init__(self, logger: StructuredLogger | None = None) -> None:
        self.logger = logger or get_logger()

    def run(
        self, cmd: Sequence[str], *, input_text: str | None = None, check: bool = True
    ) -> CommandResult:
        argv = [str(part) for part in cmd]
        start = time.perf_counter()
        try:
            proc = subprocess.run(  # nosec B603 - argv list, no shell
                argv,
                input=input_text,
                capture_output=True,
                text=True,
                check=False,
            )
        except FileNotFoundError as exc:
            tool = argv[0]
            raise MissingTool(tool, hint=_INSTALL_HINTS.get(tool)) from exc
        self.logger.log_command(argv, proc.returncode, (time.perf_counter() - start) * 1000)
        result = CommandResult(tuple(argv), proc.returncode, proc.stdout, proc.stderr)
        if check and not result.ok:
            raise TransportError(
                f"Command failed: {' '.join(argv[:3])}: {redact(proc.stderr.strip())}",
                command=argv,
                returncode=proc.returncode,
                stderr=proc.stderr,
            )
        return result


__all__ = ["CommandResult", "CommandRunner", "SubprocessRunner"]
