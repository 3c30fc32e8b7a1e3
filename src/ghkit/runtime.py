"""Runtime helpers for ghkit command orchestration."""

from __future__ import annotations

import sys
import time
from collections.abc import Callable
from dataclasses import dataclass

from .config import Settings, load_settings
from .errors import GhkitError, UserAbort, classify_error
from .github import GitHubClient
from .logging import StructuredLogger, configure_logging
from .models import RepoRef
from .picker import Picker, build_picker
from .prompts import Prompter
from .repo import resolve_repo
from .shell import CommandRunner, SubprocessRunner
from .ux import print_error, print_field, print_plain, print_warning


@dataclass
class AppContext:
    """Everything a command needs; built once per invocation."""

    settings: Settings
    runner: CommandRunner
    picker: Picker
    prompter: Prompter
    logger: StructuredLogger

    def resolve_repo(self) -> RepoRef:
        repo = resolve_repo(self.runner, git=self.settings.git_path)
        print_field("Repository", repo.full_name)
        return repo

    def client(self, repo: RepoRef) -> GitHubClient:
        return GitHubClient(self.runner, repo, self.settings, logger=self.logger)


def build_context(settings: Settings | None = None) -> AppContext:
    settings = settings or load_settings()
    logger = configure_logging(json_logging=settings.log_json, level=settings.log_level)
    return AppContext(
        settings=settings,
        runner=SubprocessRunner(logger),
        picker=build_picker(settings),
        prompter=Prompter(),
        logger=logger,
    )


def execute_command(
    handler: Callable[[], int | None], command: str, logger: StructuredLogger
) -> int:
    """Run a command handler and map ghkit failures to exit codes.

    Anything that is not a :class:`GhkitError` (or an interrupt) is a bug and
    propagates.
    """
    start = time.monotonic()
    logger.log_operation("command_start", command=command)
    try:
        result = handler()
        exit_code = int(result) if result is not None else 0
    except UserAbort as exc:
        print_warning(exc.message)
        exit_code = exc.exit_code
    except KeyboardInterrupt:
        print_plain()
        print_warning("Aborted.")
        exit_code = 1
    except GhkitError as exc:
        info = classify_error(exc)
        logger.log_error(
            f"{command} failed", error=info.message, category=info.category,
            transient=info.transient,
        )
        print_error(exc.message)
        if exc.hint:
            print_plain(exc.hint, stream=sys.stderr)
        exit_code = exc.exit_code
    duration_ms = (time.monotonic() - start) * 1000
    logger.log_operation(
        "command_complete", command=command, exit_code=exit_code,
        duration_ms=round(duration_ms, 2),
    )
    return exit_code


__all__ = ["AppContext", "build_context", "execute_command"]
