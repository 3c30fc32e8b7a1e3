"""Pytest configuration for ghkit tests.

Ensures the in-repo `src` directory is on `sys.path` so the package can be
imported without an editable install (`pip install -e .`), and provides
scripted stand-ins for the external tools: a command runner that answers
``gh`` / ``git`` invocations by argv prefix, a picker that replays queued
selections, and a real :class:`~ghkit.prompts.Prompter` fed from a list of
answers.
"""

from __future__ import annotations

import io
import json
import sys
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from ghkit.config import Settings  # noqa: E402
from ghkit.errors import TransportError  # noqa: E402
from ghkit.logging import StructuredLogger  # noqa: E402
from ghkit.models import Row  # noqa: E402
from ghkit.picker import Cancelled, PickerOptions, PickResult, Selected  # noqa: E402
from ghkit.prompts import Prompter  # noqa: E402
from ghkit.runtime import AppContext  # noqa: E402
from ghkit.shell import CommandResult  # noqa: E402

DEFAULT_REMOTE = "git@github.com:acme/widgets.git"


class FakeRunner:
    """Answers commands by longest registered argv prefix; unmatched commands succeed silently."""

    def __init__(self, remote: str | None = DEFAULT_REMOTE) -> None:
        self._responses: list[tuple[tuple[str, ...], CommandResult | BaseException]] = []
        self.calls: list[list[str]] = []
        # contents of --body-file arguments, read while the file still exists
        self.body_files: dict[str, str] = {}
        if remote is not None:
            self.on("git", "rev-parse", stdout="true\n")
            self.on("git", "remote", "get-url", stdout=f"{remote}\n")

    def on(
        self,
        *prefix: str,
        stdout: str = "",
        returncode: int = 0,
        stderr: str = "",
        error: BaseException | None = None,
    ) -> FakeRunner:
        response: CommandResult | BaseException = error or CommandResult(
            prefix, returncode, stdout, stderr
        )
        self._responses.append((prefix, response))
        return self

    def on_json(self, *prefix: str, payload: Any) -> FakeRunner:
        return self.on(*prefix, stdout=json.dumps(payload))

    def run(
        self, cmd: Sequence[str], *, input_text: str | None = None, check: bool = True
    ) -> CommandResult:
        argv = [str(part) for part in cmd]
        self.calls.append(argv)
        if "--body-file" in argv:
            path = argv[argv.index("--body-file") + 1]
            self.body_files[path] = Path(path).read_text(encoding="utf-8")
        match = self._match(argv)
        if isinstance(match, BaseException):
            raise match
        result = CommandResult(
            tuple(argv),
            match.returncode if match else 0,
            match.stdout if match else "",
            match.stderr if match else "",
        )
        if check and not result.ok:
            raise TransportError(
                f"Command failed: {' '.join(argv[:3])}: {result.stderr.strip()}",
                command=argv,
                returncode=result.returncode,
                stderr=result.stderr,
            )
        return result

    def _match(self, argv: list[str]) -> CommandResult | BaseException | None:
        best: tuple[int, CommandResult | BaseException] | None = None
        for prefix, response in self._responses:
            size = len(prefix)
            if argv[:size] == list(prefix) and (best is None or size >= best[0]):
                best = (size, response)
        return best[1] if best else None

    def called(self, *prefix: str) -> list[list[str]]:
        return [argv for argv in self.calls if argv[: len(prefix)] == list(prefix)]


def choose(*keys: str, key: str | None = None) -> Callable[[Sequence[Row]], Selected]:
    """Queue entry selecting the rows whose keys are given (in row order)."""

    def _select(rows: Sequence[Row]) -> Selected:
        return Selected(tuple(row for row in rows if row.key in keys), key)

    return _select


class FakePicker:
    def __init__(self, steps: Sequence[Any] = (), *, interactive: bool = True) -> None:
        self.steps = list(steps)
        self.interactive = interactive
        self.calls: list[tuple[list[Row], PickerOptions]] = []

    def pick(self, rows: Sequence[Row], options: PickerOptions) -> PickResult:
        self.calls.append((list(rows), options))
        if not self.steps:
            raise AssertionError(f"unexpected picker call: {options.prompt!r}")
        step = self.steps.pop(0)
        if isinstance(step, (Selected, Cancelled)):
            return step
        return step(rows)


class ScriptedInput:
    """``input`` replacement; an exhausted script behaves like end-of-input."""

    def __init__(self, answers: Sequence[str]) -> None:
        self.answers = list(answers)
        self.prompts: list[str] = []

    def __call__(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self.answers:
            raise EOFError
        return self.answers.pop(0)


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def settings() -> Settings:
    return Settings(fzf_path="/usr/bin/fzf", rest_enabled=False)


@pytest.fixture
def quiet_logger() -> StructuredLogger:
    return StructuredLogger(name="ghkit.tests", level="DEBUG", stream=io.StringIO())


@pytest.fixture
def make_ctx(
    runner: FakeRunner, settings: Settings, quiet_logger: StructuredLogger
) -> Callable[..., AppContext]:
    def _make(
        steps: Sequence[Any] = (),
        answers: Sequence[str] = (),
        *,
        interactive: bool = True,
        picker: Any = None,
    ) -> AppContext:
        script = ScriptedInput(answers)
        return AppContext(
            settings=settings,
            runner=runner,
            picker=picker or FakePicker(steps, interactive=interactive),
            prompter=Prompter(input_fn=script, stream=io.StringIO()),
            logger=quiet_logger,
        )

    return _make
