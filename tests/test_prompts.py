from __future__ import annotations

import io

import pytest
from conftest import ScriptedInput

from ghkit.prompts import Prompter


def _prompter(*answers: str) -> tuple[Prompter, ScriptedInput]:
    script = ScriptedInput(answers)
    return Prompter(input_fn=script, stream=io.StringIO()), script


@pytest.mark.parametrize(("answer", "expected"), [("y", True), ("Y", True), (" y ", True),
                                                    ("n", False), ("", False), ("yes", False)])
def test_confirm_only_accepts_y(answer: str, expected: bool):
    prompter, script = _prompter(answer)
    assert prompter.confirm("Delete this issue permanently?", danger=True) is expected
    assert script.prompts == ["Delete this issue permanently? (y/N): "]


def test_end_of_input_is_empty_answer():
    prompter, _ = _prompter()
    assert prompter.ask("Title") == ""
    assert prompter.confirm("Abort?") is False
    assert prompter.confirm("Abort?", on_eof=True) is True


def test_ask_strips_answer():
    prompter, script = _prompter("  Fix bug \n")
    assert prompter.ask("Title") == "Fix bug"
    assert script.prompts == ["Title: "]


def test_interrupt_propagates():
    def interrupted(_prompt: str) -> str:
        raise KeyboardInterrupt

    with pytest.raises(KeyboardInterrupt):
        Prompter(input_fn=interrupted, stream=io.StringIO()).ask("Title")
