"""Tests for UX helpers module."""

from __future__ import annotations

import io

import pytest

from ghkit.ux import (
    Colors,
    colorize,
    print_banner,
    print_error,
    print_field,
    print_success,
    print_warning,
)


def _tty() -> io.StringIO:
    stream = io.StringIO()
    stream.isatty = lambda: True  # type: ignore[method-assign]
    return stream


def test_colorize_with_tty_support(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test colorize adds colors when TTY is supported."""
    monkeypatch.delenv("NO_COLOR", raising=False)
    monkeypatch.setenv("TERM", "xterm-256color")

    result = colorize("test", Colors.RED, bold=True, stream=_tty())
    assert result == f"{Colors.BOLD}{Colors.RED}test{Colors.RESET}"


def test_colorize_respects_no_color(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test colorize respects NO_COLOR environment variable."""
    monkeypatch.setenv("NO_COLOR", "1")
    assert colorize("test", Colors.RED, stream=_tty()) == "test"


def test_colorize_dumb_terminal(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("NO_COLOR", raising=False)
    monkeypatch.setenv("TERM", "dumb")
    assert colorize("test", Colors.RED, stream=_tty()) == "test"


def test_colorize_no_tty() -> None:
    assert colorize("test", Colors.RED, stream=io.StringIO()) == "test"


def test_print_helpers_plain_text() -> None:
    out = io.StringIO()
    print_success("Issue created", stream=out)
    print_warning("Skipping issue link.", stream=out)
    print_field("Repository", "acme/widgets", stream=out)
    print_banner("DRY RUN", stream=out)
    assert out.getvalue() == (
        "✓ Issue created\nSkipping issue link.\nRepository: acme/widgets\n\n=== DRY RUN ===\n"
    )


def test_print_error_defaults_to_stderr(capsys: pytest.CaptureFixture[str]) -> None:
    print_error("boom")
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err == "Error: boom\n"
