"""Colored status output for the ghkit commands - no external dependencies."""

from __future__ import annotations

import os
import sys
from collections.abc import Iterable
from typing import TextIO


class Colors:
    """ANSI color codes for terminal output."""

    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    CYAN = "\033[36m"


def _supports_color(stream: TextIO | None = None) -> bool:
    """Check if the stream should receive ANSI colors."""
    stream = stream or sys.stdout
    if os.environ.get("NO_COLOR"):
        return False
    if not hasattr(stream, "isatty") or not stream.isatty():
        return False
    if os.environ.get("TERM") == "dumb":
        return False
    return True


def colorize(text: str, color: str, bold: bool = False, stream: TextIO | None = None) -> str:
    """Apply color to text if the stream supports it."""
    if not _supports_color(stream):
        return text
    prefix = (Colors.BOLD if bold else "") + color
    return f"{prefix}{text}{Colors.RESET}"


def print_success(message: str, stream: TextIO | None = None) -> None:
    """Print success message in green."""
    stream = stream or sys.stdout
    print(colorize(f"✓ {message}", Colors.GREEN, stream=stream), file=stream)


def print_error(message: str, stream: TextIO | None = None) -> None:
    """Print error message in red (stderr by default)."""
    stream = stream or sys.stderr
    print(colorize(f"Error: {message}", Colors.RED, stream=stream), file=stream)


def print_warning(message: str, stream: TextIO | None = None) -> None:
    stream = stream or sys.stdout
    print(colorize(message, Colors.YELLOW, stream=stream), file=stream)


def print_step(message: str, stream: TextIO | None = None) -> None:
    """Progress line such as ``Fetching issues...``."""
    stream = stream or sys.stdout
    print(colorize(message, Colors.YELLOW, stream=stream), file=stream)


def print_field(label: str, value: object, stream: TextIO | None = None) -> None:
    """Print ``Label: value`` with the label highlighted."""
    stream = stream or sys.stdout
    print(f"{colorize(f'{label}:', Colors.BLUE, stream=stream)} {value}", file=stream)


def print_banner(title: str, stream: TextIO | None = None) -> None:
    """Print a ``=== TITLE ===`` banner, used for dry runs."""
    stream = stream or sys.stdout
    print(file=stream)
    print(colorize(f"=== {title} ===", Colors.GREEN, bold=True, stream=stream), file=stream)


def print_plain(message: str = "", stream: TextIO | None = None) -> None:
    print(message, file=stream or sys.stdout)


def print_listing(lines: Iterable[str], stream: TextIO | None = None) -> None:
    stream = stream or sys.stdout
    for line in lines:
        print(f"  {line}", file=stream)


def print_header(message: str, stream: TextIO | None = None) -> None:
    """Print section header in bold cyan."""
    stream = stream or sys.stdout
    print(colorize(message, Colors.CYAN, bold=True, stream=stream), file=stream)
