"""Fuzzy selection over ``(key, display)`` rows.

:class:`FzfPicker` drives ``fzf``; :class:`ListingPicker` is the fallback when
fzf is unavailable and only prints what could have been picked.
:func:`pick_until_decided` adds the soft-cancel loop: Esc asks whether to
abort, and declining re-opens the picker.
"""

from __future__ import annotations

import subprocess  # nosec B404 - fzf needs the terminal, not the runner's capture
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Protocol

from .config import Settings
from .errors import InputError, TransportError, UserAbort
from .models import Row
from .prompts import Prompter
from .ux import print_listing, print_plain

FZF_NO_MATCH = 1
FZF_INTERRUPTED = 130


@dataclass(frozen=True)
class PickerOptions:
    prompt: str
    header: str = "Enter=select │ Esc=abort"
    multi: bool = False
    expect: tuple[str, ...] = ()
    sort: bool = True
    height: str = "40%"


@dataclass(frozen=True)
class Selected:
    rows: tuple[Row, ...] = ()
    # --expect key that ended the picker, if any
    key: str | None = None

    @property
    def first(self) -> Row | None:
        return self.rows[0] if self.rows else None


@dataclass(frozen=True)
class Cancelled:
    pass


PickResult = Selected | Cancelled


class Picker(Protocol):  # pragma: no cover - interface only
    interactive: bool

    def pick(self, rows: Sequence[Row], options: PickerOptions) -> PickResult: ...


def _fzf_input(rows: Sequence[Row]) -> str:
    return "".join(f"{row.key}\t{row.display}\n" for row in rows)


def _parse_fzf_output(
    output: str, rows: Sequence[Row], expect: Sequence[str]
) -> Selected:
    lines = output.splitlines()
    key: str | None = None
    if expect and lines:
        # with --expect the first line is the key pressed (empty for Enter)
        key = lines.pop(0) or None
    by_key = {row.key: row for row in rows}
    chosen: list[Row] = []
    for line in lines:
        row = by_key.get(line.split("\t", 1)[0])
        if row is not None and row not in chosen:
            chosen.append(row)
    return Selected(tuple(chosen), key)


@dataclass
class FzfPicker:
    fzf_path: str = "fzf"
    interactive: bool = field(default=True, init=False)

    def command(self, options: PickerOptions) -> list[str]:
        cmd = [
            self.fzf_path,
            f"--height={options.height}",
            "--layout=reverse",
            f"--prompt={options.prompt}",
            f"--header={options.header}",
            "--delimiter=\t",
            "--with-nth=2..",
        ]
        if options.multi:
            cmd.append("--multi")
        if not options.sort:
            cmd.append("--no-sort")
        if options.expect:
            cmd.append(f"--expect={','.join(options.expect)}")
        return cmd

    def pick(self, rows: Sequence[Row], options: PickerOptions) -> PickResult:
        cmd = self.command(options)
        try:
            # stderr stays attached: fzf draws its UI there
            proc = subprocess.run(  # nosec B603 - argv list, no shell
                cmd, input=_fzf_input(rows), stdout=subprocess.PIPE, text=True, check=False
            )
        except FileNotFoundError as exc:
            raise TransportError(f"fzf not runnable: {self.fzf_path}", command=cmd) from exc
        if proc.returncode == FZF_INTERRUPTED:
            return Cancelled()
        if proc.returncode == FZF_NO_MATCH:
            return _parse_fzf_output(proc.stdout, (), options.expect)
        if proc.returncode != 0:
            raise TransportError(
                f"fzf exited with status {proc.returncode}", command=cmd, returncode=proc.returncode
            )
        return _parse_fzf_output(proc.stdout, rows, options.expect)


@dataclass
class ListingPicker:
    """Fallback without fzf: print the choices, require the id as an argument."""

    usage: str = "pass the number as an argument"
    interactive: bool = field(default=False, init=False)

    def pick(self, rows: Sequence[Row], options: PickerOptions) -> PickResult:
        print_plain("Available:")
        print_listing(f"{row.key}: {row.display}" for row in rows)
        raise InputError(
            "fzf required for interactive selection",
            hint=f"Install fzf or {self.usage}",
        )


def build_picker(settings: Settings) -> Picker:
    if settings.fzf_path:
        return FzfPicker(settings.fzf_path)
    return ListingPicker()


def pick_until_decided(
    picker: Picker,
    rows: Sequence[Row],
    options: PickerOptions,
    prompter: Prompter,
    question: str = "Abort?",
) -> Selected:
    """Show the picker until the user selects something or confirms an abort.

    Raises :class:`UserAbort` on a confirmed abort or when the abort prompt
    hits end-of-input.
    """
    while True:
        result = picker.pick(rows, options)
        if isinstance(result, Selected):
            return result
        # end-of-input at the prompt counts as an abort
        if prompter.confirm(question, on_eof=True):
            raise UserAbort()


__all__ = [
    "Cancelled",
    "FzfPicker",
    "ListingPicker",
    "PickResult",
    "Picker",
    "PickerOptions",
    "Selected",
    "build_picker",
    "pick_until_decided",
]
