"""ghkit CLI.

Commands:
  create  -> create an issue (labels + project pickers)          [gh-issue, ghi]
  delete  -> delete an issue by number or interactive pick       [gh-issue-delete, ghi-delete]
  link    -> add a PR to a project, optionally link an issue     [ghpr-link, gh-pr-link]
  help    -> show a command's help (interactive pick if omitted) [ghi-help]
  list    -> list the available commands                         [ghi-list]

The bracketed names are standalone console scripts that run the command
directly, e.g. ``ghi "Fix bug" -e "$(tail log)"``.
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Callable, Sequence
from typing import Any, NoReturn

from .errors import GhkitError
from .issue_create import CreateOptions, run_create
from .issue_delete import DeleteOptions, run_delete
from .models import Row
from .picker import PickerOptions, Selected
from .pr_link import LinkOptions, run_link
from .runtime import AppContext, build_context, execute_command
from .ux import print_error, print_header, print_listing, print_plain, print_warning

_MAX_HELP_WIDTH = 100

COMMANDS: dict[str, tuple[str, str]] = {
    "create": ("gh-issue", "Create a new issue"),
    "delete": ("gh-issue-delete", "Delete an issue"),
    "link": ("ghpr-link", "Link a PR to a project and optionally an issue"),
}

_ALIASES: dict[str, tuple[str, ...]] = {
    "create": ("ghi",),
    "delete": ("ghi-delete",),
    "link": ("gh-pr-link",),
}

_SUMMARIES = {
    **{name: summary for name, (_alias, summary) in COMMANDS.items()},
    "help": "Show help for a command",
    "list": "List available commands",
}


class _HelpFormatter(argparse.RawDescriptionHelpFormatter):
    def __init__(self, prog: str) -> None:
        super().__init__(prog, max_help_position=30, width=_MAX_HELP_WIDTH)


class _FormatterArgumentParser(argparse.ArgumentParser):
    def __init__(self, *args: Any, **kwargs: Any) -> None:
        kwargs.setdefault("formatter_class", _HelpFormatter)
        super().__init__(*args, **kwargs)

    def error(self, message: str) -> NoReturn:
        # every validation failure exits 1
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def _add_create_arguments(p: argparse.ArgumentParser) -> None:
    p.description = (
        "Quick GitHub issue creation. Interactive by default - prompts for missing info.\n"
        "Press Enter to skip/use defaults at any prompt."
    )
    p.epilog = (
        "Examples:\n"
        '  gh-issue "Fix bug"                    # Prompts for description, labels, project\n'
        '  gh-issue "Fix bug" "Details here"     # Skips description prompt\n'
        '  gh-issue -t "Title" -d "Description"  # Explicit flags\n'
        '  gh-issue "Title" -e "Error logs"      # With error/log content'
    )
    p.add_argument(
        "words", nargs="*", metavar="title [description]", help="Title, then description"
    )
    p.add_argument("-t", "--title", help="Issue title (or first positional arg)")
    p.add_argument(
        "-d", "--description", help="Issue description (or second positional arg / prompt)"
    )
    p.add_argument("-e", "--errors", help="Error/log content (appended in separate section)")
    p.add_argument("--dry-run", action="store_true", help="Preview without creating")
    p.add_argument("--open", action="store_true", help="Open issue in browser after creation")


def _add_delete_arguments(p: argparse.ArgumentParser) -> None:
    p.description = (
        "Delete a GitHub issue.\n\nIf no issue number is provided, opens interactive selection."
    )
    p.epilog = (
        "Examples:\n"
        "  gh-issue-delete           # Interactive selection\n"
        "  gh-issue-delete 42        # Delete issue #42\n"
        "  gh-issue-delete 42 --yes  # Delete without confirmation"
    )
    p.add_argument("number", nargs="?", help="Issue number")
    p.add_argument("-y", "--yes", action="store_true", help="Skip confirmation prompt")
    p.add_argument("--dry-run", action="store_true", help="Preview without deleting")


def _add_link_arguments(p: argparse.ArgumentParser) -> None:
    p.description = (
        "Link a PR to a GitHub Project and optionally an Issue.\n\n"
        "If no PR number is provided, opens interactive selection.\n"
        "After selecting a project, you can optionally link to an issue:\n"
        "  - Closes #X     (auto-close issue when PR merges)\n"
        "  - Relates to #X (reference only)"
    )
    p.epilog = (
        "Examples:\n"
        "  ghpr-link             # Interactive selection\n"
        "  ghpr-link 42          # Link PR #42 to a project\n"
        "  ghpr-link 42 --dry-run"
    )
    p.add_argument("number", nargs="?", help="Pull request number")
    p.add_argument("--dry-run", action="store_true", help="Preview without linking")


def _add_help_arguments(p: argparse.ArgumentParser) -> None:
    p.description = "Show help for a ghkit command; opens interactive selection if omitted."
    p.add_argument("topic", nargs="?", metavar="command")


_CONFIGURE: dict[str, Callable[[argparse.ArgumentParser], None]] = {
    "create": _add_create_arguments,
    "delete": _add_delete_arguments,
    "link": _add_link_arguments,
    "help": _add_help_arguments,
    "list": lambda p: None,
}


def _build_parser() -> argparse.ArgumentParser:
    """Construct top-level CLI parser with subcommands."""
    p = _FormatterArgumentParser(
        prog="ghkit", description="Interactive GitHub issue / PR / project helpers"
    )
    sub = p.add_subparsers(
        dest="cmd",
        required=True,
        parser_class=_FormatterArgumentParser,
        metavar="<command>",
    )
    for name, configure in _CONFIGURE.items():
        configure(sub.add_parser(name, help=_SUMMARIES[name]))
    return p


def _subparsers(parser: argparse.ArgumentParser) -> dict[str, argparse.ArgumentParser]:
    for action in parser._actions:  # noqa: SLF001 - argparse exposes no public accessor
        if isinstance(action, argparse._SubParsersAction):  # noqa: SLF001
            return dict(action.choices)
    return {}


def parse_args(argv: Sequence[str], prog: str | None = None) -> argparse.Namespace:
    """Parse ``argv``; command options and positionals may be intermixed."""
    parser = _build_parser()
    commands = _subparsers(parser)
    if argv and argv[0] in commands:
        sub = commands[argv[0]]
        if prog:
            sub.prog = prog
        args = sub.parse_intermixed_args(list(argv[1:]))
        args.cmd = argv[0]
        return args
    return parser.parse_args(list(argv))


def _cmd_list() -> int:
    print_header("Available ghkit commands:")
    print_plain()
    for name, (alias, summary) in COMMANDS.items():
        print_listing([f"{alias:<16} {summary}  (ghkit {name})"])
    print_plain()
    print_warning("Use ghi-help or <command> --help for detailed usage.")
    return 0


def _resolve_topic(topic: str) -> str | None:
    if topic in COMMANDS:
        return topic
    for name, (alias, _summary) in COMMANDS.items():
        if topic == alias or topic in _ALIASES.get(name, ()):
            return name
    return None


def _cmd_help(ctx: AppContext, topic: str | None) -> int:
    parsers = _subparsers(_build_parser())
    if topic is None:
        if not ctx.picker.interactive:
            _cmd_list()
            print_warning("Install fzf for interactive selection, or run: ghi-help <command>")
            return 0
        print_header("Select a command to see its help:")
        rows = [Row(name, f"{alias}  {summary}") for name, (alias, summary) in COMMANDS.items()]
        result = ctx.picker.pick(
            rows, PickerOptions(prompt="Command: ", header="Enter=select | Esc=exit")
        )
        if not isinstance(result, Selected) or result.first is None:
            return 0
        topic = result.first.key
    name = _resolve_topic(topic)
    if name is None:
        print_warning(f"Unknown command: {topic}")
        print_plain(f"Available: {' '.join(COMMANDS)}")
        return 1
    parser = parsers[name]
    parser.prog = COMMANDS[name][0]
    print_plain()
    parser.print_help()
    return 0


def _build_handler(args: argparse.Namespace, ctx: AppContext) -> Callable[[], int]:
    if args.cmd == "create":
        opts = CreateOptions(
            title=args.title,
            description=args.description,
            errors=args.errors,
            positional=tuple(args.words or ()),
            dry_run=args.dry_run,
            open_after=args.open,
        )
        return lambda: run_create(ctx, opts)
    if args.cmd == "delete":
        delete_opts = DeleteOptions(number=args.number, dry_run=args.dry_run, yes=args.yes)
        return lambda: run_delete(ctx, delete_opts)
    if args.cmd == "link":
        link_opts = LinkOptions(number=args.number, dry_run=args.dry_run)
        return lambda: run_link(ctx, link_opts)
    if args.cmd == "help":
        return lambda: _cmd_help(ctx, args.topic)
    return _cmd_list


def main(
    argv: Sequence[str] | None = None,
    *,
    prog: str | None = None,
    context: AppContext | None = None,
) -> int:
    args = parse_args(list(sys.argv[1:] if argv is None else argv), prog=prog)
    try:
        ctx = context or build_context()
    except GhkitError as exc:
        print_error(exc.message)
        if exc.hint:
            print_plain(exc.hint, stream=sys.stderr)
        return exc.exit_code
    return execute_command(_build_handler(args, ctx), args.cmd, ctx.logger)


def _entry(command: str) -> Callable[[], int]:
    def run() -> int:  # pragma: no cover - console script shim
        prog = sys.argv[0].rsplit("/", 1)[-1] or COMMANDS.get(command, ("ghkit",))[0]
        return main([command, *sys.argv[1:]], prog=prog)

    run.__name__ = f"{command}_entry"
    return run


issue_create_entry = _entry("create")
issue_delete_entry = _entry("delete")
pr_link_entry = _entry("link")
help_entry = _entry("help")
list_entry = _entry("list")


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
