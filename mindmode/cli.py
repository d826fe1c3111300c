"""
CLI -- Command interface for mind-map files

Runs interpreter commands and vim key sequences against a JSON map,
optionally writing the result back.

Usage:
    mindmode show plan.json
    mindmode run --select root --save plan.json add-child --text "Goals"
    mindmode keys --select root plan.json j 3dd .
    mindmode commands fold
    mindmode help toggle
    mindmode config --set display.symbols=ascii
"""

import argparse
import asyncio
import shlex
import sys
from pathlib import Path
from typing import List, Optional

import orjson

from .commands import build_registry
from .config import ConfigManager
from .core.keys import parse_vim_sequence
from .core.types import CommandResult, Mode
from .document import MindMapDocument
from .interpreter import CommandInterpreter
from .presentation.symbols import get_symbols, render_tree, safe_print
from . import __version__


class MindModeCLI:
    """Command-line front end over one interpreter and the layered config."""

    def __init__(self, project_dir: Path):
        self.project_dir = Path(project_dir)
        self.config_manager = ConfigManager(self.project_dir)
        self.config = self.config_manager.load()
        self.symbols = get_symbols(self.config.display.symbols)
        self.interpreter = CommandInterpreter(build_registry())

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def open_document(self, path: str, select: Optional[str] = None, mode: Optional[str] = None) -> MindMapDocument:
        document = MindMapDocument.load(path, settings=self.config.navigation.to_settings())
        document.mode = mode or self.config.editor.default_mode
        if select:
            if select not in document.tree:
                raise KeyError(f"Node {select} not found")
            document.select_node(select)
        return document

    def report(self, result: CommandResult) -> int:
        symbols = self.symbols
        if result.success:
            safe_print(f"{symbols.check_pass} {result.message or 'Done'}")
            return 0
        safe_print(f"{symbols.check_fail} {result.error or 'Command failed'}", file=sys.stderr)
        return 1

    def finish(self, document: MindMapDocument, save: bool, changed: bool) -> None:
        if save and changed:
            safe_print(f"Saved {document.save()}")

    # -------------------------------------------------------------------------
    # Subcommands
    # -------------------------------------------------------------------------

    def run(self, args) -> int:
        if not args.command_line:
            print("Error: No command given", file=sys.stderr)
            return 2
        document = self.open_document(args.map, args.select, args.mode)
        text = shlex.join(args.command_line)
        result = asyncio.run(self.interpreter.execute(
            text, document.context(), dry_run=args.dry_run, verbose=args.verbose,
        ))
        code = self.report(result)
        self.finish(document, args.save, result.success and not args.dry_run)
        return code

    def keys(self, args) -> int:
        if not self.config.editor.vim_enabled:
            print("Error: Vim keys are disabled (editor.vim_enabled)", file=sys.stderr)
            return 1
        document = self.open_document(args.map, args.select, args.mode)

        code = 0
        changed = False
        for sequence in args.sequences:
            parsed = parse_vim_sequence(sequence)
            if parsed.is_partial:
                result = CommandResult.fail(f"Incomplete key sequence: {sequence}")
            elif not parsed.is_complete:
                result = CommandResult.fail(f"Unknown key sequence: {sequence}")
            else:
                result = asyncio.run(self.interpreter.execute_vim(
                    parsed.command, document.context(), parsed.count,
                ))
            code = max(code, self.report(result))
            changed = changed or result.success

        self.finish(document, args.save, changed)
        return code

    def list_commands(self, args) -> int:
        registry = self.interpreter.registry
        commands = registry.search(args.query) if args.query else registry.get_all()
        if not commands:
            print(f"No commands match '{args.query}'")
            return 1
        for command in commands:
            aliases = f" ({', '.join(command.aliases)})" if command.aliases else ""
            safe_print(f"{self.symbols.bullet} {command.name}{aliases} - {command.description}")
        return 0

    def help(self, args) -> int:
        text = self.interpreter.help(args.name)
        safe_print(text)
        return 1 if args.name and not self.interpreter.is_valid_command(args.name) else 0

    def show(self, args) -> int:
        document = self.open_document(args.map, args.select)
        if args.json:
            print(orjson.dumps(document.to_dict(), option=orjson.OPT_INDENT_2).decode())
            return 0
        if document.title:
            safe_print(document.title)
        lines = render_tree(
            document.tree.roots, self.symbols,
            selected_id=document.selected_node_id, full=args.full,
        )
        for line in lines or ["(empty map)"]:
            safe_print(line)
        return 0

    def config_cmd(self, args) -> int:
        if not args.set:
            safe_print(self.config_manager.display())
            return 0
        key, sep, value = args.set.partition("=")
        if not sep:
            print(f"Error: Expected KEY=VALUE, got '{args.set}'", file=sys.stderr)
            return 2
        error = self.config_manager.set(key.strip(), value.strip(), scope="user" if args.user else "project")
        if error:
            print(f"Error: {error}", file=sys.stderr)
            return 1
        print(f"Set {key.strip()} = {value.strip()}")
        return 0


def _add_document_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument('--select', '-s', help='Node ID to select before running')
    parser.add_argument('--mode', '-m', choices=[mode.value for mode in Mode],
                        help='Editing mode (default: editor.default_mode)')
    parser.add_argument('--save', action='store_true', help='Write the map back after a successful change')


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='mindmode',
        description="mindmode -- Modal command interpreter for mind maps",
        epilog="Commands and vim keys over a JSON mind map."
    )
    parser.add_argument(
        '--project', '-p',
        default=".",
        help='Project directory holding .mindmode/config.yaml (default: current)'
    )
    parser.add_argument(
        '--version', '-V',
        action='version',
        version=f'mindmode {__version__}'
    )

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    run_parser = subparsers.add_parser('run', help='Run one command against a map')
    _add_document_args(run_parser)
    run_parser.add_argument('--dry-run', action='store_true', help='Validate and describe without running')
    run_parser.add_argument('--verbose', '-v', action='store_true', help='Report executed commands on stderr')
    run_parser.add_argument('map', help='Path to the map JSON file')
    run_parser.add_argument('command_line', nargs=argparse.REMAINDER, help='Command and its arguments')

    keys_parser = subparsers.add_parser('keys', help='Run vim key sequences against a map')
    _add_document_args(keys_parser)
    keys_parser.add_argument('map', help='Path to the map JSON file')
    keys_parser.add_argument('sequences', nargs='+', help='Key sequences, e.g. j 3dd za .')

    commands_parser = subparsers.add_parser('commands', help='List or search commands')
    commands_parser.add_argument('query', nargs='?', help='Search text')

    help_parser = subparsers.add_parser('help', help='Show command help')
    help_parser.add_argument('name', nargs='?', help='Command name or alias')

    show_parser = subparsers.add_parser('show', help='Print the map as an outline')
    show_parser.add_argument('map', help='Path to the map JSON file')
    show_parser.add_argument('--select', '-s', help='Node ID to mark as selected')
    show_parser.add_argument('--full', action='store_true', help='Do not truncate node text')
    show_parser.add_argument('--json', action='store_true', help='Print the map as JSON')

    config_parser = subparsers.add_parser('config', help='Show or change configuration')
    config_parser.add_argument('--set', metavar='KEY=VALUE', help='Set a value, e.g. display.symbols=ascii')
    config_parser.add_argument('--user', action='store_true', help='Write to the user config instead of the project')

    return parser


HANDLERS = {
    'run': MindModeCLI.run,
    'keys': MindModeCLI.keys,
    'commands': MindModeCLI.list_commands,
    'help': MindModeCLI.help,
    'show': MindModeCLI.show,
    'config': MindModeCLI.config_cmd,
}


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the mindmode CLI.

    Returns:
        Process exit code
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    cli = MindModeCLI(Path(args.project))

    try:
        return HANDLERS[args.command](cli, args)
    except (OSError, ValueError, KeyError) as e:
        message = e.args[0] if isinstance(e, KeyError) and e.args else e
        print(f"Error: {message}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
