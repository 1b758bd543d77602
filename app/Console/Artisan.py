from __future__ import annotations

import argparse
import re
import sys
import traceback
from abc import ABC, abstractmethod
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Type


class CommandSignatureParser:
    """Parses Laravel command signatures such as ``name {arg?} {--option=}``."""

    @staticmethod
    def parse(signature: str) -> Dict[str, Any]:
        parts = signature.split(None, 1)
        if not parts:
            return {"name": "", "arguments": [], "options": []}

        name = parts[0]
        arguments: List[Dict[str, Any]] = []
        options: List[Dict[str, Any]] = []

        for token in re.findall(r'\{\s*(.*?)\s*\}', parts[1] if len(parts) > 1 else ''):
            token = token.split(':', 1)[0].strip()
            if token.startswith('--'):
                option_name = token[2:]
                if '=' in option_name:
                    name_part, default = option_name.split('=', 1)
                    options.append({"name": name_part, "has_value": True, "default": default or None})
                else:
                    options.append({"name": option_name, "has_value": False, "default": False})
            elif token.endswith('?'):
                arguments.append({"name": token[:-1], "required": False, "default": None})
            elif '=' in token:
                arg_name, default = token.split('=', 1)
                arguments.append({"name": arg_name, "required": False, "default": default})
            else:
                arguments.append({"name": token, "required": True, "default": None})

        return {"name": name, "arguments": arguments, "options": options}


class OutputStyle(Enum):
    INFO = "info"
    ERROR = "error"
    WARNING = "warn"
    SUCCESS = "success"
    LINE = "line"


class Command(ABC):
    """Base Artisan command class."""

    signature: str = ''
    description: str = ''
    help: str = ''
    hidden: bool = False
    verbosity: int = 1

    def __init__(self) -> None:
        self.args: argparse.Namespace = argparse.Namespace()
        self.start_time: Optional[datetime] = None

    @abstractmethod
    def handle(self) -> int:
        """Execute the command."""
        pass

    def initialize(self) -> None:
        self.start_time = datetime.now()

    def finalize(self, exit_code: int) -> None:
        if self.start_time and self.verbosity >= 2:
            duration = datetime.now() - self.start_time
            self.line(f"Command completed in {duration.total_seconds():.2f}s")

    def argument(self, name: str, default: Any = None) -> Any:
        value = getattr(self.args, name, None)
        return default if value is None else value

    def option(self, name: str, default: Any = None) -> Any:
        value = getattr(self.args, name, None)
        return default if value is None else value

    def line(self, message: str = '', style: Optional[OutputStyle] = None) -> None:
        """Write a line to output."""
        formatted_message = self._format_message(message, style or OutputStyle.LINE)
        print(formatted_message)

    def _format_message(self, message: str, style: OutputStyle) -> str:
        color_codes = {
            OutputStyle.INFO: "\033[94m",
            OutputStyle.ERROR: "\033[91m",
            OutputStyle.WARNING: "\033[93m",
            OutputStyle.SUCCESS: "\033[92m",
        }
        color_code = color_codes.get(style, "")
        if color_code and sys.stdout.isatty():
            return f"{color_code}{message}\033[0m"
        return message

    def info(self, message: str) -> None:
        self.line(message, OutputStyle.INFO)

    def error(self, message: str) -> None:
        self.line(message, OutputStyle.ERROR)

    def warn(self, message: str) -> None:
        self.line(message, OutputStyle.WARNING)

    def success(self, message: str) -> None:
        self.line(message, OutputStyle.SUCCESS)

    def table(self, headers: List[str], rows: List[List[str]]) -> None:
        """Display a table."""
        if not rows:
            return

        widths = [len(header) for header in headers]
        for row in rows:
            for i, cell in enumerate(row):
                if i < len(widths):
                    widths[i] = max(widths[i], len(str(cell)))

        header_line = ' | '.join(h.ljust(w) for h, w in zip(headers, widths))
        self.line(header_line)
        self.line('-' * len(header_line))

        for row in rows:
            self.line(' | '.join(str(cell).ljust(widths[i]) for i, cell in enumerate(row)))

    def get_parsed_signature(self) -> Dict[str, Any]:
        return CommandSignatureParser.parse(self.signature)


class Kernel:
    """Artisan command kernel."""

    def __init__(self) -> None:
        self.commands: Dict[str, Type[Command]] = {}

    def register(self, command_class: Type[Command]) -> None:
        """Register a command class under the name in its signature."""
        command_name = CommandSignatureParser.parse(command_class.signature)["name"]
        if not command_name:
            raise ValueError(f"Command {command_class.__name__} has no signature")

        self.commands[command_name] = command_class

    def resolve(self, command: str) -> Optional[Type[Command]]:
        return self.commands.get(command)

    def call(self, command: str, parameters: Optional[Dict[str, Any]] = None) -> int:
        """Call a command programmatically; ``--option`` keys may be given with or without dashes."""
        command_class = self.resolve(command)
        if command_class is None:
            print(f"Command '{command}' not found.")
            return 1

        args = self._default_arguments(command_class)
        for key, value in (parameters or {}).items():
            setattr(args, key.lstrip('-').replace('-', '_'), value)

        return self._run(command_class(), args)

    def handle(self, argv: Optional[List[str]] = None) -> int:
        """Handle command line input."""
        if argv is None:
            argv = sys.argv[1:]

        if not argv:
            return self._show_command_list()

        command_name = argv[0]
        if command_name in ['help', '--help', '-h']:
            if len(argv) > 1:
                return self._show_command_help(argv[1])
            return self._show_command_list()

        command_class = self.resolve(command_name)
        if command_class is None:
            print(f"Command '{command_name}' not found.")
            return 1

        try:
            args = self._parse_arguments(command_class, argv[1:])
        except SystemExit as e:
            return int(e.code or 0)

        return self._run(command_class(), args)

    def _run(self, command_instance: Command, args: argparse.Namespace) -> int:
        command_instance.args = args

        try:
            command_instance.initialize()
            result = command_instance.handle()
            exit_code = result if isinstance(result, int) else 0
            command_instance.finalize(exit_code)
        except KeyboardInterrupt:
            print("\nOperation cancelled.")
            return 130
        except Exception as e:
            print(f"Command failed with error: {e}")
            if command_instance.verbosity >= 2:
                traceback.print_exc()
            return 1

        return exit_code

    def _show_command_list(self) -> int:
        print("Artisan Console")
        print()
        print("Usage:")
        print("  python artisan.py <command> [options] [arguments]")
        print()
        print("Available commands:")

        groups: Dict[str, List[tuple[str, str]]] = {}
        for name, command_class in sorted(self.commands.items()):
            if command_class.hidden:
                continue
            namespace = name.split(':')[0] if ':' in name else 'general'
            groups.setdefault(namespace, []).append((name, command_class.description))

        for namespace, commands in groups.items():
            if namespace != 'general':
                print(f"\n{namespace}:")
            for cmd_name, cmd_desc in commands:
                print(f"  {cmd_name:<25} {cmd_desc}")

        return 0

    def _show_command_help(self, command_name: str) -> int:
        command_class = self.resolve(command_name)
        if command_class is None:
            print(f"Command '{command_name}' not found.")
            return 1

        print("Description:")
        print(f"  {command_class.description or 'No description available'}")
        print()
        print("Usage:")
        print(f"  {command_class.signature}")
        if command_class.help:
            print()
            print("Help:")
            print(f"  {command_class.help}")
        return 0

    def _build_parser(self, command_class: Type[Command]) -> argparse.ArgumentParser:
        parsed = CommandSignatureParser.parse(command_class.signature)
        parser = argparse.ArgumentParser(prog=parsed["name"], description=command_class.description)

        for argument in parsed["arguments"]:
            if argument["required"]:
                parser.add_argument(argument["name"])
            else:
                parser.add_argument(argument["name"], nargs='?', default=argument["default"])

        for option in parsed["options"]:
            dest = option["name"].replace('-', '_')
            if option["has_value"]:
                parser.add_argument(f"--{option['name']}", dest=dest, default=option["default"])
            else:
                parser.add_argument(f"--{option['name']}", dest=dest, action='store_true')

        return parser

    def _parse_arguments(self, command_class: Type[Command], args: List[str]) -> argparse.Namespace:
        return self._build_parser(command_class).parse_args(args)

    def _default_arguments(self, command_class: Type[Command]) -> argparse.Namespace:
        parsed = CommandSignatureParser.parse(command_class.signature)
        defaults = {argument["name"]: argument["default"] for argument in parsed["arguments"]}
        defaults.update({option["name"].replace('-', '_'): option["default"] for option in parsed["options"]})
        return argparse.Namespace(**defaults)


# Global kernel instance
kernel = Kernel()


class ListCommand(Command):
    """List all available commands."""

    signature = 'list'
    description = 'List all available Artisan commands'

    def handle(self) -> int:
        return kernel._show_command_list()


kernel.register(ListCommand)
