"""
Main entry point for promptloom.

Builds a prompt from files and directories and prints the chat request.
"""
import argparse
import asyncio
import json
import logging
import sys
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.text import Text

from .builder import Builder
from .config import BuilderConfig, ConfigError, load_config
from .constants import LIBRARY_DESCRIPTION, LIBRARY_NAME, LIBRARY_VERSION, SECTION_SEPARATORS
from .formatter import Formatter
from .chat import ChatRequest
from .logger import LoggerContractError
from .override import CoreOverrideDisabledError
from .parser import ParseError


ROLE_STYLES = {
    "system": "magenta",
    "developer": "magenta",
    "user": "cyan",
    "assistant": "green",
}


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog=LIBRARY_NAME,
        description=LIBRARY_DESCRIPTION,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"{LIBRARY_NAME} {LIBRARY_VERSION}",
    )
    parser.add_argument("--config", type=str, help="Path to a JSON configuration file")
    parser.add_argument("--base-path", type=str, help="Directory prompt paths are relative to")
    parser.add_argument("--override-path", type=str, help="Directory holding override files")
    parser.add_argument(
        "--overrides",
        action="store_true",
        default=None,
        help="Allow override files to replace built-in content",
    )
    parser.add_argument("-m", "--model", type=str, help="Target chat model")
    parser.add_argument("--persona", action="append", default=[], help="Persona file (repeatable)")
    parser.add_argument("--instructions", action="append", default=[], help="Instruction file (repeatable)")
    parser.add_argument("--content", action="append", default=[], help="Content file (repeatable)")
    parser.add_argument("--context", action="append", default=[], help="Context file (repeatable)")
    parser.add_argument("--content-dir", action="append", default=[], help="Content directory (repeatable)")
    parser.add_argument("--context-dir", action="append", default=[], help="Context directory (repeatable)")
    parser.add_argument(
        "-p", "--param",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Template parameter (repeatable)",
    )
    parser.add_argument("--format", choices=SECTION_SEPARATORS, help="Section rendering style")
    parser.add_argument("--json", action="store_true", help="Print the chat request as JSON")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    return parser.parse_args(argv)


def parse_parameters(pairs: list[str]) -> dict[str, str]:
    """Turn KEY=VALUE strings into a parameter mapping.

    Raises:
        ConfigError: If a pair has no '='.
    """
    parameters: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key.strip():
            raise ConfigError(f"Invalid parameter '{pair}', expected KEY=VALUE")
        parameters[key.strip()] = value
    return parameters


def resolve_config(args: argparse.Namespace) -> BuilderConfig:
    """Merge the config file, environment and command line, in that order."""
    config = load_config(args.config) if args.config else BuilderConfig()
    config = config.with_environment()

    data = config.to_dict()
    if args.base_path:
        data["base_path"] = args.base_path
    if args.override_path:
        data["override_path"] = args.override_path
    if args.overrides is not None:
        data["overrides"] = args.overrides
    if args.model:
        data["model"] = args.model
    if args.format:
        data["format"]["section_separator"] = args.format
    data["parameters"].update(parse_parameters(args.param))

    return BuilderConfig.from_dict(data)


async def build_request(args: argparse.Namespace, config: BuilderConfig) -> ChatRequest:
    builder = Builder.from_config(config)

    for path in args.persona:
        await builder.add_persona_path(path)
    for path in args.instructions:
        await builder.add_instruction_path(path)
    for path in args.content:
        await builder.add_content_path(path)
    for path in args.context:
        await builder.add_context_path(path)
    if args.content_dir:
        await builder.load_content(args.content_dir)
    if args.context_dir:
        await builder.load_context(args.context_dir)

    prompt = await builder.build()
    formatter = Formatter(config.format)
    return formatter.format_prompt(config.model, prompt)


def render_request(console: Console, request: ChatRequest) -> None:
    console.print(f"[bold]Model:[/bold] {request.model}")
    for message in request.messages:
        console.print(Panel(
            Text(message.content),
            title=message.role,
            title_align="left",
            border_style=ROLE_STYLES.get(message.role, "white"),
        ))


def main(argv: Optional[list[str]] = None) -> int:
    """Command line entry point."""
    args = parse_args(argv)
    console = Console()
    error_console = Console(stderr=True)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=error_console, show_path=False)],
    )

    try:
        config = resolve_config(args)
        request = asyncio.run(build_request(args, config))
    except (ConfigError, ParseError, CoreOverrideDisabledError, LoggerContractError, ValueError) as e:
        error_console.print(f"[red]Error:[/red] {escape(str(e))}", soft_wrap=True)
        return 1

    if args.json:
        print(json.dumps(request.to_dict(), indent=2))
    else:
        render_request(console, request)
    return 0


if __name__ == "__main__":
    sys.exit(main())
