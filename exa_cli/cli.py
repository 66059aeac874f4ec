from __future__ import annotations

import asyncio
import json
import logging
import sys
from dataclasses import dataclass
from typing import Sequence

from exa_cli.config import LOG_FORMAT, ToolConfig, resolve_log_level
from exa_cli.io import CliIO, default_io, format_error, print_json, resolve_input
from exa_cli.tools.errors import describe_error
from exa_cli.tools.registry import bind_arguments, create_tool_registry, get_tool_definition

logger = logging.getLogger("exa_cli.cli")

USAGE = """
Usage:
  exa-cli <tool_id> --input '<json>'
  exa-cli <tool_id> --input @path/to/input.json
  exa-cli <tool_id> --input-file path/to/input.json
  echo '<json>' | exa-cli <tool_id>
  exa-cli --list-tools

Options:
  -h, --help            Show this message
  --list-tools          Print the available tools as JSON
  --pretty              Pretty-print the JSON result
  --api-key <key>       Exa API key (defaults to $EXA_API_KEY)
  -i, --input <json>    Tool input as JSON, or @file to read it from a file
  --input-file <path>   Read tool input from a file

Examples:
  exa-cli web_search_exa --input '{"query":"latest ai news"}'
  exa-cli get_code_context_exa --input '{"query":"React useState hook examples","tokensNum":5000}'
"""

MISSING_INPUT_MESSAGE = "Missing --input JSON or stdin input."


@dataclass
class CliOptions:
    tool_id: str | None = None
    input: str | None = None
    input_file: str | None = None
    api_key: str | None = None
    pretty: bool = False
    list_tools: bool = False
    help: bool = False


def parse_args(argv: Sequence[str]) -> CliOptions:
    options = CliOptions()
    args = list(argv)
    while args:
        arg = args.pop(0)
        if not arg:
            continue
        if arg in ("--help", "-h"):
            options.help = True
        elif arg == "--list-tools":
            options.list_tools = True
        elif arg == "--pretty":
            options.pretty = True
        elif arg == "--api-key":
            options.api_key = args.pop(0) if args else None
        elif arg in ("--input", "-i"):
            options.input = args.pop(0) if args else None
        elif arg == "--input-file":
            options.input_file = args.pop(0) if args else None
        elif options.tool_id is None:
            options.tool_id = arg
    return options


async def run_cli(argv: Sequence[str] | None = None, io: CliIO | None = None) -> int:
    io = io or default_io()
    options = parse_args(sys.argv[1:] if argv is None else argv)

    if options.help:
        io.stdout.write(USAGE)
        return 0

    if options.list_tools:
        registry = create_tool_registry(ToolConfig())
        print_json(registry.list_tools(), True, io.stdout)
        return 0

    if not options.tool_id:
        io.stderr.write("Missing tool_id.\n")
        io.stdout.write(USAGE)
        return 1

    config = ToolConfig(exa_api_key=options.api_key)
    tool = get_tool_definition(options.tool_id, config)
    if tool is None:
        logger.info("Unknown tool requested: %s", options.tool_id)
        print_json(format_error(f"Unknown tool: {options.tool_id}"), options.pretty, io.stdout)
        return 1

    try:
        raw_input = await resolve_input(options, io.stdin)
        if not raw_input:
            print_json(format_error(MISSING_INPUT_MESSAGE), options.pretty, io.stdout)
            return 1
        args = bind_arguments(tool, json.loads(raw_input))
        result = await tool.handler(args)
    except Exception as exc:
        logger.info("Tool %s failed before producing a result: %s", options.tool_id, describe_error(exc))
        print_json(format_error(f"CLI error: {describe_error(exc)}"), options.pretty, io.stdout)
        return 1

    print_json(result.to_dict(), options.pretty, io.stdout)
    return 1 if result.is_error else 0


def main(argv: Sequence[str] | None = None) -> int:
    logging.basicConfig(level=resolve_log_level(), format=LOG_FORMAT, stream=sys.stderr)
    try:
        return asyncio.run(run_cli(argv))
    except Exception as exc:
        sys.stderr.write(f"CLI error: {describe_error(exc)}\n")
        return 1


if __name__ == "__main__":
    sys.exit(main())
