from exa_cli.tools.base import TextContent, Tool, ToolArgs, ToolHints, ToolResult, error_result, text_result
from exa_cli.tools.errors import (
    RemoteErrorInfo,
    ToolError,
    ToolValidationError,
    describe_error,
    failure_result,
    get_remote_error_info,
    log_remote_error,
)
from exa_cli.tools.registry import (
    TOOL_IDS,
    ToolRegistry,
    bind_arguments,
    build_tools,
    create_tool_registry,
    get_tool_definition,
)

__all__ = [
    "RemoteErrorInfo",
    "TOOL_IDS",
    "TextContent",
    "Tool",
    "ToolArgs",
    "ToolError",
    "ToolHints",
    "ToolRegistry",
    "ToolResult",
    "ToolValidationError",
    "bind_arguments",
    "build_tools",
    "create_tool_registry",
    "describe_error",
    "error_result",
    "failure_result",
    "get_remote_error_info",
    "get_tool_definition",
    "log_remote_error",
    "text_result",
]
