from __future__ import annotations

from dataclasses import dataclass, field
from typing import Annotated, Any, Literal, Protocol

from pydantic import AfterValidator, BaseModel, ConfigDict


class ToolArgs(BaseModel):
    """Base for tool argument schemas: strict types, camelCase aliases, unknown keys dropped."""

    model_config = ConfigDict(strict=True, populate_by_name=True, extra="ignore", frozen=True)


def _whole_number(value: float) -> int | float:
    return int(value) if isinstance(value, float) and value.is_integer() else value


# any JSON number; 5.0 binds as 5 so request bodies keep integer counts
JsonNumber = Annotated[float, AfterValidator(_whole_number)]


@dataclass(frozen=True)
class TextContent:
    text: str
    type: Literal["text"] = "text"

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "text": self.text}


@dataclass(frozen=True)
class ToolResult:
    content: list[TextContent] = field(default_factory=list)
    is_error: bool = False

    def __post_init__(self) -> None:
        if not self.content:
            raise ValueError("ToolResult content cannot be empty")

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"content": [block.to_dict() for block in self.content]}
        if self.is_error:
            payload["isError"] = True
        return payload


@dataclass(frozen=True)
class ToolHints:
    read_only: bool = False
    destructive: bool = False
    idempotent: bool = False


READ_ONLY_HINTS = ToolHints(read_only=True, destructive=False, idempotent=True)


class Tool(Protocol):
    @property
    def id(self) -> str: ...

    @property
    def description(self) -> str: ...

    @property
    def schema(self) -> type[ToolArgs]: ...

    @property
    def hints(self) -> ToolHints: ...

    async def handler(self, args: Any) -> ToolResult: ...


def text_result(text: str, is_error: bool = False) -> ToolResult:
    return ToolResult(content=[TextContent(text=text)], is_error=is_error)


def error_result(message: str) -> ToolResult:
    return text_result(message, is_error=True)
