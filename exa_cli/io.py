"""
CLI input/output plumbing.

Input comes from exactly one source, first match wins:
--input-file, --input @path, --input literal, then stdin when it is not a
terminal. Stdin objects differ in what they can do, so the capability is probed
once into a tagged union (WholeRead / ChunkStream / EventPush) and read through
the matching branch.
"""

from __future__ import annotations

import asyncio
import codecs
import inspect
import json
import math
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Literal, Protocol, Union


class TextSink(Protocol):
    def write(self, chunk: str) -> Any: ...


@dataclass
class CliIO:
    stdin: Any
    stdout: TextSink
    stderr: TextSink


def default_io() -> CliIO:
    return CliIO(stdin=sys.stdin, stdout=sys.stdout, stderr=sys.stderr)


@dataclass(frozen=True)
class WholeRead:
    read: Callable[[], Any]
    kind: Literal["whole"] = "whole"


@dataclass(frozen=True)
class ChunkStream:
    chunks: Any
    kind: Literal["chunks"] = "chunks"


@dataclass(frozen=True)
class EventPush:
    on: Callable[[str, Callable[..., Any]], Any]
    set_encoding: Callable[[str], Any] | None = None
    kind: Literal["events"] = "events"


StdinSource = Union[WholeRead, ChunkStream, EventPush]


def probe_stdin(stdin: Any) -> StdinSource | None:
    read = getattr(stdin, "read", None)
    if callable(read):
        return WholeRead(read=read)
    if hasattr(stdin, "__aiter__"):
        return ChunkStream(chunks=stdin)
    on = getattr(stdin, "on", None)
    if callable(on):
        set_encoding = getattr(stdin, "set_encoding", None)
        return EventPush(on=on, set_encoding=set_encoding if callable(set_encoding) else None)
    return None


def _as_text(chunk: Any, decoder: codecs.IncrementalDecoder) -> str:
    if chunk is None:
        return ""
    if isinstance(chunk, (bytes, bytearray, memoryview)):
        return decoder.decode(bytes(chunk))
    return str(chunk)


async def _read_whole(source: WholeRead) -> str:
    if inspect.iscoroutinefunction(source.read):
        data = await source.read()
    else:
        data = await asyncio.to_thread(source.read)
        if inspect.isawaitable(data):
            data = await data
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    return _as_text(data, decoder) + decoder.decode(b"", final=True)


async def _read_chunks(source: ChunkStream) -> str:
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    parts: list[str] = []
    async for chunk in source.chunks:
        parts.append(_as_text(chunk, decoder))
    parts.append(decoder.decode(b"", final=True))
    return "".join(parts)


async def _read_events(source: EventPush) -> str:
    loop = asyncio.get_running_loop()
    done: asyncio.Future[str] = loop.create_future()
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    parts: list[str] = []

    def on_data(chunk: Any = None) -> None:
        if not done.done():
            parts.append(_as_text(chunk, decoder))

    def on_end(*_: Any) -> None:
        if not done.done():
            parts.append(decoder.decode(b"", final=True))
            done.set_result("".join(parts))

    def on_error(error: Any = None) -> None:
        if done.done():
            return
        if isinstance(error, BaseException):
            done.set_exception(error)
        else:
            done.set_exception(OSError(f"stdin error: {error}"))

    if source.set_encoding is not None:
        source.set_encoding("utf8")
    source.on("data", on_data)
    source.on("end", on_end)
    source.on("error", on_error)
    return await done


async def read_stdin(stdin: Any) -> str:
    source = probe_stdin(stdin)
    if source is None:
        return ""
    if source.kind == "whole":
        return await _read_whole(source)
    if source.kind == "chunks":
        return await _read_chunks(source)
    return await _read_events(source)


def is_terminal(stdin: Any) -> bool:
    isatty = getattr(stdin, "isatty", None)
    if callable(isatty):
        return bool(isatty())
    size = getattr(stdin, "size", None)
    if isinstance(size, (int, float)) and not isinstance(size, bool):
        return not math.isfinite(size)
    return False


def _read_file(path: str) -> str:
    return Path(path).read_text(encoding="utf-8")


async def resolve_input(options: Any, stdin: Any) -> str | None:
    """
    Return the raw JSON text for a tool call, or None when there is none.

    options needs `input` and `input_file` attributes (CliOptions). Stdin that is
    empty or only whitespace counts as no input; non-empty stdin is returned as is.
    """
    if options.input_file:
        return _read_file(options.input_file)
    if options.input and options.input.startswith("@"):
        return _read_file(options.input[1:])
    if options.input:
        return options.input
    if is_terminal(stdin):
        return None
    data = await read_stdin(stdin)
    return data if data.strip() else None


def print_json(payload: Any, pretty: bool, stdout: TextSink) -> None:
    if pretty:
        text = json.dumps(payload, indent=2, ensure_ascii=False)
    else:
        text = json.dumps(payload, separators=(",", ":"), ensure_ascii=False)
    stdout.write(f"{text}\n")


def format_error(message: str) -> dict[str, Any]:
    return {"content": [{"type": "text", "text": message}], "isError": True}
