from __future__ import annotations

import asyncio
import io
import json
from pathlib import Path
from typing import Any

import pytest

from exa_cli import cli
from exa_cli.io import CliIO
from exa_cli.tools.base import READ_ONLY_HINTS, ToolArgs, ToolHints, ToolResult, error_result, text_result
from exa_cli.tools.registry import TOOL_IDS, ToolRegistry


class _TtyStdin(io.StringIO):
    def isatty(self) -> bool:
        return True


class _PipeStdin(io.StringIO):
    def isatty(self) -> bool:
        return False


class DummyArgs(ToolArgs):
    query: str


class DummyTool:
    def __init__(self, result: ToolResult | None = None, error: Exception | None = None) -> None:
        self.calls: list[DummyArgs] = []
        self._result = result
        self._error = error

    @property
    def id(self) -> str:
        return "dummy"

    @property
    def description(self) -> str:
        return "Dummy tool"

    @property
    def schema(self) -> type[DummyArgs]:
        return DummyArgs

    @property
    def hints(self) -> ToolHints:
        return READ_ONLY_HINTS

    async def handler(self, args: DummyArgs) -> ToolResult:
        self.calls.append(args)
        if self._error is not None:
            raise self._error
        return self._result or text_result(f"ok:{args.query}")


@pytest.fixture
def dummy(monkeypatch: pytest.MonkeyPatch) -> dict[str, Any]:
    state: dict[str, Any] = {"tool": DummyTool(), "configs": []}

    def _registry(config: Any = None) -> ToolRegistry:
        registry = ToolRegistry(allowed_ids=("dummy",))
        registry.register(state["tool"])
        return registry

    def _definition(tool_id: str, config: Any = None) -> Any:
        state["configs"].append(config)
        return _registry(config).find(tool_id)

    monkeypatch.setattr(cli, "create_tool_registry", _registry)
    monkeypatch.setattr(cli, "get_tool_definition", _definition)
    return state


def _run(argv: list[str], stdin: Any = None) -> tuple[int, str, str]:
    stdout = io.StringIO()
    stderr = io.StringIO()
    code = asyncio.run(cli.run_cli(argv, CliIO(stdin=stdin or _TtyStdin(), stdout=stdout, stderr=stderr)))
    return code, stdout.getvalue(), stderr.getvalue()


def _error_payload(message: str) -> str:
    return json.dumps({"content": [{"type": "text", "text": message}], "isError": True}, separators=(",", ":")) + "\n"


def test_parse_args_collects_flags_and_first_positional() -> None:
    options = cli.parse_args(["", "dummy", "extra", "--pretty", "-i", "{}", "--api-key", "k", "--input-file", "f"])
    assert options == cli.CliOptions(
        tool_id="dummy", input="{}", input_file="f", api_key="k", pretty=True, list_tools=False, help=False
    )


def test_parse_args_value_flag_at_end_has_no_value() -> None:
    assert cli.parse_args(["dummy", "--input"]).input is None


@pytest.mark.parametrize("flag", ["--help", "-h"])
def test_help_prints_usage(dummy: dict[str, Any], flag: str) -> None:
    code, out, err = _run([flag, "dummy"])
    assert code == 0
    assert out == cli.USAGE
    assert out.startswith("\nUsage:")
    assert err == ""


def test_list_tools_prints_catalog_and_is_repeatable(dummy: dict[str, Any]) -> None:
    first = _run(["--list-tools"])
    second = _run(["--list-tools"])
    assert first == second
    code, out, _ = first
    assert code == 0
    assert json.loads(out) == [{"id": "dummy", "description": "Dummy tool"}]
    assert out == json.dumps([{"id": "dummy", "description": "Dummy tool"}], indent=2) + "\n"


def test_list_tools_with_real_catalog() -> None:
    code, out, _ = _run(["--list-tools"])
    assert code == 0
    assert [entry["id"] for entry in json.loads(out)] == list(TOOL_IDS)


def test_missing_tool_id(dummy: dict[str, Any]) -> None:
    code, out, err = _run([])
    assert code == 1
    assert err == "Missing tool_id.\n"
    assert out == cli.USAGE


def test_empty_argv_entries_are_ignored(dummy: dict[str, Any]) -> None:
    code, out, err = _run(["", "", "--help"])
    assert code == 0
    assert out == cli.USAGE


def test_unknown_tool(dummy: dict[str, Any]) -> None:
    code, out, _ = _run(["nope", "--input", '{"query":"x"}'])
    assert code == 1
    assert out == _error_payload("Unknown tool: nope")


def test_literal_input_runs_tool(dummy: dict[str, Any]) -> None:
    code, out, err = _run(["dummy", "--input", '{"query":"hello"}'])
    assert code == 0
    assert out == '{"content":[{"type":"text","text":"ok:hello"}]}\n'
    assert err == ""
    assert dummy["tool"].calls == [DummyArgs(query="hello")]


def test_api_key_flag_reaches_tool_config(dummy: dict[str, Any]) -> None:
    _run(["dummy", "--api-key", "secret", "--input", '{"query":"k"}'])
    assert dummy["configs"][-1].exa_api_key == "secret"


def test_extra_positionals_are_ignored(dummy: dict[str, Any]) -> None:
    code, out, _ = _run(["dummy", "ignored", "--input", '{"query":"x"}'])
    assert code == 0
    assert "ok:x" in out


def test_missing_input_on_terminal(dummy: dict[str, Any]) -> None:
    code, out, _ = _run(["dummy"], stdin=_TtyStdin('{"query":"unused"}'))
    assert code == 1
    assert out == _error_payload(cli.MISSING_INPUT_MESSAGE)
    assert dummy["tool"].calls == []


def test_reads_piped_stdin(dummy: dict[str, Any]) -> None:
    code, out, _ = _run(["dummy"], stdin=_PipeStdin('{"query":"piped"}\n'))
    assert code == 0
    assert "ok:piped" in out


def test_whitespace_stdin_counts_as_missing(dummy: dict[str, Any]) -> None:
    code, out, _ = _run(["dummy"], stdin=_PipeStdin("  \n"))
    assert code == 1
    assert out == _error_payload(cli.MISSING_INPUT_MESSAGE)


def test_input_file_and_at_file(dummy: dict[str, Any], tmp_path: Path) -> None:
    path = tmp_path / "input.json"
    path.write_text('{"query":"from-file"}', encoding="utf-8")

    assert "ok:from-file" in _run(["dummy", "--input-file", str(path)])[1]
    assert "ok:from-file" in _run(["dummy", "--input", f"@{path}"])[1]
    # --input-file is consulted before --input
    assert "ok:from-file" in _run(["dummy", "--input", '{"query":"literal"}', "--input-file", str(path)])[1]


@pytest.mark.parametrize("flag", ["--input-file", "--input"])
def test_empty_input_file_counts_as_missing(dummy: dict[str, Any], tmp_path: Path, flag: str) -> None:
    path = tmp_path / "empty.json"
    path.write_text("", encoding="utf-8")
    value = str(path) if flag == "--input-file" else f"@{path}"
    code, out, _ = _run(["dummy", flag, value])
    assert code == 1
    assert out == _error_payload(cli.MISSING_INPUT_MESSAGE)
    assert dummy["tool"].calls == []


def test_missing_at_file_is_cli_error(dummy: dict[str, Any], tmp_path: Path) -> None:
    code, out, _ = _run(["dummy", "--input", f"@{tmp_path / 'missing.json'}"])
    assert code == 1
    assert json.loads(out)["content"][0]["text"].startswith("CLI error: ")


def test_invalid_json_is_cli_error(dummy: dict[str, Any]) -> None:
    code, out, _ = _run(["dummy", "--input", "{not json"])
    assert code == 1
    payload = json.loads(out)
    assert payload["isError"] is True
    assert payload["content"][0]["text"].startswith("CLI error: ")
    assert dummy["tool"].calls == []


def test_schema_violation_is_cli_error(dummy: dict[str, Any]) -> None:
    code, out, _ = _run(["dummy", "--input", '{"query":42}'])
    assert code == 1
    text = json.loads(out)["content"][0]["text"]
    assert text.startswith("CLI error: Invalid arguments for dummy: query:")
    assert dummy["tool"].calls == []


def test_handler_exception_is_cli_error(dummy: dict[str, Any]) -> None:
    dummy["tool"] = DummyTool(error=RuntimeError("kaboom"))
    code, out, _ = _run(["dummy", "--input", '{"query":"x"}'])
    assert code == 1
    assert out == _error_payload("CLI error: kaboom")


def test_error_result_exits_one_and_pretty_prints(dummy: dict[str, Any]) -> None:
    dummy["tool"] = DummyTool(result=error_result("Search error (500): bad"))
    code, out, _ = _run(["dummy", "--pretty", "--input", '{"query":"x"}'])
    assert code == 1
    assert out == json.dumps(
        {"content": [{"type": "text", "text": "Search error (500): bad"}], "isError": True}, indent=2
    ) + "\n"


def test_main_returns_exit_code(dummy: dict[str, Any], capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["--help"]) == 0
    assert capsys.readouterr().out == cli.USAGE
    assert cli.main([]) == 1
    assert capsys.readouterr().err.endswith("Missing tool_id.\n")


def test_main_reports_unexpected_failures(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    async def _explode(argv: Any = None, io: Any = None) -> int:
        raise RuntimeError("stdout closed")

    monkeypatch.setattr(cli, "run_cli", _explode)
    assert cli.main(["dummy"]) == 1
    assert capsys.readouterr().err == "CLI error: stdout closed\n"
