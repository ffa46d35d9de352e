import io
import json
import sys
from pathlib import Path
from typing import Any

import pytest
from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from curly import curly_cli
from curly.curly_errors import ContextError, CurlyError, LexError, ParseError

SOURCE = "let x = 5;\nfunc add(a, b) { return a + b; }\nadd(5, 6);"
RENDERED = "let x = 5;\nfunc add(a, b) {\n    return a + b;\n}\nadd(5, 6);"


def test_run_curly_string_input_prints(capsys: pytest.CaptureFixture[str]) -> None:
    result = curly_cli.run_curly(source=SOURCE, is_string=True)
    out = capsys.readouterr().out
    assert result == RENDERED
    assert out == RENDERED + "\n"


def test_run_curly_file_input(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    file_path = tmp_path / "input.curly"
    file_path.write_text(SOURCE)
    curly_cli.run_curly(source=str(file_path))
    assert RENDERED in capsys.readouterr().out


def test_run_curly_rejects_non_curly_file() -> None:
    with pytest.raises(ValueError, match="Only .curly files are supported."):
        curly_cli.run_curly("example.txt", is_string=False)


def test_run_curly_tokens(capsys: pytest.CaptureFixture[str]) -> None:
    text = curly_cli.run_curly("let x\n= 5", is_string=True, tokens=True)
    assert text.splitlines() == [
        "1:1\tLet\tlet",
        "1:5\tIdentifier\tx",
        "2:1\tEquals\t=",
        "2:3\tNumber\t5",
        "2:4\tEndOfFile\tEndOfFile",
    ]
    assert "Identifier" in capsys.readouterr().out


def test_run_curly_tokens_skips_parsing() -> None:
    # Lexes fine but does not parse.
    text = curly_cli.run_curly("let let", is_string=True, tokens=True)
    assert text.count("Let") == 2


def test_run_curly_json(capsys: pytest.CaptureFixture[str]) -> None:
    text = curly_cli.run_curly("let x = 1;", is_string=True, as_json=True)
    tree = json.loads(text)
    assert tree == {
        "kind": "program",
        "body": [
            {
                "kind": "variable_declaration",
                "constant": False,
                "identifier": "x",
                "value": {"kind": "numeric_literal", "value": 1.0},
            }
        ],
    }
    assert '"kind": "program"' in capsys.readouterr().out


def test_run_curly_pretty_output(capsys: pytest.CaptureFixture[str]) -> None:
    curly_cli.run_curly(source="x;", is_string=True, pretty=True)
    out = capsys.readouterr().out
    assert "Rendered Source" in out
    assert "=" * 20 in out


@pytest.mark.parametrize(  # type: ignore[misc]
    "flags,title",
    [({"tokens": True}, "Tokens"), ({"as_json": True}, "Syntax Tree")],
)
def test_run_curly_pretty_titles(
    flags: dict[str, bool], title: str, capsys: pytest.CaptureFixture[str]
) -> None:
    curly_cli.run_curly(source="x;", is_string=True, pretty=True, **flags)
    assert title in capsys.readouterr().out


def test_run_curly_output_file(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    output_path = tmp_path / "out.curly"
    curly_cli.run_curly(source="let  x =1", is_string=True, out=str(output_path))
    assert output_path.read_text() == "let x = 1;\n"
    assert capsys.readouterr().out == ""


def test_run_curly_output_file_pretty(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    output_path = tmp_path / "out.curly"
    curly_cli.run_curly(source="x;", is_string=True, out=str(output_path), pretty=True)
    assert output_path.read_text().strip() == "x;"
    assert f"(wrote to {output_path})" in capsys.readouterr().out


@pytest.mark.parametrize(  # type: ignore[misc]
    "source,error",
    [
        ('let x = "abc', LexError),
        ("let = 1", ParseError),
        ("break;", ContextError),
    ],
)
def test_run_curly_propagates_errors(source: str, error: type[CurlyError]) -> None:
    with pytest.raises(error):
        curly_cli.run_curly(source, is_string=True)


def test_main_cli_parses(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(sys, "argv", ["curly", "-s", "x;", "--json", "-p"])
    called = {}

    def dummy_run(**kwargs: Any) -> None:
        called.update(kwargs)

    monkeypatch.setattr(curly_cli, "run_curly", dummy_run)
    curly_cli.main()
    assert called == {
        "source": "x;",
        "is_string": True,
        "out": None,
        "tokens": False,
        "as_json": True,
        "pretty": True,
    }


def test_main_runs_file(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    src_file = tmp_path / "prog.curly"
    src_file.write_text("loop { break; }")
    monkeypatch.setattr(sys, "argv", ["curly", str(src_file)])
    curly_cli.main()
    assert capsys.readouterr().out == "loop {\n    break;\n}\n"


def test_main_tokens_and_json_are_exclusive(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(sys, "argv", ["curly", "-s", "x", "--tokens", "--json"])
    with pytest.raises(SystemExit) as e:
        curly_cli.main()
    assert e.value.code == 2


@pytest.mark.parametrize(  # type: ignore[misc]
    "source,expected",
    [
        ("let x = `", "[lexical error] >>> Invalid character '`' at line 1, col 9"),
        ("return 1;", "[context error] >>> Return statement must be inside a function"),
        ("(1", "[syntax error] >>> Expected ')' after expression"),
    ],
)
def test_main_reports_errors_and_exits_1(
    source: str,
    expected: str,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    monkeypatch.setattr(sys, "argv", ["curly", "-s", source])
    with pytest.raises(SystemExit) as e:
        curly_cli.main()
    assert e.value.code == 1
    captured = capsys.readouterr()
    assert expected in captured.err
    assert captured.out == ""


def test_main_calls_repl_on_no_args(monkeypatch: pytest.MonkeyPatch) -> None:
    called = {}

    def fake_repl(*args: Any, **kwargs: Any) -> None:
        called["ran"] = True

    monkeypatch.setattr(sys, "argv", ["curly"])
    monkeypatch.setattr("curly.curly_repl.start_repl", fake_repl)

    curly_cli.main()

    assert called.get("ran") is True


def test_main_repl_flag_calls_repl(monkeypatch: pytest.MonkeyPatch) -> None:
    called_args = {}

    def fake_repl(*, verbose: Any) -> None:
        called_args["verbose"] = verbose

    monkeypatch.setattr("curly.curly_repl.start_repl", fake_repl)
    monkeypatch.setattr(sys, "argv", ["curly", "--repl", "--verbose"])

    curly_cli.main()

    assert called_args["verbose"] is True


@settings(suppress_health_check=[HealthCheck.function_scoped_fixture])  # type: ignore[misc]
@given(st.text(max_size=60))  # type: ignore[misc]
def test_run_curly_random_input_only_raises_curly_errors(source: str) -> None:
    fake_stdout = io.StringIO()
    old_stdout = sys.stdout
    sys.stdout = fake_stdout
    try:
        curly_cli.run_curly(source, is_string=True, tokens=True)
        curly_cli.run_curly(source, is_string=True)
    except CurlyError:
        pass
    finally:
        sys.stdout = old_stdout
