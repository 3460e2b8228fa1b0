from __future__ import annotations

import os

import pytest

from ruslang.repl import ReplState, _handle_slash, _normalize, _run_snippet, is_complete
from ruslang.repl_highlight import GROUP_STYLE, highlight_line

COMPLETION_CASES = [
    pytest.param("print(1);", True, id="statement"),
    pytest.param("print(1)", False, id="missing-semicolon"),
    pytest.param("function f(x) {", False, id="open-brace"),
    pytest.param("function f(x) { return x; }", True, id="closed-function"),
    pytest.param("if (x > 1) { print(x); } else {", False, id="open-else"),
    pytest.param("let s = \"a;", False, id="unterminated-string-waits"),
    pytest.param("let x = 1 @", True, id="lex-error-submits"),
    pytest.param("// just a comment", True, id="comment-only"),
]


@pytest.mark.parametrize("text, expected", COMPLETION_CASES)
def test_is_complete(text: str, expected: bool) -> None:
    assert is_complete(text) is expected


def test_highlight_groups() -> None:
    fragments = highlight_line('let y = sqrt(x); // note')
    styled = {text: style for style, text in fragments}

    assert styled["let"] == GROUP_STYLE["keyword"]
    assert styled["sqrt"] == GROUP_STYLE["function"]
    assert styled["x"] == GROUP_STYLE["identifier"]
    assert "".join(text for _, text in fragments) == "let y = sqrt(x); // note"


def test_highlight_keeps_text_on_lex_error() -> None:
    assert highlight_line("let @") == [("", "let @")]


def test_locale_command() -> None:
    state = ReplState()

    assert _handle_slash("/locale ru", state)
    assert state.locale == "ru"
    assert _handle_slash("/locale xx", state)
    assert state.locale == "ru"
    assert not _handle_slash("print(1);", state)


def test_py_traceback_toggle(monkeypatch) -> None:
    monkeypatch.setenv("RUSLANG_DEBUG_PY_TRACE", "0")
    state = ReplState()

    _handle_slash("/py-traceback on", state)
    assert _handle_slash("/py-traceback", state)

    assert "RUSLANG_DEBUG_PY_TRACE" not in os.environ


def test_save_and_load_commands(tmp_path, capsys) -> None:
    state = ReplState(locale="ru")
    path = tmp_path / "snippet.rus"

    _run_snippet("печать(1 < 2);", state)
    _handle_slash(f"/save {path}", state)
    _handle_slash(f"/load {path}", state)

    out = capsys.readouterr().out
    assert out.count("истина\n") == 2
    assert path.read_text(encoding="utf-8") == "печать(1 < 2);"


def test_snippets_do_not_share_state(capsys) -> None:
    state = ReplState()

    assert _run_snippet("let x = 1;", state).success
    assert not _run_snippet("print(x);", state).success
    assert "variable 'x' not found" in capsys.readouterr().err


def test_normalize_strips_invisible() -> None:
    assert _normalize("print(1);\u200b\r") == "print(1);"
