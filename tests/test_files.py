from __future__ import annotations

from ruslang.files import load_text, save_text
from tests.support.harness import run_program


def test_save_then_load(tmp_path) -> None:
    path = tmp_path / "script.rus"
    source = 'функция f(x) { вернуть x + 1; }\nпечать(f(1));\n'

    save_text(path, source)

    assert load_text(str(path)) == source
    assert run_program(load_text(path)).output == "2\n"


def test_save_overwrites(tmp_path) -> None:
    path = tmp_path / "out.txt"
    save_text(path, "first")
    save_text(path, "second")

    assert path.read_text(encoding="utf-8") == "second"
