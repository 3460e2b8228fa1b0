"""Host-side save/load of script text keyed by a path."""

from __future__ import annotations

from pathlib import Path
from typing import Union

PathLike = Union[str, Path]

def load_text(path: PathLike) -> str:
    return Path(path).read_text(encoding="utf-8")

def save_text(path: PathLike, content: str) -> None:
    Path(path).write_text(content, encoding="utf-8")
