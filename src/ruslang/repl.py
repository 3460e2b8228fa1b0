"""Interactive REPL for ruslang, powered by prompt_toolkit.

Every submitted snippet runs as its own request: variables and functions do
not carry over from one submission to the next.
"""

from __future__ import annotations

import os
import re
import sys
import traceback
from dataclasses import dataclass
from typing import Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.shortcuts import clear

from .files import load_text, save_text
from .lexer_rd import LexError, tokenize
from .repl_highlight import RusLexer
from .runner import CompilationResult, run
from .runtime import Settings
from .token_types import TT
from .utils import debug_py_trace_enabled

# Zero-width and invisible characters to strip from input.
_INVISIBLE_RE = re.compile("[\u200b\u200c\u200d\ufeff\u00a0\r]")

# Slash commands: name => (description, argument_hint).
_SLASH_CMDS = {
    "/clear": ("Clear the terminal screen", ""),
    "/load": ("Run a script file", "PATH"),
    "/save": ("Save the last snippet to a file", "PATH"),
    "/locale": ("Switch print spellings", "en|ru"),
    "/py-traceback": ("Toggle Python traceback on errors", "[on|off]"),
}

_OPEN = {TT.LPAR, TT.LBRACE}
_CLOSE = {TT.RPAR, TT.RBRACE}
_TERMINATORS = {TT.SEMI, TT.RBRACE}


@dataclass
class ReplState:
    locale: str = "en"
    last_source: Optional[str] = None


def is_complete(text: str) -> bool:
    """Return True once *text* has balanced brackets and ends a statement."""
    try:
        tokens = tokenize(text)
    except LexError:
        # Submit so the diagnostic is shown.
        return True

    depth = 0
    last_sig = None

    for tok in tokens:
        if tok.type == TT.EOF:
            break
        if tok.type in _OPEN:
            depth += 1
        elif tok.type in _CLOSE:
            depth -= 1
        last_sig = tok.type

    if last_sig is None:
        return True

    return depth <= 0 and last_sig in _TERMINATORS


class _SlashCompleter(Completer):
    """Autocomplete slash commands on the primary prompt."""

    def get_completions(self, document, complete_event):
        text = document.text_before_cursor
        if not text.startswith("/"):
            return

        for cmd, (desc, hint) in _SLASH_CMDS.items():
            if cmd.startswith(text):
                yield Completion(
                    cmd,
                    start_position=-len(text),
                    display_meta=f"{desc} {hint}".strip(),
                )


def _handle_slash(line: str, state: ReplState) -> bool:
    """Handle slash commands. Returns True if the line was a command."""
    stripped = line.strip()
    if not stripped.startswith("/"):
        return False

    parts = stripped.split(None, 1)
    cmd = parts[0]
    arg = parts[1] if len(parts) > 1 else ""

    if cmd == "/clear":
        clear()
        return True

    if cmd == "/load":
        if not arg:
            print("Usage: /load PATH", file=sys.stderr)
            return True
        try:
            source = load_text(arg)
        except OSError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return True
        _run_snippet(source, state)
        return True

    if cmd == "/save":
        if not arg or state.last_source is None:
            print("Usage: /save PATH (after running a snippet)", file=sys.stderr)
            return True
        try:
            save_text(arg, state.last_source)
        except OSError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return True
        print(f"Saved to {arg}")
        return True

    if cmd == "/locale":
        if arg not in ("en", "ru"):
            print("Usage: /locale en|ru", file=sys.stderr)
            return True
        state.locale = arg
        print(f"Locale: {arg}")
        return True

    if cmd == "/py-traceback":
        if arg.lower() in ("on", "1", "true", "yes"):
            os.environ["RUSLANG_DEBUG_PY_TRACE"] = "1"
        elif arg.lower() in ("off", "0", "false", "no"):
            os.environ.pop("RUSLANG_DEBUG_PY_TRACE", None)
        elif arg == "":
            # Toggle.
            if debug_py_trace_enabled():
                os.environ.pop("RUSLANG_DEBUG_PY_TRACE", None)
            else:
                os.environ["RUSLANG_DEBUG_PY_TRACE"] = "1"
        else:
            print("Usage: /py-traceback [on|off]", file=sys.stderr)
            return True

        state_word = "on" if debug_py_trace_enabled() else "off"
        print(f"Python traceback: {state_word}")
        return True

    print(f"Unknown command: {cmd}", file=sys.stderr)
    return True


def _normalize(text: str) -> str:
    """Strip invisible characters from input."""
    return _INVISIBLE_RE.sub("", text)


def _report(result: CompilationResult) -> None:
    sys.stdout.write(result.output)

    for plot in result.plots:
        print(f"[plot] {plot.label}: {len(plot.points)} points")

    for err in result.errors:
        print(f"Error: {err}", file=sys.stderr)

    if result.cause is not None and debug_py_trace_enabled():
        print("\nPython traceback:", file=sys.stderr)
        print("".join(traceback.format_exception(result.cause)), file=sys.stderr, end="")


def _run_snippet(source: str, state: ReplState) -> CompilationResult:
    state.last_source = source
    result = run(source, settings=Settings(locale=state.locale))
    _report(result)
    return result


def repl(locale: str = "en") -> None:
    """Interactive read-eval-print loop with prompt_toolkit."""
    state = ReplState(locale=locale)
    bindings = KeyBindings()

    @bindings.add("enter")
    def _enter(event):
        buf = event.app.current_buffer
        text = buf.text

        if text.strip().startswith("/") or is_complete(text):
            buf.validate_and_handle()
            return

        buf.insert_text("\n")

    session: PromptSession[str] = PromptSession(
        history=InMemoryHistory(),
        lexer=RusLexer(),
        completer=_SlashCompleter(),
        complete_while_typing=True,
        key_bindings=bindings,
        multiline=True,
        prompt_continuation="... ",
    )

    print("ruslang repl (Ctrl-D to exit, / for commands)")

    while True:
        try:
            text = session.prompt(">>> ")
        except EOFError:
            print()
            break
        except KeyboardInterrupt:
            print("KeyboardInterrupt")
            continue

        text = _normalize(text)
        if not text.strip():
            continue

        # Slash command?
        if _handle_slash(text, state):
            continue

        try:
            _run_snippet(text, state)
        except KeyboardInterrupt:
            # Scripts have no timeout; Ctrl-C is the way out of a runaway loop.
            print("KeyboardInterrupt", file=sys.stderr)


if __name__ == "__main__":
    repl()
