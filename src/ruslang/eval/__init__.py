"""Evaluator helper modules for the ruslang runtime."""

__all__ = [
    "bind",
    "blocks",
    "common",
    "expr",
    "fn",
    "loops",
]
