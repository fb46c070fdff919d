"""Terminal output for the taskboard CLI."""

import sys
from typing import TextIO

from ..models import Task

# ANSI color codes
GREEN = "\033[32m"
YELLOW = "\033[33m"
BLUE = "\033[34m"
RED = "\033[31m"
DIM = "\033[2m"
BOLD = "\033[1m"
RESET = "\033[0m"

CHECK = "\u2713"  # ✓
BULLET = "\u2022"  # •
CROSS = "\u2717"  # ✗


def paint(text: str, *codes: str, stream: TextIO | None = None) -> str:
    """Wrap text in ANSI codes when writing to a terminal."""
    stream = stream or sys.stdout
    if not text or not codes or not getattr(stream, "isatty", lambda: False)():
        return text
    return "".join(codes) + text + RESET


def success(message: str) -> None:
    """Print a message prefixed with a green check mark."""
    print(f"{paint(CHECK, GREEN)} {message}")


def info(message: str) -> None:
    """Print a message prefixed with a yellow bullet."""
    print(f"{paint(BULLET, YELLOW)} {message}")


def error(message: str) -> None:
    """Print a message prefixed with a red cross to stderr."""
    print(f"{paint(CROSS, RED, stream=sys.stderr)} {message}", file=sys.stderr)


def list_title(name: str, list_id: str) -> None:
    """Print the heading of a task list."""
    print(f"{paint(name, BOLD, BLUE)} {paint(f'({list_id})', DIM)}")


def column_header(title: str, count: int) -> None:
    """Print a column heading with its task count."""
    print()
    print(paint(f"{title} [{count}]", BLUE))


def task_row(task: Task) -> None:
    """Print one task as position, title, labels and a dimmed id line."""
    labels = f"  [{', '.join(task.label_ids)}]" if task.label_ids else ""
    print(f"  {task.position:>3}  {task.title}{paint(labels, YELLOW)}")
    print(paint(f"       {task.id}", DIM))


def broken_column(column_id: str, positions: list[int]) -> None:
    """Report a column whose positions are not 0..K-1."""
    expected = list(range(len(positions)))
    error(f"{column_id}: positions {positions}, expected {expected}")
