"""Subcommand implementations."""

from __future__ import annotations

import argparse
import logging

from ..app import TaskboardApp
from ..models import MoveTarget, TaskListMetadata
from ..utils import generate_uid
from .output import broken_column, column_header, info, list_title, success, task_row

logger = logging.getLogger(__name__)

# CLI spelling -> move target
RANK_CHOICES = {
    "top": MoveTarget.TOP,
    "bottom": MoveTarget.BOTTOM,
    "up": MoveTarget.ONE_UP,
    "down": MoveTarget.ONE_DOWN,
}


def run_lists(app: TaskboardApp, args: argparse.Namespace) -> int:
    """Print all task lists."""
    lists = app.board.load_lists()
    if not lists:
        info("No task lists")
        return 0
    for task_list in lists:
        info(f"{task_list.name} ({task_list.id}, {task_list.color})")
    return 0


def run_create_list(app: TaskboardApp, args: argparse.Namespace) -> int:
    """Create a task list."""
    metadata = TaskListMetadata(id=args.list_id or generate_uid(), name=args.name, color=args.color)
    app.task_lists.save_metadata(metadata)
    success(f"Created list {metadata.name} ({metadata.id})")
    return 0


def run_show(app: TaskboardApp, args: argparse.Namespace) -> int:
    """Print a list column by column."""
    task_list = app.board.load_board(args.list_id)
    list_title(task_list.name, task_list.id)
    for column_id, tasks in task_list.columns(app.board_config.column_ids).items():
        column_header(app.board_config.get_title(column_id), len(tasks))
        for task in tasks:
            task_row(task)
    return 0


def run_add(app: TaskboardApp, args: argparse.Namespace) -> int:
    """Add a task at the top of a column."""
    task_id = app.board.add_task(
        args.list_id,
        args.column,
        args.title,
        details=args.details,
        label_ids=args.label,
    )
    success(f"Added task {task_id} to {args.column}")
    return 0


def run_edit(app: TaskboardApp, args: argparse.Namespace) -> int:
    """Change title, details or labels of a task."""
    task = app.board.edit_task(
        args.task_id,
        title=args.title,
        details=args.details,
        label_ids=args.label,
    )
    success(f"Updated task {task.id}")
    return 0


def run_delete(app: TaskboardApp, args: argparse.Namespace) -> int:
    """Delete a task."""
    app.board.delete_task(args.list_id, args.task_id)
    success(f"Deleted task {args.task_id}")
    return 0


def run_move(app: TaskboardApp, args: argparse.Namespace) -> int:
    """Move a task to another column."""
    task = app.board.move_task_to_column(args.list_id, args.task_id, args.column)
    success(f"Moved task {task.id} to {task.board_column}")
    return 0


def run_swap(app: TaskboardApp, args: argparse.Namespace) -> int:
    """Swap two tasks of a column."""
    app.board.reorder_tasks(args.task_id, args.other_task_id)
    success(f"Swapped tasks {args.task_id} and {args.other_task_id}")
    return 0


def run_rank(app: TaskboardApp, args: argparse.Namespace) -> int:
    """Move a task within its column."""
    task = app.board.move_task_to_rank(args.task_id, RANK_CHOICES[args.target])
    success(f"Task {task.id} is now at position {task.position}")
    return 0


def run_check(app: TaskboardApp, args: argparse.Namespace) -> int:
    """Report columns whose positions are not dense, optionally renumbering them."""
    broken = app.board.check_list(args.list_id)
    if not broken:
        success(f"All columns of {args.list_id} are in order")
        return 0

    for column_id, positions in broken.items():
        broken_column(column_id, positions)
    if not args.repair:
        return 1

    written = app.board.repair_list(args.list_id)
    success(f"Renumbered {written} task(s)")
    return 0


def run_labels(app: TaskboardApp, args: argparse.Namespace) -> int:
    """Print labels with their usage counts."""
    labels = app.label_service.list_labels_with_counts()
    if not labels:
        info("No labels")
        return 0
    for label, count in labels:
        info(f"{label.name_for(args.language)} ({label.id}, {label.color}): {count} task(s)")
    return 0


def run_delete_label(app: TaskboardApp, args: argparse.Namespace) -> int:
    """Delete an unused label."""
    app.label_service.delete_label(args.label_id)
    success(f"Deleted label {args.label_id}")
    return 0
