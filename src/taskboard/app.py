"""Wiring of stores, repositories and services."""

from __future__ import annotations

from dataclasses import dataclass

from .config import Settings
from .models import BoardConfig
from .repositories import LabelRepository, TaskListRepository, TaskRepository
from .services import BoardService, LabelService, PartitionLocks, PositionSequencer
from .store import DynamoDBStore, StoreGateway


@dataclass
class TaskboardApp:
    """The services of one taskboard deployment, sharing one store."""

    settings: Settings
    store: StoreGateway
    board_config: BoardConfig
    tasks: TaskRepository
    task_lists: TaskListRepository
    labels: LabelRepository
    sequencer: PositionSequencer
    board: BoardService
    label_service: LabelService


def build_app(settings: Settings | None = None, store: StoreGateway | None = None) -> TaskboardApp:
    """
    Assemble the services.

    Args:
        settings: Settings (read from the environment if omitted)
        store: Store gateway (a DynamoDB gateway built from settings if omitted)
    """
    settings = settings or Settings()
    if store is None:
        store = DynamoDBStore(region=settings.region, endpoint_url=settings.endpoint_url)

    board_config = BoardConfig.load(settings.config_file)
    tasks = TaskRepository(store, settings)
    task_lists = TaskListRepository(store, tasks, settings)
    labels = LabelRepository(store, settings)
    sequencer = PositionSequencer(
        tasks,
        locks=PartitionLocks(timeout=settings.lock_timeout),
        verify_ordering=settings.verify_ordering,
    )
    return TaskboardApp(
        settings=settings,
        store=store,
        board_config=board_config,
        tasks=tasks,
        task_lists=task_lists,
        labels=labels,
        sequencer=sequencer,
        board=BoardService(tasks, task_lists, sequencer, board_config),
        label_service=LabelService(labels),
    )
