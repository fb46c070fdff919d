"""Service layer for business logic."""

from .board_service import BoardService
from .label_service import LabelService
from .partition_lock import PartitionLocks
from .position_sequencer import PositionSequencer, target_rank

__all__ = [
    "BoardService",
    "LabelService",
    "PartitionLocks",
    "PositionSequencer",
    "target_rank",
]
