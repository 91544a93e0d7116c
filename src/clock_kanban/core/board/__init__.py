"""
Board ingestion, column transitions and the board service.
"""

from .ingest import apply_live_intervals, build_task, display_time, ingest
from .service import BoardService
from .transition import TransitionController, TransitionResult

__all__ = [
    "BoardService",
    "TransitionController",
    "TransitionResult",
    "apply_live_intervals",
    "build_task",
    "display_time",
    "ingest",
]
