"""
Состояния запуска ассистента и правило перехода цикла опроса.
"""
import logging
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)

class RunStatus(str, Enum):
    QUEUED = "queued"
    IN_PROGRESS = "in_progress"
    REQUIRES_ACTION = "requires_action"
    CANCELLING = "cancelling"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"
    EXPIRED = "expired"
    INCOMPLETE = "incomplete"
    @classmethod
    def parse(cls, value: str) -> Optional["RunStatus"]:
        """None для статуса, которого нет в перечислении."""
        try:
            return cls(value)
        except ValueError:
            logger.warning(f"Неизвестный статус запуска: {value}")
            return None
    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES

TERMINAL_STATUSES = frozenset({
    RunStatus.COMPLETED,
    RunStatus.FAILED,
    RunStatus.CANCELLED,
    RunStatus.EXPIRED,
    RunStatus.INCOMPLETE,
})

class PollAction(str, Enum):
    WAIT = "wait"
    SUBMIT_TOOL_OUTPUTS = "submit_tool_outputs"
    FINISH = "finish"

def next_action(status: Optional[RunStatus]) -> PollAction:
    if status is None:
        return PollAction.WAIT
    if status.is_terminal:
        return PollAction.FINISH
    if status is RunStatus.REQUIRES_ACTION:
        return PollAction.SUBMIT_TOOL_OUTPUTS
    return PollAction.WAIT
