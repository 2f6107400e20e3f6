from dataclasses import dataclass
from typing import Iterable

from models import Task


@dataclass(frozen=True)
class Progress:
    completed: int = 0
    pending: int = 0

    @property
    def total(self) -> int:
        return self.completed + self.pending

    @property
    def percentage(self) -> float:
        """Completion rate in percent, 0 when there are no items"""
        if self.total == 0:
            return 0.0
        return self.completed / self.total * 100


def compute_progress(tasks: Iterable[Task]) -> Progress:
    """Count completed and pending checklist items across all tasks"""
    completed = 0
    pending = 0
    for task in tasks:
        for item in task.items:
            if item.is_completed:
                completed += 1
            else:
                pending += 1
    return Progress(completed=completed, pending=pending)
