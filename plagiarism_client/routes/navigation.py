import logging
from typing import List, Optional

logger = logging.getLogger(__name__)

CHECK_ROUTE = "/check"
RESULTS_ROUTE = "/results/{task_id}"


def results_path(task_id: str) -> str:
    return RESULTS_ROUTE.format(task_id=task_id)


class Navigator:
    """
    Route hand-off between views. Only the task identifier travels through
    navigation, never the result itself.
    """

    def __init__(self):
        self.history: List[str] = []

    @property
    def current(self) -> Optional[str]:
        return self.history[-1] if self.history else None

    def to_results(self, task_id: str) -> None:
        self._go(results_path(task_id))

    def to_check(self) -> None:
        self._go(CHECK_ROUTE)

    def _go(self, path: str) -> None:
        logger.info(f"Navigating to {path}")
        self.history.append(path)
