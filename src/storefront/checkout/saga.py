"""Compensation log for multi-step workflows.

Each completed step records how to undo itself. When a later step fails the
recorded undos run newest first; an undo that fails is logged and counted,
and the remaining undos still run.
"""

from collections.abc import Callable
from dataclasses import dataclass

import structlog

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Compensation:
    description: str
    action: Callable[[], None]


class Compensations:
    def __init__(self) -> None:
        self._pending: list[Compensation] = []

    def __len__(self) -> int:
        return len(self._pending)

    def record(self, description: str, action: Callable[[], None]) -> None:
        self._pending.append(Compensation(description, action))

    def discard(self) -> None:
        """Forget recorded undos once the workflow has committed."""
        self._pending.clear()

    def unwind(self) -> tuple[int, int]:
        """Run recorded undos in reverse; return ``(run, failed)``."""
        run = failed = 0
        while self._pending:
            compensation = self._pending.pop()
            try:
                compensation.action()
                run += 1
            except Exception:
                failed += 1
                logger.exception("Compensation failed", step=compensation.description)
        return run, failed
