"""Compensating sequences for multi-step writes that the store cannot group atomically."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional

from famly import metrics
from famly.errors import PartialCompletionError

logger = logging.getLogger(__name__)

Action = Callable[[], Any]
Compensation = Callable[[Any], None]


@dataclass
class _Step:
    name: str
    action: Action
    compensation: Optional[Compensation]


@dataclass
class Saga:
    """Run steps in order; on failure undo the completed ones in reverse.

    Each compensation receives the value its step returned. When every
    compensation succeeds the original error is re-raised unchanged. When a
    compensation fails, :class:`PartialCompletionError` is raised listing the
    steps whose effects remain.
    """

    name: str
    _steps: List[_Step] = field(default_factory=list)

    def step(
        self,
        name: str,
        action: Action,
        compensation: Optional[Compensation] = None,
    ) -> "Saga":
        self._steps.append(_Step(name, action, compensation))
        return self

    def run(self) -> List[Any]:
        completed: List[tuple[_Step, Any]] = []
        for step in self._steps:
            try:
                result = step.action()
            except Exception as exc:
                logger.warning("%s failed at step %s: %s", self.name, step.name, exc)
                self._compensate(completed, exc)
                raise
            completed.append((step, result))
        return [result for _, result in completed]

    def _compensate(self, completed: List[tuple[_Step, Any]], cause: Exception) -> None:
        remaining = [step.name for step, _ in completed]
        for step, result in reversed(completed):
            if step.compensation is None:
                continue
            try:
                step.compensation(result)
            except Exception as undo_exc:
                metrics.SAGA_COMPENSATIONS.labels(sequence=self.name, result="failed").inc()
                logger.error(
                    "%s compensation for step %s failed: %s",
                    self.name,
                    step.name,
                    undo_exc,
                    exc_info=True,
                )
                raise PartialCompletionError(self.name, remaining, cause) from undo_exc
            metrics.SAGA_COMPENSATIONS.labels(sequence=self.name, result="ok").inc()
            remaining.remove(step.name)
            logger.info("%s compensated step %s", self.name, step.name)
        if remaining:
            # Steps without a compensation stay applied.
            raise PartialCompletionError(self.name, remaining, cause) from cause


__all__ = ["Saga"]
