"""
Ordered multi-step operations with compensating actions.

A Saga runs a list of steps in order. Each step may register a compensation
that undoes it. When a step raises, the compensations of the steps that
already completed run in reverse order, then the original exception is
re-raised. A failing compensation is logged and skipped; it never replaces
the original error.

This is not a distributed transaction: writes that a compensation does not
cover stay applied.

Example:
    saga = Saga("provision-user")
    user_id = saga.run("create_identity", create, compensate=lambda uid: delete(uid))
    saga.run("assign_role", lambda: assign(user_id))
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class AppliedStep:
    """A completed step whose compensation is pending."""

    name: str
    result: Any
    compensate: Callable[[Any], None]


class Saga:
    """
    Runs steps sequentially and unwinds applied compensations on failure.

    Steps execute immediately when passed to run(), so each step can use the
    result of the previous one.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._applied: list[AppliedStep] = []

    @property
    def applied_steps(self) -> list[str]:
        """Names of the completed steps that registered a compensation."""
        return [step.name for step in self._applied]

    def run(
        self,
        step_name: str,
        action: Callable[[], T],
        compensate: Optional[Callable[[T], None]] = None,
    ) -> T:
        """
        Execute a step.

        Args:
            step_name: Name used in logs
            action: Callable performing the step; its return value is passed
                to the compensation and returned to the caller
            compensate: Optional callable undoing the step

        Returns:
            The action's result

        Raises:
            Whatever the action raised, after unwinding applied compensations
        """
        try:
            result = action()
        except Exception:
            logger.error(f"Saga {self.name}: step '{step_name}' failed, unwinding")
            self.unwind()
            raise

        if compensate is not None:
            self._applied.append(AppliedStep(step_name, result, compensate))
        return result

    def unwind(self) -> None:
        """Run pending compensations in reverse order, then clear them."""
        while self._applied:
            step = self._applied.pop()
            try:
                step.compensate(step.result)
            except Exception as e:
                logger.error(
                    f"Saga {self.name}: compensation for '{step.name}' failed: {e}"
                )

    def complete(self) -> None:
        """Mark the saga finished; nothing will be compensated afterwards."""
        self._applied.clear()
