"""Models for probe runs."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable

from .config import ProbeConfig
from .constants import ALL_OPERATIONS, CANONICAL_SEQUENCE, OP_CONNECT
from .exceptions import ProbeStepError


@dataclass(frozen=True)
class OperationOutcome:
    """Result of one probe step."""

    operation: str
    success: bool
    duration: float

    def __post_init__(self) -> None:
        if self.operation not in ALL_OPERATIONS:
            raise ValueError(f"Unknown operation: {self.operation}")

    @classmethod
    def sentinel(cls, operation: str, timeout: float) -> OperationOutcome:
        """Failure for a step that was not attempted because of an upstream failure.

        The duration is pinned to the operation timeout so the duration series
        is still present for the step.
        """
        return cls(operation=operation, success=False, duration=float(timeout))

    @classmethod
    def connect_failure(cls) -> OperationOutcome:
        """Failure for the untimed connect step."""
        return cls(operation=OP_CONNECT, success=False, duration=0.0)


OutcomeSink = Callable[[OperationOutcome], None]


@dataclass
class ProbeRun:
    """Execution context of a single probe.

    Outcomes are forwarded to the sink as soon as they are recorded.
    """

    config: ProbeConfig
    client: Any = None
    sink: OutcomeSink | None = None
    outcomes: list[OperationOutcome] = field(default_factory=list)
    errors: list[ProbeStepError] = field(default_factory=list)

    def record(self, outcome: OperationOutcome) -> None:
        """Record an outcome, enforcing canonical order and uniqueness."""
        seen = {o.operation for o in self.outcomes}
        if outcome.operation in seen:
            raise ValueError(f"Operation already recorded: {outcome.operation}")

        if outcome.operation == OP_CONNECT:
            if self.outcomes:
                raise ValueError("connect must be the only outcome of a run")
        else:
            if OP_CONNECT in seen:
                raise ValueError("No outcomes may follow a connect failure")
            position = CANONICAL_SEQUENCE.index(outcome.operation)
            if self.outcomes and CANONICAL_SEQUENCE.index(self.outcomes[-1].operation) > position:
                raise ValueError(f"Operation out of order: {outcome.operation}")

        self.outcomes.append(outcome)
        if self.sink is not None:
            self.sink(outcome)

    def add_error(self, error: ProbeStepError) -> None:
        self.errors.append(error)

    @property
    def operations(self) -> list[str]:
        return [o.operation for o in self.outcomes]

    @property
    def success(self) -> bool:
        """True when every recorded step succeeded."""
        return bool(self.outcomes) and all(o.success for o in self.outcomes)
