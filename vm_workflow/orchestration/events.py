"""
VM Workflow - Reporter Events

The engine emits structured events instead of formatted strings.
A Reporter decides what to do with them: log them, record them for
tests, drive a progress bar, or any combination.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from vm_workflow.orchestration.registry import ResourceHandle
from vm_workflow.utils.progress import create_progress_tracker

# RollbackStep outcomes
COMPENSATED = 'compensated'
DELETED = 'deleted'
SKIPPED = 'skipped'
FAILED = 'failed'


@dataclass(frozen=True)
class OperationStarted:
    name: str


@dataclass(frozen=True)
class OperationSucceeded:
    name: str
    handle: Optional[ResourceHandle] = None


@dataclass(frozen=True)
class OperationFailed:
    name: str
    error: Exception


@dataclass(frozen=True)
class RollbackStarted:
    count: int = 0


@dataclass(frozen=True)
class RollbackStep:
    name: str
    outcome: str
    error: Optional[Exception] = None


@dataclass(frozen=True)
class RollbackFinished:
    errors: Tuple = field(default_factory=tuple)


class Reporter(ABC):
    """Sink for engine events."""

    @abstractmethod
    def emit(self, event) -> None:
        """Handle one event."""
        pass


class NullReporter(Reporter):
    """Discards every event."""

    def emit(self, event) -> None:
        pass


class RecordingReporter(Reporter):
    """
    Keeps every event in a list.

    Example:
        reporter = RecordingReporter()
        engine = WorkflowEngine(provider, reporter=reporter)
        engine.run(operations)
        assert reporter.of_type(RollbackStep) == []
    """

    def __init__(self):
        self.events: List = []

    def emit(self, event) -> None:
        self.events.append(event)

    def of_type(self, event_type) -> List:
        """Events of one type, in emission order."""
        return [e for e in self.events if isinstance(e, event_type)]


class LoggingReporter(Reporter):
    """
    Writes events to a logger.

    - Starts and successful rollback steps at DEBUG
    - Successes at INFO
    - Failures at ERROR
    """

    def __init__(self, logger):
        self.logger = logger

    def emit(self, event) -> None:
        if isinstance(event, OperationStarted):
            self.logger.debug(f"Starting operation: {event.name}")
        elif isinstance(event, OperationSucceeded):
            detail = f" -> {event.handle}" if event.handle else ""
            self.logger.info(f"  [OK] {event.name}{detail}")
        elif isinstance(event, OperationFailed):
            self.logger.error(f"  [X] {event.name}: {event.error}")
        elif isinstance(event, RollbackStarted):
            self.logger.info("")
            self.logger.info(f"Rolling back {event.count} operations...")
        elif isinstance(event, RollbackStep):
            if event.outcome == FAILED:
                self.logger.error(f"  [X] Failed to roll back {event.name}: {event.error}")
            else:
                self.logger.debug(f"  Rollback {event.name}: {event.outcome}")
        elif isinstance(event, RollbackFinished):
            if event.errors:
                self.logger.error("[X] Rollback completed with errors")
                self.logger.error("Manual intervention may be required")
            else:
                self.logger.info("[OK] Rollback completed successfully")


class ProgressReporter(Reporter):
    """
    Drives a progress bar over the forward phase.

    Args:
        total_steps: Number of operations in the workflow
        desc: Label for the bar
        enabled: False swaps in a silent tracker
    """

    def __init__(self, total_steps: int, desc: str = "Workflow", enabled: bool = True):
        self.progress = create_progress_tracker(total_steps=total_steps, desc=desc, enabled=enabled)
        self._started = False
        self._finished = False

    def emit(self, event) -> None:
        if isinstance(event, OperationStarted):
            if not self._started:
                self.progress.start()
                self._started = True
            self.progress.update_step(event.name)
        elif isinstance(event, OperationSucceeded):
            self.progress.advance()
        elif isinstance(event, (OperationFailed, RollbackStarted)):
            self.close()

    def close(self):
        """Close the bar if it is open. Safe to call more than once."""
        if self._started and not self._finished:
            self.progress.finish()
            self._finished = True


class CompositeReporter(Reporter):
    """Forwards each event to several reporters, in order."""

    def __init__(self, *reporters: Reporter):
        self.reporters = list(reporters)

    def emit(self, event) -> None:
        for reporter in self.reporters:
            reporter.emit(event)
