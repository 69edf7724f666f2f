"""
VM Workflow - Workflow Result

What a workflow run produced. This is the only output of
WorkflowEngine.run() besides reporter events.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from vm_workflow.core.exceptions import CompensationError


@dataclass
class WorkflowResult:
    """
    Outcome of a workflow run.

    Attributes:
        succeeded_ops: Names of operations that completed, in order
        failed_op: Name of the operation that failed, if any
        error: The error that stopped forward execution, if any
        rollback_errors: (operation name, CompensationError) for every
                         rollback step that failed, newest operation first
        rolled_back: Names of operations that were rolled back, in rollback order
        duration: Seconds the run took
    """
    succeeded_ops: List[str] = field(default_factory=list)
    failed_op: Optional[str] = None
    error: Optional[Exception] = None
    rollback_errors: List[Tuple[str, CompensationError]] = field(default_factory=list)
    rolled_back: List[str] = field(default_factory=list)
    duration: float = 0.0

    @property
    def success(self) -> bool:
        """True if every operation completed."""
        return self.error is None

    @property
    def needs_manual_cleanup(self) -> bool:
        """True if some rollback step failed and resources may be left behind."""
        return bool(self.rollback_errors)

    def get_summary(self) -> str:
        """One-line summary."""
        summary = f"Operations: {len(self.succeeded_ops)} succeeded"
        if self.failed_op:
            summary += f", '{self.failed_op}' failed"
        if self.rolled_back:
            summary += f", {len(self.rolled_back)} rolled back"
        if self.rollback_errors:
            summary += f", {len(self.rollback_errors)} rollback errors"
        summary += f" (took {self.duration:.1f}s)"
        return summary

    def to_dict(self) -> dict:
        """Plain-data form for JSON/YAML output."""
        return {
            'success': self.success,
            'succeededOps': list(self.succeeded_ops),
            'failedOp': self.failed_op,
            'error': str(self.error) if self.error else None,
            'errorType': type(self.error).__name__ if self.error else None,
            'rolledBack': list(self.rolled_back),
            'rollbackErrors': [
                {'operation': name, 'error': str(err)} for name, err in self.rollback_errors
            ],
            'durationSeconds': round(self.duration, 3),
        }

    def log_summary(self, logger):
        """Log a detailed summary."""
        logger.info("")
        logger.info("Workflow Summary:")
        logger.info(f"  Succeeded: {len(self.succeeded_ops)}")
        for i, name in enumerate(self.succeeded_ops, 1):
            logger.info(f"    {i}. [OK] {name}")
        if self.failed_op:
            logger.info(f"  Failed: {self.failed_op}")
            logger.info(f"    {self.error}")
        if self.rolled_back:
            logger.info(f"  Rolled back: {', '.join(self.rolled_back)}")
        for name, err in self.rollback_errors:
            logger.error(f"  Rollback failed for {name}: {err}")
