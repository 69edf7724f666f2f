"""
VM Workflow - Workflow Engine

Runs a list of operations in order against a provider:
1. Validates the declared dependency order
2. Executes operations one at a time
3. Records each success in a registry
4. Rolls back everything recorded, newest first, on failure
   (or at the end of an ephemeral run)

run() never raises. Every execution and rollback error comes back as data
on the WorkflowResult.
"""

import time
from typing import Callable, List, Optional, Sequence, Tuple

from vm_workflow.core.config import WorkflowConfig
from vm_workflow.core.exceptions import (
    CompensationError,
    DeadlineExceededError,
    DependencyError,
    ExecutionError,
    UnmetDependencyError,
)
from vm_workflow.operations.base import ExecutionContext, Operation
from vm_workflow.orchestration.events import (
    COMPENSATED,
    DELETED,
    FAILED,
    SKIPPED,
    NullReporter,
    OperationFailed,
    OperationStarted,
    OperationSucceeded,
    Reporter,
    RollbackFinished,
    RollbackStarted,
    RollbackStep,
)
from vm_workflow.orchestration.registry import ResourceHandle, ResourceRegistry
from vm_workflow.orchestration.result import WorkflowResult
from vm_workflow.providers.base import ProviderAdapter
from vm_workflow.utils.logger import log_operation_end, log_operation_start


class WorkflowEngine:
    """
    Executes operations in dependency order with guaranteed rollback.

    Example:
        engine = WorkflowEngine(provider, reporter=LoggingReporter(logger))

        result = engine.run([
            create_resource_group('rg'),
            create_disk('d', group='rg'),
            create_vm('vm', group='rg', data_disks=['d']),
        ])

        # If 'vm' fails:
        # result.succeeded_ops == ['rg', 'd']
        # result.failed_op == 'vm'
        # rollback: delete d, then delete rg
    """

    def __init__(self, provider: ProviderAdapter, reporter: Reporter = None,
                 config: WorkflowConfig = None, logger=None,
                 clock: Callable[[], float] = time.monotonic):
        """
        Initialize workflow engine.

        Args:
            provider: Backend implementing the provider capability interface
            reporter: Optional event sink
            config: Optional workflow configuration (ephemeral, deadline, auto_rollback)
            logger: Optional logger
            clock: Monotonic clock used for the deadline
        """
        self.provider = provider
        self.reporter = reporter or NullReporter()
        self.config = config or WorkflowConfig()
        self.logger = logger
        self.clock = clock

        # Registry of the most recent run, kept for inspection
        self.registry = ResourceRegistry()

    def _log_debug(self, message: str):
        """Log debug message."""
        if self.logger:
            self.logger.debug(message)

    def _log_warning(self, message: str):
        """Log warning message."""
        if self.logger:
            self.logger.warning(message)

    def _emit(self, event):
        # A broken reporter must not stop provisioning or rollback
        try:
            self.reporter.emit(event)
        except Exception as e:
            self._log_warning(f"Reporter failed on {type(event).__name__}: {e}")

    def validate(self, operations: Sequence[Operation]) -> None:
        """
        Check that every dependency names an earlier operation.

        The engine never reorders; the caller supplies a valid order.

        Raises:
            DependencyError: On a forward or unknown reference, a
                             self-reference, or a duplicate name
        """
        seen = set()
        for operation in operations:
            if operation.name in seen:
                raise DependencyError(operation.name, "duplicate operation name")

            for dependency in operation.depends_on:
                if dependency == operation.name:
                    raise DependencyError(operation.name, "operation depends on itself")
                if dependency not in seen:
                    raise DependencyError(
                        operation.name,
                        f"'{dependency}' is not declared earlier in the workflow"
                    )

            seen.add(operation.name)

    def run(self, operations: Sequence[Operation], ephemeral: bool = None,
            deadline: Optional[float] = None) -> WorkflowResult:
        """
        Run a workflow.

        Args:
            operations: Operations in a valid dependency order
            ephemeral: Roll back everything after a successful run
                       (default: config.ephemeral)
            deadline: Seconds allowed for the forward phase
                      (default: config.deadline_seconds; None means no limit)

        Returns:
            WorkflowResult. Never raises.
        """
        operations = tuple(operations)
        if ephemeral is None:
            ephemeral = self.config.ephemeral
        if deadline is None:
            deadline = self.config.deadline_seconds

        start_time = self.clock()
        result = WorkflowResult()
        self.registry = ResourceRegistry()

        try:
            self.validate(operations)
        except DependencyError as e:
            self._log_debug(f"Dependency validation failed: {e}")
            result.failed_op = e.operation_name
            result.error = e
            self._emit(OperationFailed(e.operation_name, e))
            result.duration = self.clock() - start_time
            return result

        context = ExecutionContext(self.provider, self.registry, self.config, self.logger)
        completed = self._execute_all(operations, context, result, start_time, deadline)

        if not completed and not self.config.auto_rollback:
            self._log_warning("Automatic rollback disabled, leaving created resources in place")
        elif not completed or ephemeral:
            if completed:
                self._log_debug("Ephemeral run, tearing everything down")
            result.rolled_back, result.rollback_errors = self._rollback(self.registry, operations)

        result.duration = self.clock() - start_time
        return result

    def _execute_all(self, operations: Tuple[Operation, ...], context: ExecutionContext,
                     result: WorkflowResult, start_time: float,
                     deadline: Optional[float]) -> bool:
        """Forward phase. Returns True if every operation succeeded."""

        for operation in operations:
            error = self._check_preconditions(operation, start_time, deadline)
            if error is None:
                error = self._execute_one(operation, context)

            if error is not None:
                result.failed_op = operation.name
                result.error = error
                self._emit(OperationFailed(operation.name, error))
                return False

            result.succeeded_ops.append(operation.name)

        return True

    def _check_preconditions(self, operation: Operation, start_time: float,
                             deadline: Optional[float]):
        if deadline is not None:
            elapsed = self.clock() - start_time
            if elapsed > deadline:
                return DeadlineExceededError(operation.name, deadline, elapsed)

        for dependency in operation.depends_on:
            if dependency not in self.registry:
                return UnmetDependencyError(operation.name, dependency)

        return None

    def _execute_one(self, operation: Operation, context: ExecutionContext):
        """Execute one operation and record it. Returns the error, or None."""
        self._emit(OperationStarted(operation.name))
        context.operation_name = operation.name
        started = log_operation_start(self.logger, operation.name) if self.logger else None

        try:
            handle = operation.execute(context)
        except UnmetDependencyError as e:
            return e
        except Exception as e:
            error = ExecutionError(operation.name, cause=e)
            error.__cause__ = e
            return error

        if handle is not None and not isinstance(handle, ResourceHandle):
            return ExecutionError(
                operation.name,
                reason=f"execute returned {type(handle).__name__}, expected ResourceHandle or None"
            )

        self.registry.record(operation.name, handle)
        if started is not None:
            log_operation_end(self.logger, operation.name, started)
        self._emit(OperationSucceeded(operation.name, handle))
        return None

    def rollback(self, registry: ResourceRegistry,
                 operations: Sequence[Operation] = ()) -> List[Tuple[str, CompensationError]]:
        """
        Undo every entry of a registry, newest first.

        An empty registry is a no-op.

        Args:
            registry: Registry to roll back
            operations: Operations that produced the entries (for their
                        compensate functions)

        Returns:
            (operation name, CompensationError) for every step that failed
        """
        _, errors = self._rollback(registry, operations)
        return errors

    def _rollback(self, registry: ResourceRegistry, operations: Sequence[Operation]):
        entries = registry.reverse()
        if not entries:
            self._log_debug("No operations to rollback")
            return [], []

        by_name = {operation.name: operation for operation in operations}
        context = ExecutionContext(self.provider, registry, self.config, self.logger)
        rolled_back = []
        errors = []

        self._emit(RollbackStarted(len(entries)))

        for entry in entries:
            name = entry.operation_name
            operation = by_name.get(name)
            context.operation_name = name

            try:
                if operation is not None and operation.compensate is not None:
                    operation.compensate(context, entry.handle)
                    outcome = COMPENSATED
                elif entry.handle is not None:
                    self.provider.delete_resource(entry.handle)
                    outcome = DELETED
                else:
                    outcome = SKIPPED
            except Exception as e:
                # Keep going: older entries still get their chance
                error = CompensationError(name, cause=e)
                error.__cause__ = e
                errors.append((name, error))
                self._emit(RollbackStep(name, FAILED, error))
                continue

            rolled_back.append(name)
            self._emit(RollbackStep(name, outcome))

        self._emit(RollbackFinished(tuple(errors)))
        return rolled_back, errors
