"""
VM Workflow - Orchestration Module

The workflow engine, its registry, result type and reporter events.
"""

from vm_workflow.orchestration.registry import (
    RegistryEntry,
    ResourceHandle,
    ResourceKind,
    ResourceRegistry,
)
from vm_workflow.orchestration.result import WorkflowResult
from vm_workflow.orchestration.events import (
    CompositeReporter,
    LoggingReporter,
    NullReporter,
    OperationFailed,
    OperationStarted,
    OperationSucceeded,
    ProgressReporter,
    RecordingReporter,
    Reporter,
    RollbackFinished,
    RollbackStarted,
    RollbackStep,
)
from vm_workflow.orchestration.engine import WorkflowEngine

__all__ = [
    'WorkflowEngine',
    'WorkflowResult',
    'ResourceRegistry',
    'RegistryEntry',
    'ResourceHandle',
    'ResourceKind',
    'Reporter',
    'NullReporter',
    'RecordingReporter',
    'LoggingReporter',
    'ProgressReporter',
    'CompositeReporter',
    'OperationStarted',
    'OperationSucceeded',
    'OperationFailed',
    'RollbackStarted',
    'RollbackStep',
    'RollbackFinished',
]
