"""VM Workflow - Declarative VM provisioning with guaranteed rollback.

Declare operations and their dependencies; the engine runs them in order
against a provider and, on failure, undoes everything it created newest
first.

Core functionality:
- WorkflowEngine: run operations, record resources, roll back
- Provider backends: Compute Engine, in-memory, dry-run
- A walkthrough that creates, exercises and deletes a VM with data disks

Example usage:
    >>> from vm_workflow import WorkflowEngine, InMemoryProvider, build_walkthrough
    >>> result = WorkflowEngine(InMemoryProvider()).run(build_walkthrough())
    >>> result.success
    True
"""

from vm_workflow.core.config import VERSION, WorkflowConfig, create_workflow_config, load_config
from vm_workflow.core.resources import ResourceHandle, ResourceKind
from vm_workflow.operations import ExecutionContext, Operation
from vm_workflow.orchestration import ResourceRegistry, WorkflowEngine, WorkflowResult
from vm_workflow.providers import DryRunProvider, GCEProvider, InMemoryProvider, ProviderAdapter
from vm_workflow.walkthrough import build_walkthrough

__version__ = VERSION

__all__ = [
    'WorkflowConfig',
    'create_workflow_config',
    'load_config',
    'ResourceHandle',
    'ResourceKind',
    'Operation',
    'ExecutionContext',
    'ResourceRegistry',
    'WorkflowEngine',
    'WorkflowResult',
    'ProviderAdapter',
    'InMemoryProvider',
    'DryRunProvider',
    'GCEProvider',
    'build_walkthrough',
]
