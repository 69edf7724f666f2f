"""
VM Workflow - Providers Module

Backends the workflow engine can run against. All implement the
ProviderAdapter capability interface (create/update/delete/list).

Usage:
    from vm_workflow.providers import InMemoryProvider, ResourceSpec

    provider = InMemoryProvider()
    handle = provider.create_resource(
        ResourceSpec(kind=ResourceKind.RESOURCE_GROUP, name='rg-1')
    )
"""

from vm_workflow.providers.base import ProviderAdapter, ResourceFilter, ResourceSpec
from vm_workflow.providers.memory import InMemoryProvider
from vm_workflow.providers.dry_run import DryRunProvider
from vm_workflow.providers.gce import GCEProvider, GROUP_LABEL

__all__ = [
    # Base classes
    'ProviderAdapter',
    'ResourceSpec',
    'ResourceFilter',

    # Backends
    'InMemoryProvider',
    'DryRunProvider',
    'GCEProvider',
    'GROUP_LABEL',
]
