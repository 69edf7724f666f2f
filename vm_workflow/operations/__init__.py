"""
VM Workflow - Operations Module

The Operation type and the provider-operation plugins built on it.
Each plugin is a small factory that returns an Operation wired to the
provider capability interface.

Usage:
    from vm_workflow.operations import (
        create_resource_group,
        create_disk,
        create_vm,
    )

    operations = [
        create_resource_group('rg'),
        create_disk('disk', group='rg', size_gb=50),
        create_vm('vm', group='rg', data_disks=['disk']),
    ]
    result = engine.run(operations)
"""

from vm_workflow.operations.base import ExecutionContext, Operation
from vm_workflow.operations.create_resource_group import create_resource_group
from vm_workflow.operations.create_disk import create_disk
from vm_workflow.operations.create_vm import create_vm
from vm_workflow.operations.tag_resource import tag_resource
from vm_workflow.operations.attach_disk import attach_disk
from vm_workflow.operations.detach_disk import detach_disk
from vm_workflow.operations.power import restart_vm, stop_vm
from vm_workflow.operations.list_vms import list_vms

__all__ = [
    # Base classes
    'Operation',
    'ExecutionContext',

    # Operations
    'create_resource_group',
    'create_disk',
    'create_vm',
    'tag_resource',
    'attach_disk',
    'detach_disk',
    'restart_vm',
    'stop_vm',
    'list_vms',
]
