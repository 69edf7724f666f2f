"""
VM Workflow - Create Resource Group Operation

Creates the resource group everything else lives in.
Rollback: Deletes the group (provider's generic delete).
"""

from vm_workflow.operations.base import ExecutionContext, Operation
from vm_workflow.core.resources import ResourceKind
from vm_workflow.providers.base import ResourceSpec


def create_resource_group(name: str, group_name: str = None) -> Operation:
    """
    Build an operation that creates a resource group.

    Args:
        name: Operation name (other operations depend on this)
        group_name: Name of the group at the provider (default: name)

    Returns:
        Operation with no dependencies and no explicit compensate
    """
    group_name = group_name or name

    def execute(ctx: ExecutionContext):
        ctx.log_info(f"  Creating resource group {group_name}...")
        handle = ctx.provider.create_resource(
            ResourceSpec(kind=ResourceKind.RESOURCE_GROUP, name=group_name)
        )
        ctx.log_debug(f"Created resource group: {handle.id}")
        return handle

    return Operation(name=name, execute=execute)
