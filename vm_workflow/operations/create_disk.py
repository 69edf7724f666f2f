"""
VM Workflow - Create Disk Operation

Creates a new empty data disk in a resource group.
Rollback: Deletes the disk (provider's generic delete).
"""

import time

from vm_workflow.operations.base import ExecutionContext, Operation
from vm_workflow.core.resources import ResourceKind
from vm_workflow.providers.base import ResourceSpec


def create_disk(name: str, group: str, size_gb: int = 10,
                disk_type: str = 'pd-standard', disk_name: str = None) -> Operation:
    """
    Build an operation that creates a data disk.

    Args:
        name: Operation name
        group: Name of the operation that created the resource group
        size_gb: Size in GB
        disk_type: Type of disk (pd-standard, pd-ssd, pd-balanced)
        disk_name: Name of the disk at the provider (default: name)

    Returns:
        Operation depending on the group
    """
    disk_name = disk_name or name

    def execute(ctx: ExecutionContext):
        group_handle = ctx.require(group)

        ctx.log_info(f"  Creating {size_gb}GB data disk {disk_name}...")
        ctx.log_debug(f"  Size: {size_gb}GB, Type: {disk_type}, Group: {group_handle.name}")
        start_time = time.time()

        handle = ctx.provider.create_resource(ResourceSpec(
            kind=ResourceKind.DISK,
            name=disk_name,
            group=group_handle.name,
            properties={'size_gb': size_gb, 'disk_type': disk_type},
        ))

        duration = time.time() - start_time
        ctx.log_debug(f"Disk created in {duration:.2f}s")
        return handle

    return Operation(name=name, execute=execute, depends_on=(group,))
