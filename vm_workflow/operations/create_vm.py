"""
VM Workflow - Create VM Operation

Creates a virtual machine with a new boot disk and any number of existing
data disks attached.
Rollback: Deletes the VM (provider's generic delete). Data disks survive
and are deleted by their own create operations' rollback.
"""

import time
from typing import Sequence

from vm_workflow.operations.base import ExecutionContext, Operation
from vm_workflow.core.resources import ResourceKind
from vm_workflow.providers.base import ResourceSpec


def create_vm(name: str, group: str, data_disks: Sequence[str] = (),
              machine_type: str = 'e2-standard-2',
              image: str = 'projects/debian-cloud/global/images/family/debian-12',
              boot_disk_size_gb: int = 10, vm_name: str = None) -> Operation:
    """
    Build an operation that creates a VM.

    Args:
        name: Operation name
        group: Name of the operation that created the resource group
        data_disks: Names of the operations that created the data disks to attach
        machine_type: Machine type (e.g. e2-standard-2)
        image: Source image for the boot disk
        boot_disk_size_gb: Boot disk size in GB
        vm_name: Name of the VM at the provider (default: name)

    Returns:
        Operation depending on the group and every data disk
    """
    vm_name = vm_name or name
    data_disks = tuple(data_disks)

    def execute(ctx: ExecutionContext):
        group_handle = ctx.require(group)
        disk_names = [ctx.require(d).name for d in data_disks]

        ctx.log_info(f"  Creating VM {vm_name} ({machine_type}, {len(disk_names)} data disks)...")
        start_time = time.time()

        handle = ctx.provider.create_resource(ResourceSpec(
            kind=ResourceKind.VIRTUAL_MACHINE,
            name=vm_name,
            group=group_handle.name,
            properties={
                'machine_type': machine_type,
                'image': image,
                'boot_disk_size_gb': boot_disk_size_gb,
                'data_disks': disk_names,
            },
        ))

        duration = time.time() - start_time
        ctx.log_info(f"  [OK] Created VM (took {duration:.0f}s): {handle.id}")
        return handle

    return Operation(name=name, execute=execute, depends_on=(group,) + data_disks)
