"""
VM Workflow - Attach Disk Operation

Attaches a data disk to a VM.
Rollback: Detaches the disk.
"""

from vm_workflow.operations.base import ExecutionContext, Operation
from vm_workflow.providers.base import ResourceSpec


def change_disk_attachment(ctx: ExecutionContext, vm: str, disk: str, key: str):
    vm_handle = ctx.require(vm)
    disk_handle = ctx.require(disk)
    ctx.provider.update_resource(vm_handle, ResourceSpec(
        kind=vm_handle.kind,
        name=vm_handle.name,
        group=vm_handle.group,
        properties={key: [disk_handle.name]},
    ))
    return vm_handle, disk_handle


def attach_disk(name: str, vm: str, disk: str) -> Operation:
    """
    Build an operation that attaches a disk to a VM.

    Args:
        name: Operation name
        vm: Name of the operation that created the VM
        disk: Name of the operation that created the disk

    Returns:
        Operation depending on both
    """

    def execute(ctx: ExecutionContext):
        vm_handle, disk_handle = change_disk_attachment(ctx, vm, disk, 'attach_disks')
        ctx.log_info(f"  [OK] Attached disk {disk_handle.name} to {vm_handle.id}")
        return None

    def compensate(ctx: ExecutionContext, _handle):
        vm_handle, disk_handle = change_disk_attachment(ctx, vm, disk, 'detach_disks')
        ctx.log_info(f"  [OK] Detached disk {disk_handle.name} from {vm_handle.name}")

    return Operation(name=name, execute=execute, depends_on=(vm, disk), compensate=compensate)
