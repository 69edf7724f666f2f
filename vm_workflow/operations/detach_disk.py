"""
VM Workflow - Detach Disk Operation

Detaches a data disk from a VM.
Rollback: Re-attaches the disk.
"""

from vm_workflow.operations.attach_disk import change_disk_attachment
from vm_workflow.operations.base import ExecutionContext, Operation


def detach_disk(name: str, vm: str, disk: str) -> Operation:
    """
    Build an operation that detaches a disk from a VM.

    Args:
        name: Operation name
        vm: Name of the operation that created the VM
        disk: Name of the operation that created the disk

    Returns:
        Operation depending on both
    """

    def execute(ctx: ExecutionContext):
        vm_handle, disk_handle = change_disk_attachment(ctx, vm, disk, 'detach_disks')
        ctx.log_info(f"  [OK] Detached disk {disk_handle.name} from {vm_handle.id}")
        return None

    def compensate(ctx: ExecutionContext, _handle):
        vm_handle, disk_handle = change_disk_attachment(ctx, vm, disk, 'attach_disks')
        ctx.log_info(f"  [OK] Re-attached disk {disk_handle.name} to {vm_handle.name}")

    return Operation(name=name, execute=execute, depends_on=(vm, disk), compensate=compensate)
