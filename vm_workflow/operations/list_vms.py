"""
VM Workflow - List VMs Operation

Lists the VMs in a resource group and logs each one.
Rollback: Nothing to undo (read-only).
"""

from typing import Callable, List, Optional

from vm_workflow.operations.base import ExecutionContext, Operation
from vm_workflow.core.resources import ResourceHandle, ResourceKind
from vm_workflow.providers.base import ResourceFilter


def list_vms(name: str, group: str,
             on_listed: Optional[Callable[[List[ResourceHandle]], None]] = None) -> Operation:
    """
    Build an operation that lists the VMs of a group.

    Args:
        name: Operation name
        group: Name of the operation that created the resource group
        on_listed: Optional callback receiving the listed handles
    """

    def execute(ctx: ExecutionContext):
        group_handle = ctx.require(group)
        vms = ctx.provider.list_resources(
            ResourceFilter(kind=ResourceKind.VIRTUAL_MACHINE, group=group_handle.name)
        )

        ctx.log_info(f"  Printing list of VMs in {group_handle.name} =======")
        for vm in vms:
            ctx.log_info(f"    {vm.name}  {vm.id}")
        ctx.log_debug(f"Listed {len(vms)} VMs")

        if on_listed:
            on_listed(vms)
        return None

    return Operation(name=name, execute=execute, depends_on=(group,))
