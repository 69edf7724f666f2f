"""
VM Workflow - Power Operations

Restart and stop (power off) a VM.

Rollback:
- Restart: nothing to undo.
- Stop: starts the VM again if restart_on_rollback is set, otherwise
  nothing (a stopped VM is about to be deleted anyway in most workflows).
"""

from vm_workflow.operations.base import ExecutionContext, Operation
from vm_workflow.providers.base import ResourceSpec


def _power(ctx: ExecutionContext, vm: str, action: str):
    handle = ctx.require(vm)
    ctx.provider.update_resource(handle, ResourceSpec(
        kind=handle.kind,
        name=handle.name,
        group=handle.group,
        properties={'power_action': action},
    ))
    return handle


def restart_vm(name: str, vm: str) -> Operation:
    """
    Build an operation that restarts a VM.

    Args:
        name: Operation name
        vm: Name of the operation that created the VM
    """

    def execute(ctx: ExecutionContext):
        ctx.log_info(f"  Restarting VM: {ctx.require(vm).id}")
        handle = _power(ctx, vm, 'restart')
        ctx.log_info(f"  [OK] Restarted VM: {handle.name}")
        return None

    return Operation(name=name, execute=execute, depends_on=(vm,))


def stop_vm(name: str, vm: str, restart_on_rollback: bool = False) -> Operation:
    """
    Build an operation that powers a VM off.

    Args:
        name: Operation name
        vm: Name of the operation that created the VM
        restart_on_rollback: Start the VM again when this step is rolled back
    """

    def execute(ctx: ExecutionContext):
        ctx.log_info(f"  Powering OFF VM: {ctx.require(vm).id}")
        handle = _power(ctx, vm, 'stop')
        ctx.log_info(f"  [OK] Powered OFF VM: {handle.name}")
        return None

    def compensate(ctx: ExecutionContext, _handle):
        ctx.log_info(f"  Starting VM {ctx.require(vm).name} again...")
        _power(ctx, vm, 'start')

    return Operation(
        name=name,
        execute=execute,
        depends_on=(vm,),
        compensate=compensate if restart_on_rollback else None,
    )
