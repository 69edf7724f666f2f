"""
VM Workflow - VM Management Walkthrough

The sample workflow: a resource group, two data disks, a VM with those
disks, labels on the VM, one more disk attached, the first disk detached,
a restart, a power off, and a listing of the group's VMs.

Every step is an ordinary operation, so the engine rolls all of it back
on failure (and, in ephemeral mode, after success).
"""

from typing import Dict, List

from vm_workflow.core.config import WorkflowConfig
from vm_workflow.operations import (
    Operation,
    attach_disk,
    create_disk,
    create_resource_group,
    create_vm,
    detach_disk,
    list_vms,
    restart_vm,
    stop_vm,
    tag_resource,
)
from vm_workflow.utils.naming import create_random_name

# Operation names, in execution order
STEPS = (
    'rg',
    'data-disk-1',
    'data-disk-2',
    'vm',
    'tag-vm',
    'extra-disk',
    'attach-extra-disk',
    'detach-first-disk',
    'restart-vm',
    'power-off-vm',
    'list-vms',
)


def generate_names(prefix: str) -> Dict[str, str]:
    """
    Random provider-side names for every resource the walkthrough creates.

    Returns:
        dict: {'rg': ..., 'data-disk-1': ..., 'data-disk-2': ..., 'vm': ..., 'extra-disk': ...}
    """
    return {
        'rg': create_random_name(f'{prefix}-rg'),
        'data-disk-1': create_random_name(f'{prefix}-dsk'),
        'data-disk-2': create_random_name(f'{prefix}-dsk'),
        'vm': create_random_name(f'{prefix}-vm'),
        'extra-disk': create_random_name(f'{prefix}-dsk'),
    }


def build_walkthrough(config: WorkflowConfig = None, names: Dict[str, str] = None,
                      on_listed=None) -> List[Operation]:
    """
    Build the walkthrough's operation list.

    Args:
        config: Workflow configuration (sizes, machine type, image, tags)
        names: Provider-side resource names keyed by operation name
               (default: random names from config.name_prefix)
        on_listed: Optional callback receiving the VM handles listed by the
                   last step

    Returns:
        Operations in a valid dependency order

    Example:
        engine = WorkflowEngine(InMemoryProvider())
        result = engine.run(build_walkthrough(WorkflowConfig()))
    """
    config = config or WorkflowConfig()
    names = {**generate_names(config.name_prefix), **(names or {})}
    first_size, second_size = config.data_disk_sizes_gb
    image = f'projects/{config.image_project}/global/images/family/{config.image_family}'

    return [
        create_resource_group('rg', group_name=names['rg']),
        create_disk('data-disk-1', group='rg', size_gb=first_size,
                    disk_type=config.disk_type, disk_name=names['data-disk-1']),
        create_disk('data-disk-2', group='rg', size_gb=second_size,
                    disk_type=config.disk_type, disk_name=names['data-disk-2']),
        create_vm('vm', group='rg', data_disks=('data-disk-1', 'data-disk-2'),
                  machine_type=config.machine_type, image=image,
                  boot_disk_size_gb=config.boot_disk_size_gb, vm_name=names['vm']),
        tag_resource('tag-vm', target='vm', tags=config.tags),
        create_disk('extra-disk', group='rg', size_gb=config.extra_disk_size_gb,
                    disk_type=config.disk_type, disk_name=names['extra-disk']),
        attach_disk('attach-extra-disk', vm='vm', disk='extra-disk'),
        detach_disk('detach-first-disk', vm='vm', disk='data-disk-1'),
        restart_vm('restart-vm', vm='vm'),
        stop_vm('power-off-vm', vm='vm'),
        list_vms('list-vms', group='rg', on_listed=on_listed),
    ]
