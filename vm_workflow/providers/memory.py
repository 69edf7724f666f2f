"""
VM Workflow - In-Memory Provider

A fake backend that keeps resources in dictionaries. Used by tests and by
anyone who wants to exercise a workflow without a cloud account.

Failure injection:
    provider = InMemoryProvider(fail_on={'create': {'vm-1'}, 'delete': {'dsk-1'}})
    # create_resource() of 'vm-1' and delete_resource() of 'dsk-1' now raise
"""

import itertools
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Tuple

from vm_workflow.core.exceptions import ProviderError, ResourceNotFoundError
from vm_workflow.core.resources import ResourceHandle, ResourceKind
from vm_workflow.providers.base import ProviderAdapter, ResourceFilter, ResourceSpec

POWER_STATES = {
    'restart': 'RUNNING',
    'start': 'RUNNING',
    'stop': 'TERMINATED',
}


@dataclass
class FakeResource:
    """State of one resource held by the in-memory provider."""
    handle: ResourceHandle
    properties: Dict = field(default_factory=dict)
    labels: Dict[str, str] = field(default_factory=dict)
    attached_disks: List[str] = field(default_factory=list)
    status: str = 'READY'
    restarts: int = 0


class InMemoryProvider(ProviderAdapter):
    """
    Dictionary-backed provider.

    Mirrors the constraints of a real cloud closely enough to catch
    ordering mistakes:
    - Names are unique
    - Disks and VMs must belong to an existing group
    - A group cannot be deleted while it still has resources
    - A disk cannot be deleted while attached to a VM

    Every call is appended to `calls` as (action, resource name).
    """

    def __init__(self, fail_on: Dict[str, Set[str]] = None, logger=None):
        """
        Initialize provider.

        Args:
            fail_on: Map of action ('create', 'update', 'delete', 'list') to
                     resource names whose calls should fail
            logger: Optional logger for debug output
        """
        self.fail_on = {action: set(names) for action, names in (fail_on or {}).items()}
        self.logger = logger
        self.resources: Dict[str, FakeResource] = {}
        self.calls: List[Tuple[str, str]] = []
        self._ids = itertools.count(1)

    @property
    def name(self) -> str:
        return "in-memory"

    def _log_debug(self, message: str):
        if self.logger:
            self.logger.debug(message)

    def _check_failure(self, action: str, resource_name: str):
        self.calls.append((action, resource_name))
        if resource_name in self.fail_on.get(action, set()):
            raise ProviderError(action, resource_name, "injected failure")

    def _get(self, action: str, handle: ResourceHandle) -> FakeResource:
        resource = self.resources.get(handle.name)
        if resource is None or resource.handle.id != handle.id:
            raise ResourceNotFoundError(action, handle.name or handle.id)
        return resource

    def create_resource(self, spec: ResourceSpec) -> ResourceHandle:
        self._check_failure('create', spec.name)

        if spec.name in self.resources:
            raise ProviderError('create', spec.name, "a resource with this name already exists")

        if spec.kind != ResourceKind.RESOURCE_GROUP:
            group = self.resources.get(spec.group) if spec.group else None
            if group is None or group.handle.kind != ResourceKind.RESOURCE_GROUP:
                raise ProviderError('create', spec.name, f"resource group '{spec.group}' does not exist")

        handle = ResourceHandle(
            id=f"/fake/{spec.kind.value.lower()}/{next(self._ids)}/{spec.name}",
            kind=spec.kind,
            name=spec.name,
            group=spec.group,
        )
        resource = FakeResource(handle=handle, properties=dict(spec.properties))

        if spec.kind == ResourceKind.VIRTUAL_MACHINE:
            resource.status = 'RUNNING'
            for disk_name in spec.properties.get('data_disks', []):
                self._require_disk('create', disk_name)
                resource.attached_disks.append(disk_name)

        self.resources[spec.name] = resource
        self._log_debug(f"Created {handle}")
        return handle

    def delete_resource(self, handle: ResourceHandle) -> None:
        self._check_failure('delete', handle.name)
        resource = self._get('delete', handle)

        if handle.kind == ResourceKind.RESOURCE_GROUP:
            children = [r.handle.name for r in self.resources.values() if r.handle.group == handle.name]
            if children:
                raise ProviderError(
                    'delete', handle.name,
                    f"resource group still contains: {', '.join(sorted(children))}"
                )

        if handle.kind == ResourceKind.DISK:
            users = [r.handle.name for r in self.resources.values() if handle.name in r.attached_disks]
            if users:
                raise ProviderError('delete', handle.name, f"disk is attached to {', '.join(users)}")

        del self.resources[resource.handle.name]
        self._log_debug(f"Deleted {handle}")

    def update_resource(self, handle: ResourceHandle, spec: ResourceSpec) -> None:
        self._check_failure('update', handle.name)
        resource = self._get('update', handle)
        props = spec.properties

        for key, value in props.get('labels', {}).items():
            if value is None:
                resource.labels.pop(key, None)
            else:
                resource.labels[key] = value

        if handle.kind != ResourceKind.VIRTUAL_MACHINE:
            if any(k in props for k in ('attach_disks', 'detach_disks', 'power_action')):
                raise ProviderError('update', handle.name, "only virtual machines support disk and power changes")
            return

        for disk_name in props.get('attach_disks', []):
            self._require_disk('update', disk_name)
            if disk_name in resource.attached_disks:
                raise ProviderError('update', handle.name, f"disk '{disk_name}' is already attached")
            resource.attached_disks.append(disk_name)

        for disk_name in props.get('detach_disks', []):
            if disk_name not in resource.attached_disks:
                raise ProviderError('update', handle.name, f"disk '{disk_name}' is not attached")
            resource.attached_disks.remove(disk_name)

        action = props.get('power_action')
        if action:
            if action not in POWER_STATES:
                raise ProviderError('update', handle.name, f"unknown power action: {action}")
            resource.status = POWER_STATES[action]
            if action == 'restart':
                resource.restarts += 1

    def list_resources(self, filter: Optional[ResourceFilter] = None) -> List[ResourceHandle]:
        filter = filter or ResourceFilter()
        self._check_failure('list', filter.group or '*')

        matches = []
        for resource in self.resources.values():
            if filter.kind and resource.handle.kind != filter.kind:
                continue
            if filter.group and filter.group not in (resource.handle.group, self._group_name(resource)):
                continue
            if any(resource.labels.get(k) != v for k, v in filter.labels.items()):
                continue
            matches.append(resource.handle)
        return matches

    @staticmethod
    def _group_name(resource: FakeResource) -> Optional[str]:
        # A group matches a group filter by its own name
        if resource.handle.kind == ResourceKind.RESOURCE_GROUP:
            return resource.handle.name
        return None

    def _require_disk(self, action: str, disk_name: str):
        disk = self.resources.get(disk_name)
        if disk is None or disk.handle.kind != ResourceKind.DISK:
            raise ResourceNotFoundError(action, disk_name)
