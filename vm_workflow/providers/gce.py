"""
VM Workflow - Google Compute Engine Provider

Implements the provider capability interface on top of the Compute Engine
v1 API (google-api-python-client).

Compute Engine has no resource groups, so a group is a label namespace:
every disk and instance created in group "rg-1" carries the label
vm-workflow-group=rg-1. Creating a group makes no API call; deleting a group
deletes every instance and then every disk carrying its label.
"""

import time
from datetime import datetime
from typing import Dict, List, Optional

from googleapiclient.errors import HttpError

from vm_workflow.core.exceptions import ProviderError, ResourceNotFoundError
from vm_workflow.core.resources import ResourceHandle, ResourceKind
from vm_workflow.providers.base import ProviderAdapter, ResourceFilter, ResourceSpec
from vm_workflow.utils.logger import log_api_call, log_api_response

GROUP_LABEL = 'vm-workflow-group'

POWER_METHODS = {
    'restart': 'reset',
    'stop': 'stop',
    'start': 'start',
}


class GCEProvider(ProviderAdapter):
    """
    Compute Engine backend.

    Example:
        compute, project = AuthManager().get_client()
        provider = GCEProvider(compute, project, 'us-central1-a', logger=logger)
        handle = provider.create_resource(ResourceSpec(
            kind=ResourceKind.DISK, name='dsk-abc', group='rg-abc',
            properties={'size_gb': 50}
        ))
    """

    def __init__(self, compute, project: str, zone: str, logger=None,
                 timeout: int = 600, poll_interval: float = 5.0):
        """
        Initialize provider.

        Args:
            compute: GCP compute client (from AuthManager.get_client())
            project: GCP project ID
            zone: GCP zone
            logger: Optional logger for debug output
            timeout: Maximum seconds to wait for any single zone operation
            poll_interval: Seconds between operation status checks
        """
        self.compute = compute
        self.project = project
        self.zone = zone
        self.logger = logger
        self.timeout = timeout
        self.poll_interval = poll_interval

    @property
    def name(self) -> str:
        return f"gce:{self.project}/{self.zone}"

    def _log_debug(self, message: str):
        """Log debug message if logger available."""
        if self.logger:
            self.logger.debug(message)

    def _log_info(self, message: str):
        """Log info message if logger available."""
        if self.logger:
            self.logger.info(message)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _zone_path(self) -> str:
        return f'projects/{self.project}/zones/{self.zone}'

    def _disk_url(self, disk_name: str) -> str:
        return f'{self._zone_path()}/disks/{disk_name}'

    def _call(self, action: str, resource: str, request):
        """Execute an API request, translating HttpError into provider errors."""
        try:
            response = request.execute()
        except HttpError as e:
            if e.resp.status == 404:
                raise ResourceNotFoundError(action, resource) from e
            raise ProviderError(action, resource, str(e)) from e

        if self.logger:
            log_api_response(self.logger, response)
        return response

    def _wait_for_operation(self, operation: Dict, action: str, resource: str) -> None:
        """
        Wait for a zone operation to reach DONE.

        Raises:
            ProviderError: If the operation reports errors or times out
        """
        start_time = time.time()

        while operation.get('status') != 'DONE':
            if time.time() - start_time > self.timeout:
                raise ProviderError(action, resource, f"timeout waiting for operation (>{self.timeout}s)")

            time.sleep(self.poll_interval)
            operation = self._call(action, resource, self.compute.zoneOperations().get(
                project=self.project,
                zone=self.zone,
                operation=operation['name']
            ))
            self._log_debug(f"Operation {operation['name']}: {operation.get('status')}")

        errors = operation.get('error', {}).get('errors', [])
        if errors:
            reason = '; '.join(e.get('message', e.get('code', 'unknown')) for e in errors)
            raise ProviderError(action, resource, reason)

    def _wait_for_status(self, vm_name: str, target_status: str) -> None:
        """Wait for an instance to reach a target status."""
        start_time = time.time()

        while True:
            vm = self._call('update', vm_name, self.compute.instances().get(
                project=self.project,
                zone=self.zone,
                instance=vm_name
            ))
            current_status = vm.get('status')
            self._log_debug(f"Current status: {current_status}, Target: {target_status}")

            if current_status == target_status:
                return

            if time.time() - start_time > self.timeout:
                raise ProviderError('update', vm_name, f"timeout waiting for status {target_status}")

            time.sleep(self.poll_interval)

    def _handle(self, kind: ResourceKind, name: str, group: Optional[str], item: Dict = None) -> ResourceHandle:
        collection = 'disks' if kind == ResourceKind.DISK else 'instances'
        kwargs = {}
        if item and item.get('creationTimestamp'):
            kwargs['created_at'] = datetime.fromisoformat(item['creationTimestamp'])
        return ResourceHandle(
            id=f'{self._zone_path()}/{collection}/{name}',
            kind=kind,
            name=name,
            group=group,
            **kwargs
        )

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create_resource(self, spec: ResourceSpec) -> ResourceHandle:
        if spec.kind == ResourceKind.RESOURCE_GROUP:
            # Label namespace only, nothing to create remotely
            self._log_debug(f"Resource group {spec.name} is the label {GROUP_LABEL}={spec.name}")
            return ResourceHandle(
                id=f'{self._zone_path()}/labels/{GROUP_LABEL}={spec.name}',
                kind=ResourceKind.RESOURCE_GROUP,
                name=spec.name,
            )

        if not spec.group:
            raise ProviderError('create', spec.name, "a resource group is required")

        if spec.kind == ResourceKind.DISK:
            return self._create_disk(spec)
        if spec.kind == ResourceKind.VIRTUAL_MACHINE:
            return self._create_instance(spec)

        raise ProviderError('create', spec.name, f"unsupported kind: {spec.kind.value}")

    def _create_disk(self, spec: ResourceSpec) -> ResourceHandle:
        props = spec.properties
        disk_body = {
            'name': spec.name,
            'sizeGb': str(props.get('size_gb', 10)),
            'type': f"{self._zone_path()}/diskTypes/{props.get('disk_type', 'pd-standard')}",
            'labels': {GROUP_LABEL: spec.group},
        }
        if props.get('source_image'):
            disk_body['sourceImage'] = props['source_image']

        if self.logger:
            log_api_call(self.logger, 'disks.insert', project=self.project, zone=self.zone, disk=spec.name)

        operation = self._call('create', spec.name, self.compute.disks().insert(
            project=self.project,
            zone=self.zone,
            body=disk_body
        ))
        self._wait_for_operation(operation, 'create', spec.name)

        return self._handle(ResourceKind.DISK, spec.name, spec.group)

    def _create_instance(self, spec: ResourceSpec) -> ResourceHandle:
        props = spec.properties

        disks = [{
            'boot': True,
            'autoDelete': True,
            'initializeParams': {
                'sourceImage': props.get('image', 'projects/debian-cloud/global/images/family/debian-12'),
                'diskSizeGb': str(props.get('boot_disk_size_gb', 10)),
                'labels': {GROUP_LABEL: spec.group},
            },
        }]
        for disk_name in props.get('data_disks', []):
            disks.append({
                'source': self._disk_url(disk_name),
                'deviceName': disk_name,
                'autoDelete': False,
                'mode': 'READ_WRITE',
            })

        instance_body = {
            'name': spec.name,
            'machineType': f"zones/{self.zone}/machineTypes/{props.get('machine_type', 'e2-standard-2')}",
            'labels': {GROUP_LABEL: spec.group},
            'disks': disks,
            # Private IP only, no access config
            'networkInterfaces': [{'network': props.get('network', 'global/networks/default')}],
        }

        if self.logger:
            log_api_call(self.logger, 'instances.insert', project=self.project, zone=self.zone, instance=spec.name)

        operation = self._call('create', spec.name, self.compute.instances().insert(
            project=self.project,
            zone=self.zone,
            body=instance_body
        ))
        self._wait_for_operation(operation, 'create', spec.name)

        return self._handle(ResourceKind.VIRTUAL_MACHINE, spec.name, spec.group)

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    def delete_resource(self, handle: ResourceHandle) -> None:
        if handle.kind == ResourceKind.RESOURCE_GROUP:
            self._delete_group(handle.name)
        elif handle.kind == ResourceKind.DISK:
            self._delete_disk(handle.name)
        elif handle.kind == ResourceKind.VIRTUAL_MACHINE:
            self._delete_instance(handle.name)
        else:
            raise ProviderError('delete', handle.name, f"unsupported kind: {handle.kind.value}")

    def _delete_disk(self, disk_name: str):
        if self.logger:
            log_api_call(self.logger, 'disks.delete', project=self.project, zone=self.zone, disk=disk_name)
        operation = self._call('delete', disk_name, self.compute.disks().delete(
            project=self.project,
            zone=self.zone,
            disk=disk_name
        ))
        self._wait_for_operation(operation, 'delete', disk_name)

    def _delete_instance(self, vm_name: str):
        if self.logger:
            log_api_call(self.logger, 'instances.delete', project=self.project, zone=self.zone, instance=vm_name)
        operation = self._call('delete', vm_name, self.compute.instances().delete(
            project=self.project,
            zone=self.zone,
            instance=vm_name
        ))
        self._wait_for_operation(operation, 'delete', vm_name)

    def _delete_group(self, group: str):
        """Delete every instance, then every disk, labelled with the group."""
        self._log_info(f"  Deleting resource group {group}...")

        for handle in self.list_resources(ResourceFilter(kind=ResourceKind.VIRTUAL_MACHINE, group=group)):
            self._delete_instance(handle.name)

        # Boot disks are auto-deleted with their instance
        for handle in self.list_resources(ResourceFilter(kind=ResourceKind.DISK, group=group)):
            try:
                self._delete_disk(handle.name)
            except ResourceNotFoundError:
                self._log_debug(f"Disk {handle.name} already gone")

    # ------------------------------------------------------------------
    # Update
    # ------------------------------------------------------------------

    def update_resource(self, handle: ResourceHandle, spec: ResourceSpec) -> None:
        props = spec.properties

        if handle.kind == ResourceKind.RESOURCE_GROUP:
            raise ProviderError('update', handle.name, "resource groups cannot be updated")

        if 'labels' in props:
            self._set_labels(handle, props['labels'])

        if handle.kind != ResourceKind.VIRTUAL_MACHINE:
            if any(k in props for k in ('attach_disks', 'detach_disks', 'power_action')):
                raise ProviderError('update', handle.name, "only virtual machines support disk and power changes")
            return

        for disk_name in props.get('attach_disks', []):
            self._attach_disk(handle.name, disk_name)

        for disk_name in props.get('detach_disks', []):
            self._detach_disk(handle.name, disk_name)

        action = props.get('power_action')
        if action:
            self._power(handle.name, action)

    def _set_labels(self, handle: ResourceHandle, changes: Dict[str, Optional[str]]):
        if handle.kind == ResourceKind.DISK:
            collection = self.compute.disks()
            key = {'disk': handle.name}
            set_key = {'resource': handle.name}
        else:
            collection = self.compute.instances()
            key = {'instance': handle.name}
            set_key = {'instance': handle.name}

        current = self._call('update', handle.name, collection.get(
            project=self.project, zone=self.zone, **key
        ))

        labels = dict(current.get('labels', {}))
        for label, value in changes.items():
            if value is None:
                labels.pop(label, None)
            else:
                labels[label] = value

        if self.logger:
            log_api_call(self.logger, 'setLabels', resource=handle.name, labels=labels)

        operation = self._call('update', handle.name, collection.setLabels(
            project=self.project,
            zone=self.zone,
            body={'labels': labels, 'labelFingerprint': current.get('labelFingerprint')},
            **set_key
        ))
        self._wait_for_operation(operation, 'update', handle.name)

    def _attach_disk(self, vm_name: str, disk_name: str):
        attach_body = {
            'source': self._disk_url(disk_name),
            'deviceName': disk_name,
            'autoDelete': False,
            'mode': 'READ_WRITE',
        }
        if self.logger:
            log_api_call(self.logger, 'instances.attachDisk', instance=vm_name, disk=disk_name)

        operation = self._call('update', vm_name, self.compute.instances().attachDisk(
            project=self.project,
            zone=self.zone,
            instance=vm_name,
            body=attach_body
        ))
        self._wait_for_operation(operation, 'update', vm_name)

    def _detach_disk(self, vm_name: str, disk_name: str):
        if self.logger:
            log_api_call(self.logger, 'instances.detachDisk', instance=vm_name, deviceName=disk_name)

        operation = self._call('update', vm_name, self.compute.instances().detachDisk(
            project=self.project,
            zone=self.zone,
            instance=vm_name,
            deviceName=disk_name
        ))
        self._wait_for_operation(operation, 'update', vm_name)

    def _power(self, vm_name: str, action: str):
        method = POWER_METHODS.get(action)
        if method is None:
            raise ProviderError('update', vm_name, f"unknown power action: {action}")

        if self.logger:
            log_api_call(self.logger, f'instances.{method}', instance=vm_name)

        operation = self._call('update', vm_name, getattr(self.compute.instances(), method)(
            project=self.project,
            zone=self.zone,
            instance=vm_name
        ))
        self._wait_for_operation(operation, 'update', vm_name)

        target = 'TERMINATED' if action == 'stop' else 'RUNNING'
        self._wait_for_status(vm_name, target)

    # ------------------------------------------------------------------
    # List
    # ------------------------------------------------------------------

    def list_resources(self, filter: Optional[ResourceFilter] = None) -> List[ResourceHandle]:
        filter = filter or ResourceFilter()

        labels = dict(filter.labels)
        if filter.group:
            labels[GROUP_LABEL] = filter.group
        expression = ' AND '.join(f'labels.{k}={v}' for k, v in sorted(labels.items())) or None

        handles = []
        if filter.kind in (None, ResourceKind.VIRTUAL_MACHINE, ResourceKind.RESOURCE_GROUP):
            for item in self._list_all(self.compute.instances(), expression):
                handles.append(self._item_handle(ResourceKind.VIRTUAL_MACHINE, item))
        if filter.kind in (None, ResourceKind.DISK, ResourceKind.RESOURCE_GROUP):
            for item in self._list_all(self.compute.disks(), expression):
                handles.append(self._item_handle(ResourceKind.DISK, item))

        if filter.kind == ResourceKind.RESOURCE_GROUP:
            groups = []
            for handle in handles:
                if handle.group and handle.group not in groups:
                    groups.append(handle.group)
            return [
                ResourceHandle(
                    id=f'{self._zone_path()}/labels/{GROUP_LABEL}={group}',
                    kind=ResourceKind.RESOURCE_GROUP,
                    name=group,
                )
                for group in groups
            ]

        return handles

    def _item_handle(self, kind: ResourceKind, item: Dict) -> ResourceHandle:
        group = item.get('labels', {}).get(GROUP_LABEL)
        return self._handle(kind, item['name'], group, item)

    def _list_all(self, collection, expression: Optional[str]) -> List[Dict]:
        """Page through a zonal list call."""
        kwargs = {'project': self.project, 'zone': self.zone}
        if expression:
            kwargs['filter'] = expression

        items = []
        request = collection.list(**kwargs)
        while request is not None:
            response = self._call('list', expression or '*', request)
            items.extend(response.get('items', []))
            request = collection.list_next(previous_request=request, previous_response=response)
        return items
