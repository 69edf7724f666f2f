"""Tests for the in-memory and dry-run providers."""

from unittest.mock import MagicMock

import pytest

from vm_workflow.core.exceptions import ProviderError, ResourceNotFoundError
from vm_workflow.core.resources import ResourceHandle, ResourceKind
from vm_workflow.providers import DryRunProvider, InMemoryProvider, ResourceFilter, ResourceSpec


def _group(provider, name='rg'):
    return provider.create_resource(ResourceSpec(kind=ResourceKind.RESOURCE_GROUP, name=name))


def _disk(provider, name='d1', group='rg'):
    return provider.create_resource(ResourceSpec(kind=ResourceKind.DISK, name=name, group=group))


def _vm(provider, name='vm', group='rg', data_disks=()):
    return provider.create_resource(ResourceSpec(
        kind=ResourceKind.VIRTUAL_MACHINE, name=name, group=group,
        properties={'data_disks': list(data_disks)}
    ))


class TestInMemoryCreate:
    """Tests for InMemoryProvider.create_resource."""

    def test_handles_are_deterministic(self, provider):
        """Ids count up in creation order."""
        rg = _group(provider)
        disk = _disk(provider)

        assert rg.id == '/fake/resourcegroup/1/rg'
        assert disk.id == '/fake/disk/2/d1'
        assert disk.group == 'rg'

    def test_duplicate_name(self, provider):
        """Names are unique across kinds."""
        _group(provider)
        with pytest.raises(ProviderError, match="already exists"):
            _group(provider)

    def test_missing_group(self, provider):
        """Disks need an existing group."""
        with pytest.raises(ProviderError, match="does not exist"):
            _disk(provider, group='nope')

    def test_vm_attaches_data_disks(self, provider):
        """Data disks listed at creation are attached."""
        _group(provider)
        _disk(provider, 'd1')
        _vm(provider, data_disks=['d1'])

        assert provider.resources['vm'].attached_disks == ['d1']

    def test_vm_with_unknown_disk(self, provider):
        """Attaching a disk that does not exist fails."""
        _group(provider)
        with pytest.raises(ResourceNotFoundError):
            _vm(provider, data_disks=['ghost'])

    def test_injected_failure(self):
        """fail_on makes matching calls raise."""
        provider = InMemoryProvider(fail_on={'create': ['rg']})
        with pytest.raises(ProviderError, match="injected failure"):
            _group(provider)
        assert provider.calls == [('create', 'rg')]


class TestInMemoryDelete:
    """Tests for InMemoryProvider.delete_resource."""

    def test_delete(self, provider):
        """Deleted resources are gone."""
        rg = _group(provider)
        provider.delete_resource(rg)
        assert provider.resources == {}

    def test_group_with_children(self, provider):
        """A group cannot be deleted before its contents."""
        rg = _group(provider)
        _disk(provider)
        with pytest.raises(ProviderError, match="still contains: d1"):
            provider.delete_resource(rg)

    def test_attached_disk(self, provider):
        """An attached disk cannot be deleted."""
        _group(provider)
        disk = _disk(provider)
        _vm(provider, data_disks=['d1'])
        with pytest.raises(ProviderError, match="attached to vm"):
            provider.delete_resource(disk)

    def test_unknown_handle(self, provider):
        """Deleting something that does not exist is ResourceNotFoundError."""
        handle = ResourceHandle(id='/fake/disk/9/x', kind=ResourceKind.DISK, name='x')
        with pytest.raises(ResourceNotFoundError):
            provider.delete_resource(handle)

    def test_stale_handle(self, provider):
        """A handle for a replaced resource of the same name does not match."""
        rg = _group(provider)
        provider.delete_resource(rg)
        _group(provider)
        with pytest.raises(ResourceNotFoundError):
            provider.delete_resource(rg)


class TestInMemoryUpdate:
    """Tests for InMemoryProvider.update_resource."""

    def test_labels_merge_and_remove(self, provider):
        """None removes a label, other values are merged."""
        _group(provider)
        vm = _vm(provider)
        provider.update_resource(vm, ResourceSpec(vm.kind, vm.name, properties={'labels': {'a': '1', 'b': '2'}}))
        provider.update_resource(vm, ResourceSpec(vm.kind, vm.name, properties={'labels': {'a': None}}))

        assert provider.resources['vm'].labels == {'b': '2'}

    def test_disk_changes_on_a_disk(self, provider):
        """Only VMs take attach/detach/power changes."""
        _group(provider)
        disk = _disk(provider)
        with pytest.raises(ProviderError, match="only virtual machines"):
            provider.update_resource(disk, ResourceSpec(disk.kind, disk.name, properties={'power_action': 'stop'}))

    def test_detach_not_attached(self, provider):
        """Detaching a disk that is not attached fails."""
        _group(provider)
        _disk(provider)
        vm = _vm(provider)
        with pytest.raises(ProviderError, match="not attached"):
            provider.update_resource(vm, ResourceSpec(vm.kind, vm.name, properties={'detach_disks': ['d1']}))

    def test_unknown_power_action(self, provider):
        """Only restart, stop and start are known."""
        _group(provider)
        vm = _vm(provider)
        with pytest.raises(ProviderError, match="unknown power action"):
            provider.update_resource(vm, ResourceSpec(vm.kind, vm.name, properties={'power_action': 'hibernate'}))


class TestInMemoryList:
    """Tests for InMemoryProvider.list_resources."""

    @pytest.fixture
    def populated(self, provider):
        _group(provider, 'rg')
        _group(provider, 'other')
        _disk(provider, 'd1', 'rg')
        _disk(provider, 'd2', 'other')
        _vm(provider, 'vm', 'rg')
        return provider

    def test_by_kind(self, populated):
        """Kind filter."""
        names = [h.name for h in populated.list_resources(ResourceFilter(kind=ResourceKind.DISK))]
        assert names == ['d1', 'd2']

    def test_by_group_includes_group(self, populated):
        """A group filter matches the group's contents and the group itself."""
        names = [h.name for h in populated.list_resources(ResourceFilter(group='rg'))]
        assert names == ['rg', 'd1', 'vm']

    def test_by_labels(self, populated):
        """Label filter."""
        vm = populated.resources['vm'].handle
        populated.update_resource(vm, ResourceSpec(vm.kind, vm.name, properties={'labels': {'env': 'test'}}))

        handles = populated.list_resources(ResourceFilter(labels={'env': 'test'}))
        assert [h.name for h in handles] == ['vm']

    def test_everything(self, populated):
        """No filter lists everything."""
        assert len(populated.list_resources()) == 5


class TestDryRunProvider:
    """Tests for DryRunProvider."""

    def test_create_logs_and_fabricates(self):
        """Nothing is created, but a handle comes back."""
        logger = MagicMock()
        provider = DryRunProvider(logger=logger)

        handle = provider.create_resource(ResourceSpec(
            kind=ResourceKind.DISK, name='d1', group='rg', properties={'size_gb': 50}
        ))

        assert handle.id == 'dry-run-1'
        assert handle.name == 'd1'
        message = logger.info.call_args[0][0]
        assert message.startswith("  [DRY RUN] Would create Disk 'd1' in group 'rg'")
        assert 'size_gb=50' in message

    def test_delete_forgets_handle(self):
        """Deleted handles no longer list."""
        provider = DryRunProvider()
        handle = provider.create_resource(ResourceSpec(kind=ResourceKind.RESOURCE_GROUP, name='rg'))
        provider.delete_resource(handle)
        assert provider.list_resources() == []

    def test_list_by_group(self):
        """Listing returns fabricated handles matching the filter."""
        provider = DryRunProvider()
        provider.create_resource(ResourceSpec(kind=ResourceKind.RESOURCE_GROUP, name='rg'))
        provider.create_resource(ResourceSpec(kind=ResourceKind.VIRTUAL_MACHINE, name='vm', group='rg'))

        vms = provider.list_resources(ResourceFilter(kind=ResourceKind.VIRTUAL_MACHINE, group='rg'))
        assert [h.name for h in vms] == ['vm']
        assert len(provider.list_resources(ResourceFilter(group='rg'))) == 2

    def test_update_only_logs(self):
        """Updates are logged."""
        logger = MagicMock()
        provider = DryRunProvider(logger=logger)
        handle = provider.create_resource(ResourceSpec(kind=ResourceKind.VIRTUAL_MACHINE, name='vm', group='rg'))

        provider.update_resource(handle, ResourceSpec(handle.kind, handle.name, properties={'power_action': 'restart'}))

        assert 'Would update VirtualMachine:vm' in logger.info.call_args[0][0]
