"""Tests for the resource registry and resource handles."""

from datetime import timezone

import pytest

from vm_workflow.core.resources import ResourceHandle, ResourceKind
from vm_workflow.orchestration.registry import RegistryEntry, ResourceRegistry


def _handle(name, kind=ResourceKind.DISK):
    return ResourceHandle(id=f'/fake/{name}', kind=kind, name=name)


class TestResourceHandle:
    """Tests for ResourceHandle."""

    def test_created_at_defaults_to_utc_now(self):
        """Handles carry a timezone-aware creation time."""
        handle = _handle('d1')
        assert handle.created_at.tzinfo == timezone.utc

    def test_is_immutable(self):
        """Handles are frozen."""
        handle = _handle('d1')
        with pytest.raises(AttributeError):
            handle.id = 'other'

    def test_str_uses_name(self):
        """String form is kind and name."""
        assert str(_handle('d1')) == 'Disk:d1'

    def test_str_falls_back_to_id(self):
        """Handles without a name show their id."""
        handle = ResourceHandle(id='abc', kind=ResourceKind.VIRTUAL_MACHINE)
        assert str(handle) == 'VirtualMachine:abc'


class TestResourceRegistry:
    """Tests for ResourceRegistry."""

    def test_empty_registry(self):
        """A new registry has no entries."""
        registry = ResourceRegistry()
        assert len(registry) == 0
        assert registry.entries() == []
        assert registry.reverse() == []

    def test_entries_in_creation_order(self):
        """entries() returns insertion order."""
        registry = ResourceRegistry()
        registry.record('rg', _handle('rg', ResourceKind.RESOURCE_GROUP))
        registry.record('d1', _handle('d1'))
        registry.record('vm', _handle('vm', ResourceKind.VIRTUAL_MACHINE))

        assert [e.operation_name for e in registry.entries()] == ['rg', 'd1', 'vm']

    def test_reverse_is_newest_first(self):
        """reverse() is the exact reverse of entries()."""
        registry = ResourceRegistry()
        for name in ('a', 'b', 'c'):
            registry.record(name, _handle(name))

        assert registry.reverse() == list(reversed(registry.entries()))
        assert registry.names() == ['a', 'b', 'c']

    def test_void_entries_are_recorded(self):
        """Operations without a resource are recorded with handle None."""
        registry = ResourceRegistry()
        registry.record('restart')

        assert 'restart' in registry
        assert registry.get('restart') == RegistryEntry('restart', None)
        assert registry.handles() == []

    def test_handles_skip_void_entries(self):
        """handles() only returns real handles."""
        registry = ResourceRegistry()
        disk = _handle('d1')
        registry.record('d1', disk)
        registry.record('tag')

        assert registry.handles() == [disk]

    def test_duplicate_name_rejected(self):
        """Recording the same operation twice is an error."""
        registry = ResourceRegistry()
        registry.record('d1', _handle('d1'))

        with pytest.raises(ValueError, match="already recorded"):
            registry.record('d1', _handle('d1'))
        assert len(registry) == 1

    def test_get_unknown_returns_none(self):
        """Unknown names resolve to None."""
        assert ResourceRegistry().get('missing') is None

    def test_entries_returns_a_copy(self):
        """Mutating the returned list does not touch the registry."""
        registry = ResourceRegistry()
        registry.record('d1', _handle('d1'))
        registry.entries().clear()

        assert len(registry) == 1

    def test_iteration(self):
        """Iterating yields entries in creation order."""
        registry = ResourceRegistry()
        registry.record('a', _handle('a'))
        registry.record('b')

        assert [e.operation_name for e in registry] == ['a', 'b']
