"""
VM Workflow - Resource Registry

Tracks every resource created during a workflow run, in creation order.
This is how we know what exists and what to tear down if something fails.
"""

from dataclasses import dataclass
from typing import Iterator, List, Optional

from vm_workflow.core.resources import ResourceHandle, ResourceKind


@dataclass(frozen=True)
class RegistryEntry:
    """
    One successful operation and the handle it produced.

    handle is None for operations that produced no resource
    (updates, restarts, listings).
    """
    operation_name: str
    handle: Optional[ResourceHandle] = None


class ResourceRegistry:
    """
    Ordered record of successful operations.

    Insertion order is creation order. Entries are only ever appended;
    the registry is thrown away as a whole at the end of a run.

    Example:
        registry = ResourceRegistry()
        registry.record("rg", rg_handle)
        registry.record("disk", disk_handle)

        # Newest first, for rollback
        for entry in registry.reverse():
            print(entry.operation_name)
    """

    def __init__(self):
        """Initialize empty registry."""
        self._entries: List[RegistryEntry] = []
        self._index = {}

    def record(self, name: str, handle: Optional[ResourceHandle] = None) -> RegistryEntry:
        """
        Record a successful operation.

        Args:
            name: Operation name
            handle: Handle of the created resource, or None

        Returns:
            The new RegistryEntry

        Raises:
            ValueError: If the name was already recorded
        """
        if name in self._index:
            raise ValueError(f"Operation '{name}' is already recorded")

        entry = RegistryEntry(operation_name=name, handle=handle)
        self._index[name] = entry
        self._entries.append(entry)
        return entry

    def entries(self) -> List[RegistryEntry]:
        """Entries in creation order."""
        return list(self._entries)

    def reverse(self) -> List[RegistryEntry]:
        """Entries newest first."""
        return list(reversed(self._entries))

    def get(self, name: str) -> Optional[RegistryEntry]:
        """Look up an entry by operation name."""
        return self._index.get(name)

    def handles(self) -> List[ResourceHandle]:
        """All recorded handles in creation order, skipping void entries."""
        return [e.handle for e in self._entries if e.handle is not None]

    def names(self) -> List[str]:
        """Recorded operation names in creation order."""
        return [e.operation_name for e in self._entries]

    def __contains__(self, name) -> bool:
        return name in self._index

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[RegistryEntry]:
        return iter(list(self._entries))
