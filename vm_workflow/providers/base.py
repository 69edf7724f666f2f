"""
VM Workflow - Base Provider Adapter

This module defines the narrow capability interface the workflow engine
needs from a cloud backend: create, update, delete and list resources.

Any backend that implements it can be plugged in: the real Compute Engine
API, an in-memory fake for tests, or a dry-run logger.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from vm_workflow.core.resources import ResourceHandle, ResourceKind


@dataclass(frozen=True)
class ResourceSpec:
    """
    Description of a resource to create, or of changes to apply.

    Attributes:
        kind: Kind of resource
        name: Resource name
        group: Resource group the resource belongs to (None for groups)
        properties: Kind-specific settings

    Properties understood by the bundled providers:
        Disk create: size_gb, disk_type
        VirtualMachine create: machine_type, image, boot_disk_size_gb,
            data_disks (list of disk names)
        Update (any kind): labels (dict; a None value removes the key)
        VirtualMachine update: attach_disks, detach_disks (lists of disk
            names), power_action ('restart', 'stop' or 'start')
    """
    kind: ResourceKind
    name: str
    group: Optional[str] = None
    properties: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ResourceFilter:
    """
    Filter for list_resources(). Unset fields match everything.

    Attributes:
        kind: Only resources of this kind
        group: Only resources in this group (and the group itself, where
               the backend has a group object)
        labels: Only resources carrying all of these labels
    """
    kind: Optional[ResourceKind] = None
    group: Optional[str] = None
    labels: Dict[str, str] = field(default_factory=dict)


class ProviderAdapter(ABC):
    """
    Base class for all provider backends.

    Every backend must implement the four capability methods. Failures are
    raised as ProviderError (ResourceNotFoundError when the resource does
    not exist). Timeouts and retries are the backend's business, not the
    engine's.

    Example:
        provider = InMemoryProvider()
        handle = provider.create_resource(
            ResourceSpec(kind=ResourceKind.DISK, name='dsk-1', group='rg-1',
                         properties={'size_gb': 50})
        )
        provider.delete_resource(handle)
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable name of this backend."""
        pass

    @abstractmethod
    def create_resource(self, spec: ResourceSpec) -> ResourceHandle:
        """
        Create a resource.

        Args:
            spec: What to create

        Returns:
            Handle of the created resource

        Raises:
            ProviderError: If creation fails
        """
        pass

    @abstractmethod
    def delete_resource(self, handle: ResourceHandle) -> None:
        """
        Delete a resource.

        Raises:
            ProviderError: If deletion fails
        """
        pass

    @abstractmethod
    def update_resource(self, handle: ResourceHandle, spec: ResourceSpec) -> None:
        """
        Apply changes to an existing resource.

        Args:
            handle: Resource to change
            spec: Changes to apply (see ResourceSpec properties)

        Raises:
            ProviderError: If the update fails
        """
        pass

    @abstractmethod
    def list_resources(self, filter: Optional[ResourceFilter] = None) -> List[ResourceHandle]:
        """
        List resources matching a filter.

        Args:
            filter: Optional filter; None lists everything the backend manages

        Returns:
            Matching handles
        """
        pass
