"""
VM Workflow - Resource Handles

Value types shared by providers, operations and the orchestration layer.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional


class ResourceKind(Enum):
    """Kinds of resources a provider can create."""
    RESOURCE_GROUP = 'ResourceGroup'
    DISK = 'Disk'
    VIRTUAL_MACHINE = 'VirtualMachine'


@dataclass(frozen=True)
class ResourceHandle:
    """
    Opaque reference to a created external resource.

    Attributes:
        id: Provider-assigned identifier (opaque to the engine)
        kind: Kind of resource
        name: Resource name as the provider knows it
        group: Name of the resource group this resource belongs to, if any
        created_at: When the handle was created (UTC)
    """
    id: str
    kind: ResourceKind
    name: str = ''
    group: Optional[str] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __str__(self):
        return f"{self.kind.value}:{self.name or self.id}"
