"""
VM Workflow - Dry-Run Provider

Logs every call it receives and returns fabricated handles.
Nothing is created anywhere. Used by the --dry-run flag to show what a
workflow would do.
"""

import itertools
from typing import List, Optional

from vm_workflow.core.resources import ResourceHandle, ResourceKind
from vm_workflow.providers.base import ProviderAdapter, ResourceFilter, ResourceSpec


class DryRunProvider(ProviderAdapter):
    """
    Provider that only logs.

    list_resources() returns the handles this provider fabricated, so
    listing steps still show something sensible.
    """

    def __init__(self, logger=None):
        self.logger = logger
        self.created: List[ResourceHandle] = []
        self._ids = itertools.count(1)

    @property
    def name(self) -> str:
        return "dry-run"

    def _log(self, message: str):
        if self.logger:
            self.logger.info(f"  [DRY RUN] {message}")

    def create_resource(self, spec: ResourceSpec) -> ResourceHandle:
        props = ', '.join(f'{k}={v}' for k, v in spec.properties.items())
        self._log(f"Would create {spec.kind.value} '{spec.name}'"
                  + (f" in group '{spec.group}'" if spec.group else "")
                  + (f" ({props})" if props else ""))

        handle = ResourceHandle(
            id=f"dry-run-{next(self._ids)}",
            kind=spec.kind,
            name=spec.name,
            group=spec.group,
        )
        self.created.append(handle)
        return handle

    def delete_resource(self, handle: ResourceHandle) -> None:
        self._log(f"Would delete {handle}")
        self.created = [h for h in self.created if h.id != handle.id]

    def update_resource(self, handle: ResourceHandle, spec: ResourceSpec) -> None:
        self._log(f"Would update {handle}: {spec.properties}")

    def list_resources(self, filter: Optional[ResourceFilter] = None) -> List[ResourceHandle]:
        filter = filter or ResourceFilter()
        self._log(f"Would list resources (kind={filter.kind}, group={filter.group})")
        return [
            h for h in self.created
            if (filter.kind is None or h.kind == filter.kind)
            and (filter.group is None or filter.group in (h.group, h.name if h.kind == ResourceKind.RESOURCE_GROUP else None))
        ]
