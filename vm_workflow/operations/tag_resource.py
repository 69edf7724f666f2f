"""
VM Workflow - Tag Operation

Adds labels to a resource.
Rollback: Removes the labels that were added.
"""

from typing import Dict

from vm_workflow.operations.base import ExecutionContext, Operation
from vm_workflow.providers.base import ResourceSpec


def tag_resource(name: str, target: str, tags: Dict[str, str]) -> Operation:
    """
    Build an operation that labels the resource created by `target`.

    Args:
        name: Operation name
        target: Name of the operation that created the resource
        tags: Labels to set

    Returns:
        Operation depending on the target
    """
    tags = dict(tags)

    def execute(ctx: ExecutionContext):
        handle = ctx.require(target)
        ctx.log_info(f"  Tagging {handle.name}: {tags}")
        ctx.provider.update_resource(handle, ResourceSpec(
            kind=handle.kind,
            name=handle.name,
            group=handle.group,
            properties={'labels': tags},
        ))
        return None

    def compensate(ctx: ExecutionContext, _handle):
        handle = ctx.require(target)
        ctx.log_info(f"  Removing tags from {handle.name}...")
        ctx.provider.update_resource(handle, ResourceSpec(
            kind=handle.kind,
            name=handle.name,
            group=handle.group,
            properties={'labels': {key: None for key in tags}},
        ))

    return Operation(name=name, execute=execute, depends_on=(target,), compensate=compensate)
