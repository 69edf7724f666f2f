"""
VM Workflow - Base Operation

An Operation is one unit of provisioning work: a name, the names of the
operations it depends on, an execute function and an optional compensate
(undo) function.

Key concept: every operation that succeeds is recorded in the registry.
If something fails later, the engine undoes recorded operations newest
first, calling compensate() where one is declared and falling back to the
provider's delete for anything that only created a resource.
"""

from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from vm_workflow.core.exceptions import UnmetDependencyError
from vm_workflow.core.resources import ResourceHandle
from vm_workflow.providers.base import ProviderAdapter


class ExecutionContext:
    """
    What an operation sees while it runs.

    Attributes:
        provider: Backend to call
        registry: Registry of operations completed so far (read it, never write it)
        config: Workflow configuration, if any
        logger: Optional logger
        operation_name: Name of the operation currently running or compensating
    """

    def __init__(self, provider: ProviderAdapter, registry,
                 config=None, logger=None):
        self.provider = provider
        self.registry = registry
        self.config = config
        self.logger = logger
        self.operation_name: Optional[str] = None

    def handle(self, name: str) -> Optional[ResourceHandle]:
        """
        Resolve a prerequisite by operation name.

        Args:
            name: Name of an earlier operation

        Returns:
            The handle that operation produced (None for void operations)

        Raises:
            UnmetDependencyError: If the operation has not completed
        """
        entry = self.registry.get(name)
        if entry is None:
            raise UnmetDependencyError(self.operation_name or '<unknown>', name)
        return entry.handle

    def require(self, name: str) -> ResourceHandle:
        """Like handle(), but the prerequisite must have produced a resource."""
        handle = self.handle(name)
        if handle is None:
            raise UnmetDependencyError(self.operation_name or '<unknown>', name)
        return handle

    def log_info(self, message: str):
        if self.logger:
            self.logger.info(message)

    def log_debug(self, message: str):
        if self.logger:
            self.logger.debug(message)


ExecuteFn = Callable[[ExecutionContext], Optional[ResourceHandle]]
CompensateFn = Callable[[ExecutionContext, Optional[ResourceHandle]], None]


@dataclass(frozen=True)
class Operation:
    """
    A declared unit of provisioning work.

    Attributes:
        name: Unique name within a workflow
        execute: Called with an ExecutionContext; returns the created
                 resource's handle, or None if nothing was created
        depends_on: Names of operations that must have completed first
        compensate: Optional undo, called with the context and the handle
                    execute returned

    execute must return a ResourceHandle or None. Any other value fails the
    operation without a registry entry, so rollback never sees whatever
    execute created: clean such a resource up inside execute before
    returning.

    Example:
        Operation(
            name='disk',
            execute=lambda ctx: ctx.provider.create_resource(spec),
            depends_on=('rg',),
        )
    """
    name: str
    execute: ExecuteFn
    depends_on: Tuple[str, ...] = ()
    compensate: Optional[CompensateFn] = None

    def __post_init__(self):
        # Accept lists and sets, store a tuple
        object.__setattr__(self, 'depends_on', tuple(self.depends_on))

    def __str__(self):
        if self.depends_on:
            return f"{self.name} (after {', '.join(self.depends_on)})"
        return self.name
