"""
VM Workflow - Main Entry Point

Simple, clean entry points for the walkthrough and for managing what it
leaves behind.

Usage:
    from vm_workflow.main import run_walkthrough, list_group, cleanup_group

    # Run the walkthrough and tear everything down
    result = run_walkthrough(create_workflow_config(zone='us-central1-a'))

    # Inspect or remove a group kept with --keep-resources
    handles = list_group('vmwf-rg-k3x9q0ab', 'us-central1-a')
    success = cleanup_group('vmwf-rg-k3x9q0ab', 'us-central1-a')
"""

from typing import List, Optional

from vm_workflow.core.auth import AuthManager
from vm_workflow.core.config import WorkflowConfig
from vm_workflow.core.exceptions import ResourceNotFoundError, VMWorkflowError
from vm_workflow.core.resources import ResourceHandle, ResourceKind
from vm_workflow.orchestration import (
    CompositeReporter,
    LoggingReporter,
    ProgressReporter,
    WorkflowEngine,
    WorkflowResult,
)
from vm_workflow.providers import DryRunProvider, GCEProvider, ProviderAdapter, ResourceFilter
from vm_workflow.utils.logger import print_header, setup_logging
from vm_workflow.validators import CredentialsValidator, ValidationRunner, ZoneValidator
from vm_workflow.walkthrough import build_walkthrough

CLEANUP_ORDER = (
    ResourceKind.VIRTUAL_MACHINE,
    ResourceKind.DISK,
    ResourceKind.RESOURCE_GROUP,
)


def create_provider(config: WorkflowConfig, logger=None) -> ProviderAdapter:
    """
    Build the provider a run should use.

    Dry runs get a DryRunProvider and never authenticate. Everything else
    authenticates, runs the pre-flight validators and talks to Compute Engine.

    Raises:
        AuthenticationError: If no usable credentials or project
        ValidationError: If a pre-flight check fails
    """
    if config.dry_run:
        if logger:
            logger.info("[DRY RUN] No resources will be created")
        return DryRunProvider(logger=logger)

    auth = AuthManager(logger=logger)
    compute, project = auth.get_client(config.project)
    if logger:
        logger.debug(f"Authenticated to project: {project}")
        logger.info("Running pre-flight checks...")

    runner = ValidationRunner()
    runner.add(CredentialsValidator(compute, project, config.zone))
    runner.add(ZoneValidator(compute, project, config.zone))
    results = runner.run_all(logger)
    if not results.all_passed():
        if logger:
            results.log_failures(logger)
        results.raise_for_failures()

    return GCEProvider(
        compute,
        project,
        config.zone,
        logger=logger,
        timeout=config.operation_timeout,
        poll_interval=config.poll_interval,
    )


def run_walkthrough(config: WorkflowConfig = None, debug: bool = False,
                    show_progress: bool = True, provider: ProviderAdapter = None) -> WorkflowResult:
    """
    Run the VM management walkthrough.

    This will:
    1. Create a resource group and two data disks
    2. Create a VM with both disks attached
    3. Tag the VM
    4. Create and attach one more disk, detach the first one
    5. Restart the VM, power it off, list the group's VMs
    6. Tear everything down (unless config.ephemeral is False)

    Without a config the walkthrough runs ephemeral. A config passed in is
    used as given.

    On failure, everything created so far is rolled back.

    Args:
        config: Workflow configuration (default: WorkflowConfig(ephemeral=True))
        debug: Enable debug logging
        show_progress: Draw a progress bar over the forward phase
        provider: Backend to use (default: chosen from config)

    Returns:
        WorkflowResult. Pre-flight failures come back as a result whose
        error is set and whose succeeded_ops is empty.

    Example:
        >>> result = run_walkthrough(create_workflow_config(dry_run=True))
        >>> result.success
        True
    """
    config = config or WorkflowConfig(ephemeral=True)
    logger = setup_logging(level=config.log_level, log_file=config.log_file, debug=debug)

    print_header(logger, "VM Workflow - Walkthrough")
    logger.info(f"Zone: {config.zone}")
    if config.project:
        logger.info(f"Project: {config.project}")
    logger.info(f"Ephemeral: {'yes' if config.ephemeral else 'no (resources are kept)'}")
    logger.info("")

    try:
        provider = provider or create_provider(config, logger)
    except VMWorkflowError as e:
        logger.error(str(e))
        return WorkflowResult(error=e)

    operations = build_walkthrough(config)
    progress = ProgressReporter(len(operations), desc="Walkthrough", enabled=show_progress)
    engine = WorkflowEngine(
        provider,
        reporter=CompositeReporter(LoggingReporter(logger), progress),
        config=config,
        logger=logger,
    )

    logger.info(f"Using provider: {provider.name}")
    logger.info("")
    result = engine.run(operations)
    progress.close()

    result.log_summary(logger)
    logger.info("")
    logger.info("=" * 60)
    if result.success:
        logger.info(f"[OK] Walkthrough completed successfully! {result.get_summary()}")
        if not config.ephemeral:
            group = engine.registry.get('rg').handle
            logger.info(f"Resources kept in group: {group.name}")
            logger.info(f"  Remove them with: vm-workflow cleanup --group {group.name} --zone {config.zone}")
    elif result.needs_manual_cleanup:
        logger.critical("Walkthrough failed and rollback did not finish. Manual cleanup required.")
    else:
        logger.error(f"Walkthrough failed. {result.get_summary()}")
    logger.info("=" * 60)

    return result


def list_group(group: str, zone: str, project: str = None, config: WorkflowConfig = None,
               debug: bool = False, provider: ProviderAdapter = None) -> Optional[List[ResourceHandle]]:
    """
    List the disks and VMs of a resource group.

    Args:
        group: Resource group name
        zone: GCP zone
        project: GCP project ID (optional, uses default if not provided)
        config: Optional WorkflowConfig for advanced settings
        debug: Enable debug logging
        provider: Backend to use (default: chosen from config)

    Returns:
        Handles in the group, or None if listing failed
    """
    config = _with_location(config, zone, project)
    logger = setup_logging(level=config.log_level, log_file=config.log_file, debug=debug)

    try:
        provider = provider or create_provider(config, logger)
        handles = provider.list_resources(ResourceFilter(group=group))
    except VMWorkflowError as e:
        logger.error(f"Failed to list group {group}: {e}")
        return None

    handles = [h for h in handles if h.kind != ResourceKind.RESOURCE_GROUP]
    logger.info(f"Resource group {group}: {len(handles)} resources")
    for handle in handles:
        logger.info(f"  {handle.kind.value:15} {handle.name}")
    return handles


def cleanup_group(group: str, zone: str, project: str = None, config: WorkflowConfig = None,
                  debug: bool = False, provider: ProviderAdapter = None) -> bool:
    """
    Delete a resource group and everything in it.

    Used for groups left behind by --keep-resources or by a rollback that
    could not finish. A failed delete is logged and the sweep continues.

    Returns:
        True if the group is gone (or never existed), False on failure
    """
    config = _with_location(config, zone, project)
    logger = setup_logging(level=config.log_level, log_file=config.log_file, debug=debug)

    print_header(logger, f"VM Workflow - Cleanup {group}")

    try:
        provider = provider or create_provider(config, logger)
        handles = provider.list_resources(ResourceFilter(group=group))
    except VMWorkflowError as e:
        logger.error(f"Cleanup of group {group} failed: {e}")
        return False

    if not handles:
        logger.info(f"Nothing to clean up: no resources in group {group}")
        return True

    # VMs release their disks, and a group must be empty before it goes
    failures = []
    for kind in CLEANUP_ORDER:
        for handle in handles:
            if handle.kind != kind:
                continue
            logger.info(f"  Deleting {handle}...")
            try:
                provider.delete_resource(handle)
            except ResourceNotFoundError:
                # Boot disks go with their VM
                logger.debug(f"{handle} already gone")
            except VMWorkflowError as e:
                logger.error(f"  [X] Failed to delete {handle}: {e}")
                failures.append(handle)

    if failures:
        logger.error(f"Cleanup of group {group} incomplete, {len(failures)} resources left:")
        for handle in failures:
            logger.error(f"  {handle}")
        return False

    logger.info(f"[OK] Deleted resource group {group}")
    return True


def _with_location(config: Optional[WorkflowConfig], zone: str, project: Optional[str]) -> WorkflowConfig:
    config = config or WorkflowConfig()
    config.zone = zone
    if project:
        config.project = project
    return config
