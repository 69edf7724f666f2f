"""
VM Workflow - Configuration Management

This module manages configuration options for provisioning workflows.
Values come from dataclass defaults, an optional YAML file, and finally
command line flags (highest priority).
"""

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Dict, Optional

import yaml

from vm_workflow.core.exceptions import ConfigError

# Version for usage tracking
VERSION = '1.0.0'


@dataclass
class WorkflowConfig:
    """
    Configuration for a provisioning workflow run.

    Example:
        config = WorkflowConfig(
            zone='us-central1-a',
            ephemeral=True,
            deadline_seconds=1800
        )
    """

    # Location settings
    project: Optional[str] = None
    zone: str = 'us-central1-a'

    # Naming
    name_prefix: str = 'vmwf'

    # VM settings
    machine_type: str = 'e2-standard-2'
    image_project: str = 'debian-cloud'
    image_family: str = 'debian-12'
    boot_disk_size_gb: int = 10

    # Data disk settings
    disk_type: str = 'pd-standard'
    data_disk_sizes_gb: tuple = (50, 100)
    extra_disk_size_gb: int = 10

    # Labels applied by the tag step
    tags: Dict[str, str] = field(default_factory=lambda: {
        'who-rocks': 'python',
        'where': 'on-gce',
    })

    # Behavior settings
    ephemeral: bool = False  # Tear everything down after a successful run
    auto_rollback: bool = True  # Automatically rollback on failure
    dry_run: bool = False  # Show what would happen without doing it

    # Timeout settings (in seconds)
    deadline_seconds: Optional[float] = None  # Whole forward phase
    operation_timeout: int = 600  # 10 minutes per provider call
    poll_interval: float = 5.0

    # Logging settings
    log_level: str = 'INFO'
    log_file: Optional[str] = None


# Default configuration
DEFAULT_WORKFLOW_CONFIG = WorkflowConfig()


def create_workflow_config(**kwargs) -> WorkflowConfig:
    """
    Create a workflow configuration with custom options.

    Args:
        **kwargs: Configuration options (any field from WorkflowConfig)

    Returns:
        WorkflowConfig: Configuration object

    Example:
        config = create_workflow_config(
            zone='europe-west1-b',
            log_level='DEBUG'
        )
    """
    return WorkflowConfig(**kwargs)


def load_config(path) -> WorkflowConfig:
    """
    Load a workflow configuration from a YAML file.

    The file is a flat mapping of WorkflowConfig field names to values.
    Missing fields keep their defaults.

    Args:
        path: Path to the YAML file

    Returns:
        WorkflowConfig: Configuration object

    Raises:
        ConfigError: If the file is missing, malformed, or has unknown keys
    """
    config_path = Path(path)
    if not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    try:
        with open(config_path, 'r') as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {config_path} must contain a mapping")

    known = {f.name for f in fields(WorkflowConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"Unknown config keys in {config_path}: {', '.join(unknown)}")

    # YAML has no tuples
    if 'data_disk_sizes_gb' in data:
        sizes = data['data_disk_sizes_gb']
        if (not isinstance(sizes, list) or len(sizes) != 2
                or not all(isinstance(s, int) and not isinstance(s, bool) and s > 0 for s in sizes)):
            raise ConfigError(
                f"data_disk_sizes_gb in {config_path} must be a list of two positive integers, got: {sizes!r}"
            )
        data['data_disk_sizes_gb'] = tuple(sizes)

    return WorkflowConfig(**data)
