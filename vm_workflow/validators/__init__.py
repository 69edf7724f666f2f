"""
VM Workflow - Validators Module

Pre-flight checks run before a workflow touches Compute Engine.

Usage:
    from vm_workflow.validators import (
        ValidationRunner,
        CredentialsValidator,
        ZoneValidator
    )

    runner = ValidationRunner()
    runner.add(CredentialsValidator(compute, project, zone))
    runner.add(ZoneValidator(compute, project, zone))

    results = runner.run_all(logger)
    if not results.all_passed():
        results.log_failures(logger)
"""

from vm_workflow.validators.base import (
    BaseValidator,
    ValidationResult,
    ValidationResults,
    ValidationRunner
)
from vm_workflow.validators.credentials import CredentialsValidator
from vm_workflow.validators.zone import ZoneValidator

__all__ = [
    # Base classes
    'BaseValidator',
    'ValidationResult',
    'ValidationResults',
    'ValidationRunner',

    # Validators
    'CredentialsValidator',
    'ZoneValidator',
]
