"""
VM Workflow - Base Validator

Base class for pre-flight checks run before a workflow touches the cloud.
Each validator checks one thing and returns pass/fail.

Pattern: Create a new validator by inheriting from BaseValidator
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional

from vm_workflow.core.exceptions import ValidationError


@dataclass
class ValidationResult:
    """
    Result from a single validation check.

    Attributes:
        validator_name: Name of the validator (for display)
        passed: True if validation passed, False if failed
        message: Human-readable message about the result
        details: Optional dict with extra info (for debugging/fixes)
    """
    validator_name: str
    passed: bool
    message: str
    details: Optional[dict] = None

    def __str__(self):
        status = "[OK]" if self.passed else "[X]"
        return f"{status} {self.validator_name}: {self.message}"

    @property
    def fix(self) -> Optional[str]:
        """Suggested fix, if the validator gave one."""
        return (self.details or {}).get('fix')


class ValidationResults:
    """
    Collection of validation results.
    """

    def __init__(self):
        self.results: List[ValidationResult] = []

    def add(self, result: ValidationResult):
        self.results.append(result)

    def all_passed(self) -> bool:
        """Check if all validations passed."""
        return all(r.passed for r in self.results)

    def get_failures(self) -> List[ValidationResult]:
        """Get only failed validations."""
        return [r for r in self.results if not r.passed]

    def log_failures(self, logger):
        """Log failed validations with their fixes."""
        failures = self.get_failures()
        if not failures:
            return

        logger.error("Pre-flight validation failed:")
        for result in failures:
            logger.error(f"  [X] {result.validator_name}")
            logger.error(f"    {result.message}")
            if result.fix:
                logger.error(f"    Fix: {result.fix}")

    def raise_for_failures(self):
        """
        Raise for the first failed validation.

        Raises:
            ValidationError: If any validation failed
        """
        failures = self.get_failures()
        if failures:
            first = failures[0]
            raise ValidationError(first.validator_name, first.message, fix=first.fix)


class BaseValidator(ABC):
    """
    Base class for all validators.

    To create a new validator:
    1. Inherit from this class
    2. Implement the validate() method
    3. Implement the name property

    Example:
        class QuotaValidator(BaseValidator):
            @property
            def name(self):
                return "Disk Quota"

            def validate(self):
                if enough_quota:
                    return ValidationResult(self.name, True, "Quota available")
                return ValidationResult(
                    self.name, False, "Not enough disk quota",
                    details={'fix': 'Request a quota increase'}
                )
    """

    def __init__(self, compute, project: str, zone: str):
        """
        Initialize validator.

        Args:
            compute: GCP compute client (from google-api-python-client)
            project: GCP project ID
            zone: GCP zone (e.g., 'us-central1-a')
        """
        self.compute = compute
        self.project = project
        self.zone = zone

    @abstractmethod
    def validate(self) -> ValidationResult:
        """
        Run the validation check.

        Returns:
            ValidationResult with pass/fail and message
        """
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable name of this validator."""
        pass


class ValidationRunner:
    """
    Runs multiple validators and collects results.

    Example:
        runner = ValidationRunner()
        runner.add(CredentialsValidator(compute, project, zone))
        runner.add(ZoneValidator(compute, project, zone))

        results = runner.run_all(logger)
        if not results.all_passed():
            results.log_failures(logger)
    """

    def __init__(self):
        self.validators: List[BaseValidator] = []

    def add(self, validator: BaseValidator):
        """Add a validator to the chain."""
        self.validators.append(validator)

    def run_all(self, logger=None) -> ValidationResults:
        """
        Run all validators and collect results.

        Args:
            logger: Optional logger for progress output

        Returns:
            ValidationResults with all results
        """
        results = ValidationResults()

        for validator in self.validators:
            if logger:
                logger.debug(f"Running validator: {validator.name}")

            result = validator.validate()
            results.add(result)

            if logger:
                status = "PASS" if result.passed else "FAIL"
                logger.debug(f"  {status}: {result.message}")
                if result.passed:
                    logger.info(f"  [OK] {result.validator_name}")
                else:
                    logger.info(f"  [FAIL] {result.validator_name}")

        return results
