"""
VM Workflow - Credentials Validator

Validates that Google Cloud credentials are present and valid.
"""

import google.auth
from google.auth.exceptions import DefaultCredentialsError, RefreshError
from google.auth.transport.requests import Request

from vm_workflow.validators.base import BaseValidator, ValidationResult

LOGIN_FIX = "gcloud auth application-default login"


class CredentialsValidator(BaseValidator):
    """
    Validates that Google Cloud credentials are present and valid.

    This checks:
    1. Credentials exist (user has authenticated)
    2. Credentials are valid, or can be refreshed if expired

    Example:
        result = CredentialsValidator(compute, project, zone).validate()
        if not result.passed:
            print(f"Fix: {result.fix}")
    """

    @property
    def name(self) -> str:
        return "Credentials & Authentication"

    def validate(self) -> ValidationResult:
        try:
            # ADC search order: GOOGLE_APPLICATION_CREDENTIALS, gcloud user
            # credentials, then the GCE metadata server
            credentials, project = google.auth.default()
        except DefaultCredentialsError as e:
            return ValidationResult(
                validator_name=self.name,
                passed=False,
                message="No credentials found",
                details={"error": str(e), "fix": LOGIN_FIX}
            )

        if not credentials.valid:
            if credentials.expired and getattr(credentials, 'refresh_token', None):
                try:
                    credentials.refresh(Request())
                except RefreshError as e:
                    return ValidationResult(
                        validator_name=self.name,
                        passed=False,
                        message="Credentials expired and refresh failed",
                        details={"error": str(e), "fix": LOGIN_FIX}
                    )
            elif credentials.expired:
                return ValidationResult(
                    validator_name=self.name,
                    passed=False,
                    message="Credentials are invalid or expired",
                    details={"fix": LOGIN_FIX}
                )

        return ValidationResult(
            validator_name=self.name,
            passed=True,
            message=f"Authenticated to project: {self.project or project}",
            details={
                "project": self.project or project,
                "credentials_type": type(credentials).__name__
            }
        )
