"""
VM Workflow - Zone Validator

Validates that the target zone exists, is UP, and that the project can
reach the Compute Engine API in it.
"""

from googleapiclient.errors import HttpError

from vm_workflow.validators.base import BaseValidator, ValidationResult


class ZoneValidator(BaseValidator):
    """
    Validates that the zone is reachable.

    Failure reasons:
    - Zone name is misspelled (404)
    - Compute Engine API not enabled or no permission (403)
    - Zone is DOWN
    """

    @property
    def name(self) -> str:
        return "Zone Reachability"

    def validate(self) -> ValidationResult:
        try:
            zone = self.compute.zones().get(project=self.project, zone=self.zone).execute()
        except HttpError as e:
            if e.resp.status == 404:
                return ValidationResult(
                    validator_name=self.name,
                    passed=False,
                    message=f"Zone '{self.zone}' not found",
                    details={
                        "zone": self.zone,
                        "fix": f"gcloud compute zones list --project={self.project}"
                    }
                )
            if e.resp.status == 403:
                return ValidationResult(
                    validator_name=self.name,
                    passed=False,
                    message=f"Permission denied reading zone '{self.zone}'",
                    details={
                        "error": str(e),
                        "fix": f"gcloud services enable compute.googleapis.com --project={self.project}"
                    }
                )
            return ValidationResult(
                validator_name=self.name,
                passed=False,
                message=f"Failed to get zone info: {str(e)}",
                details={"error": str(e)}
            )

        status = zone.get('status')
        if status != 'UP':
            return ValidationResult(
                validator_name=self.name,
                passed=False,
                message=f"Zone '{self.zone}' is {status}",
                details={"zone": self.zone, "status": status, "fix": "Pick another zone with --zone"}
            )

        return ValidationResult(
            validator_name=self.name,
            passed=True,
            message=f"Zone {self.zone} is UP",
            details={"zone": self.zone, "region": zone.get('region', '').split('/')[-1]}
        )
