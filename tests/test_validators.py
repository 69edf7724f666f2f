"""Tests for pre-flight validators."""

import json
from unittest.mock import MagicMock, patch

import httplib2
import pytest
from google.auth.exceptions import DefaultCredentialsError, RefreshError
from googleapiclient.errors import HttpError

from vm_workflow.core.exceptions import ValidationError
from vm_workflow.validators import (
    CredentialsValidator,
    ValidationResult,
    ValidationResults,
    ValidationRunner,
    ZoneValidator,
)
from vm_workflow.validators.credentials import LOGIN_FIX


def _http_error(status):
    body = json.dumps({'error': {'code': status, 'message': 'boom'}}).encode()
    return HttpError(httplib2.Response({'status': status}), body)


@pytest.fixture
def compute():
    return MagicMock()


class TestZoneValidator:
    """Tests for ZoneValidator."""

    def test_zone_up(self, compute):
        """A zone that is UP passes and reports its region."""
        compute.zones().get().execute.return_value = {
            'status': 'UP',
            'region': 'https://www.googleapis.com/compute/v1/projects/p/regions/us-central1',
        }

        result = ZoneValidator(compute, 'p', 'us-central1-a').validate()

        assert result.passed
        assert result.details['region'] == 'us-central1'

    def test_zone_down(self, compute):
        """A zone that is DOWN fails with a fix."""
        compute.zones().get().execute.return_value = {'status': 'DOWN'}

        result = ZoneValidator(compute, 'p', 'us-central1-a').validate()

        assert not result.passed
        assert result.message == "Zone 'us-central1-a' is DOWN"
        assert result.fix

    def test_zone_not_found(self, compute):
        """404 means a misspelled zone."""
        compute.zones().get().execute.side_effect = _http_error(404)

        result = ZoneValidator(compute, 'p', 'us-centrall-a').validate()

        assert not result.passed
        assert 'not found' in result.message
        assert result.fix == "gcloud compute zones list --project=p"

    def test_permission_denied(self, compute):
        """403 suggests enabling the API."""
        compute.zones().get().execute.side_effect = _http_error(403)

        result = ZoneValidator(compute, 'p', 'us-central1-a').validate()

        assert not result.passed
        assert 'compute.googleapis.com' in result.fix

    def test_other_http_error(self, compute):
        """Other errors fail without a fix."""
        compute.zones().get().execute.side_effect = _http_error(500)

        result = ZoneValidator(compute, 'p', 'us-central1-a').validate()

        assert not result.passed
        assert result.fix is None


class TestCredentialsValidator:
    """Tests for CredentialsValidator."""

    def test_valid_credentials(self, compute):
        """Valid credentials pass."""
        credentials = MagicMock(valid=True)
        with patch('google.auth.default', return_value=(credentials, 'adc-project')):
            result = CredentialsValidator(compute, None, 'us-central1-a').validate()

        assert result.passed
        assert result.details['project'] == 'adc-project'

    def test_no_credentials(self, compute):
        """Missing ADC fails with the login fix."""
        with patch('google.auth.default', side_effect=DefaultCredentialsError('none')):
            result = CredentialsValidator(compute, 'p', 'us-central1-a').validate()

        assert not result.passed
        assert result.fix == LOGIN_FIX

    def test_expired_refresh_fails(self, compute):
        """A failed refresh fails validation."""
        credentials = MagicMock(valid=False, expired=True, refresh_token='token')
        credentials.refresh.side_effect = RefreshError('revoked')
        with patch('google.auth.default', return_value=(credentials, 'p')):
            result = CredentialsValidator(compute, 'p', 'us-central1-a').validate()

        assert not result.passed
        assert result.message == "Credentials expired and refresh failed"

    def test_expired_without_refresh_token(self, compute):
        """Expired credentials that cannot refresh fail."""
        credentials = MagicMock(valid=False, expired=True, refresh_token=None)
        with patch('google.auth.default', return_value=(credentials, 'p')):
            result = CredentialsValidator(compute, 'p', 'us-central1-a').validate()

        assert not result.passed


class TestValidationResults:
    """Tests for ValidationResults and ValidationRunner."""

    def test_raise_for_failures(self):
        """The first failure is raised with its fix."""
        results = ValidationResults()
        results.add(ValidationResult('A', True, "fine"))
        results.add(ValidationResult('B', False, "broken", details={'fix': 'repair it'}))
        results.add(ValidationResult('C', False, "also broken"))

        with pytest.raises(ValidationError) as exc_info:
            results.raise_for_failures()

        assert exc_info.value.validator_name == 'B'
        assert exc_info.value.fix == 'repair it'

    def test_all_passed_does_not_raise(self):
        """Nothing is raised when everything passed."""
        results = ValidationResults()
        results.add(ValidationResult('A', True, "fine"))
        results.raise_for_failures()
        assert results.all_passed()

    def test_log_failures(self):
        """Failures and fixes are logged at ERROR."""
        logger = MagicMock()
        results = ValidationResults()
        results.add(ValidationResult('B', False, "broken", details={'fix': 'repair it'}))

        results.log_failures(logger)

        messages = [c[0][0] for c in logger.error.call_args_list]
        assert "    Fix: repair it" in messages

    def test_runner_runs_in_order(self, compute):
        """The runner collects one result per validator."""
        first, second = MagicMock(), MagicMock()
        first.validate.return_value = ValidationResult('first', True, "ok")
        second.validate.return_value = ValidationResult('second', False, "no")

        runner = ValidationRunner()
        runner.add(first)
        runner.add(second)
        results = runner.run_all(MagicMock())

        assert [r.validator_name for r in results.results] == ['first', 'second']
        assert [r.validator_name for r in results.get_failures()] == ['second']
