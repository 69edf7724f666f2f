"""
VM Workflow - Authentication Manager

This module handles Google Cloud authentication and Compute API client
creation for the GCE provider backend.
"""

import google.auth
from google.auth.exceptions import DefaultCredentialsError
from google.auth.transport.requests import Request
from googleapiclient import discovery
import googleapiclient.http
import google_auth_httplib2
import httplib2

from vm_workflow.core.exceptions import AuthenticationError
from vm_workflow.core.config import VERSION


class AuthManager:
    """
    Manages Google Cloud authentication and API client creation.

    This class:
    1. Gets credentials using Application Default Credentials (ADC)
    2. Validates and refreshes credentials if needed
    3. Creates an authenticated Compute Engine API client
    4. Provides clear error messages when authentication fails

    Usage:
        auth = AuthManager()
        compute, project = auth.get_client()
    """

    def __init__(self, logger=None):
        """Initialize the authentication manager."""
        self.logger = logger
        self._credentials = None
        self._project = None
        self._compute = None

    def get_credentials(self):
        """
        Get and validate Google Cloud credentials.

        This uses Application Default Credentials (ADC), which searches for
        credentials in this order:
        1. GOOGLE_APPLICATION_CREDENTIALS environment variable
        2. User credentials from gcloud auth application-default login
        3. GCE metadata service (if running on Google Cloud)

        Returns:
            tuple: (credentials, project_id)

        Raises:
            AuthenticationError: If credentials not found or invalid
        """

        try:
            credentials, project = google.auth.default()

            if not credentials.valid:
                # Try to refresh if possible
                if credentials.expired and getattr(credentials, 'refresh_token', None):
                    try:
                        if self.logger:
                            self.logger.info("  Refreshing expired credentials...")
                        credentials.refresh(Request())
                    except Exception as e:
                        raise AuthenticationError(
                            "Credentials expired and refresh failed",
                            fix="gcloud auth application-default login"
                        ) from e
                elif credentials.expired:
                    raise AuthenticationError(
                        "Credentials are invalid",
                        fix="gcloud auth application-default login"
                    )

            return credentials, project

        except DefaultCredentialsError as e:
            raise AuthenticationError(
                "No credentials found. You need to authenticate first.",
                fix="gcloud auth application-default login"
            ) from e

    def get_client(self, project=None):
        """
        Get authenticated Google Compute Engine API client.

        Args:
            project: GCP project ID (optional). If not provided, uses the
                    project from credentials.

        Returns:
            tuple: (compute_client, project_id)

        Raises:
            AuthenticationError: If authentication fails
        """

        if not self._credentials:
            self._credentials, self._project = self.get_credentials()

        project = project or self._project
        if not project:
            raise AuthenticationError(
                "No project configured",
                fix="gcloud config set project <PROJECT_ID> or pass --project"
            )

        if not self._compute:
            try:
                def _request_builder(http, *args, **kwargs):
                    """Inject User-Agent header for usage tracking."""
                    headers = kwargs.setdefault('headers', {})
                    headers['user-agent'] = f'vm_workflow-{VERSION}'
                    auth_http = google_auth_httplib2.AuthorizedHttp(
                        self._credentials,
                        http=httplib2.Http()
                    )
                    return googleapiclient.http.HttpRequest(auth_http, *args, **kwargs)

                self._compute = discovery.build(
                    'compute',
                    'v1',
                    credentials=self._credentials,
                    cache_discovery=False,
                    requestBuilder=_request_builder
                )
            except Exception as e:
                raise AuthenticationError(
                    f"Failed to create GCP API client: {str(e)}"
                ) from e

        return self._compute, project

    def get_project(self):
        """Get the project ID from credentials."""
        if not self._project:
            self._credentials, self._project = self.get_credentials()

        return self._project

    def is_authenticated(self):
        """Check if we have valid credentials."""
        try:
            self.get_credentials()
            return True
        except AuthenticationError:
            return False
