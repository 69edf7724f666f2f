"""
VM Workflow - Custom Exception Classes

This module defines all custom exceptions used in VM Workflow.

The workflow engine never lets these escape from WorkflowEngine.run():
they are captured and returned as data on the WorkflowResult. Provider
adapters, the auth layer and the config loader raise them normally.
"""


class VMWorkflowError(Exception):
    """
    Base exception for all VM Workflow errors.

    All custom exceptions inherit from this, making it easy to catch
    any VM Workflow-specific error with a single except clause.
    """
    pass


class DependencyError(VMWorkflowError):
    """
    Raised when the declared operation order is invalid.

    This is always a defect in the caller's operation list:
    - An operation depends on a name that does not appear earlier
    - An operation depends on itself
    - Two operations share the same name
    """

    def __init__(self, operation_name: str, reason: str):
        """
        Args:
            operation_name: Operation whose declaration is invalid
            reason: What is wrong with it
        """
        self.operation_name = operation_name
        self.reason = reason
        super().__init__(f"Invalid dependency for '{operation_name}': {reason}")


class UnmetDependencyError(VMWorkflowError):
    """
    Raised when a prerequisite has no registry entry at execution time.
    """

    def __init__(self, operation_name: str, missing: str):
        """
        Args:
            operation_name: Operation that needed the prerequisite
            missing: Name of the prerequisite that is not in the registry
        """
        self.operation_name = operation_name
        self.missing = missing
        super().__init__(
            f"Operation '{operation_name}' requires '{missing}', "
            f"which has not completed"
        )


class ExecutionError(VMWorkflowError):
    """
    Raised when an operation's execute step fails.

    Triggers rollback. The original exception is kept in `cause`.
    """

    def __init__(self, operation_name: str, cause: Exception = None, reason: str = None):
        """
        Args:
            operation_name: Name of the operation that failed
            cause: Underlying exception, if any
            reason: Override for the message text
        """
        self.operation_name = operation_name
        self.cause = cause
        self.reason = reason or (str(cause) if cause is not None else "unknown error")
        super().__init__(f"Operation '{operation_name}' failed: {self.reason}")


class DeadlineExceededError(ExecutionError):
    """
    Raised when the workflow deadline passes between two operations.
    """

    def __init__(self, operation_name: str, deadline: float, elapsed: float):
        self.deadline = deadline
        self.elapsed = elapsed
        super().__init__(
            operation_name,
            reason=f"deadline of {deadline:.1f}s exceeded ({elapsed:.1f}s elapsed)"
        )


class CompensationError(VMWorkflowError):
    """
    Raised when undoing an operation fails during rollback.

    Never aborts the rollback sweep. Collected on
    WorkflowResult.rollback_errors; any entry there means manual
    cleanup may be required.
    """

    def __init__(self, operation_name: str, cause: Exception = None):
        """
        Args:
            operation_name: Operation that could not be undone
            cause: Underlying exception
        """
        self.operation_name = operation_name
        self.cause = cause
        message = f"Failed to roll back '{operation_name}'"
        if cause is not None:
            message += f": {cause}"
        super().__init__(message)


class ProviderError(VMWorkflowError):
    """
    Raised when a provider backend call fails.
    """

    def __init__(self, action: str, resource: str, reason: str):
        """
        Args:
            action: What was attempted (create, delete, update, list)
            resource: Resource name or id
            reason: Why it failed
        """
        self.action = action
        self.resource = resource
        self.reason = reason
        super().__init__(f"Provider {action} failed for '{resource}': {reason}")


class ResourceNotFoundError(ProviderError):
    """
    Raised when the provider has no resource with the given name or id.
    """

    def __init__(self, action: str, resource: str):
        super().__init__(action, resource, "resource not found")


class AuthenticationError(VMWorkflowError):
    """
    Raised when authentication fails.

    Common causes:
    - No credentials configured
    - Credentials expired
    - Invalid credentials
    """

    def __init__(self, message: str, fix: str = None):
        """
        Args:
            message: Error description
            fix: Suggested fix command (e.g., "gcloud auth login")
        """
        self.fix = fix
        full_message = f"{message}"
        if fix:
            full_message += f"\n\nFix: {fix}"
        super().__init__(full_message)


class ValidationError(VMWorkflowError):
    """
    Raised when pre-flight validation fails.
    """

    def __init__(self, validator_name: str, message: str, fix: str = None):
        """
        Args:
            validator_name: Name of the validator that failed
            message: What failed
            fix: Suggested fix
        """
        self.validator_name = validator_name
        self.fix = fix

        full_message = f"Validation failed: {validator_name}\n{message}"
        if fix:
            full_message += f"\n\nFix: {fix}"

        super().__init__(full_message)


class ConfigError(VMWorkflowError):
    """
    Raised when a configuration file cannot be loaded or has bad keys.
    """
    pass
