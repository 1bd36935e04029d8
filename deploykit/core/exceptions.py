"""Custom exceptions for deploykit."""

from typing import Any


class DeployKitError(Exception):
    """Base exception for deploykit."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ConfigurationError(DeployKitError):
    """Required configuration is missing."""

    pass


class InvalidTarget(DeployKitError):
    """Target environment is not one of the recognized names."""

    def __init__(self, target: str, allowed: list[str] | tuple[str, ...] | None = None, reason: str | None = None):
        if reason is None:
            allowed_text = ", ".join(allowed or [])
            reason = f'You entered "{target}". Target must be one of: {allowed_text}'
        super().__init__(
            f"Invalid argument: target. {reason}",
            {"target": target},
        )
        self.target = target


class UserAborted(DeployKitError):
    """Operator declined a confirmation prompt."""

    def __init__(self, message: str = "Cancelled."):
        super().__init__(message)


class RemoteApiError(DeployKitError):
    """A cloud or CI API answered with an error."""

    def __init__(self, service: str, message: str, status_code: int | None = None):
        details: dict[str, Any] = {"service": service}
        if status_code is not None:
            details["status_code"] = status_code
        super().__init__(f"{service} API error: {message}", details)
        self.service = service
        self.status_code = status_code


class TaskFailed(DeployKitError):
    """A long-running cloud task reached the failed state."""

    def __init__(self, task_id: str, description: str = ""):
        super().__init__(
            f"{description} - Notification {task_id} failed.",
            {"task_id": task_id, "description": description},
        )
        self.task_id = task_id
        self.description = description


class NotificationTimeout(DeployKitError):
    """A long-running cloud task did not finish within the allowed polls."""

    def __init__(self, task_id: str, attempts: int):
        super().__init__(
            f"Notification {task_id} still not finished after {attempts} checks.",
            {"task_id": task_id, "attempts": attempts},
        )
        self.task_id = task_id
        self.attempts = attempts


class NoUsableBackup(DeployKitError):
    """No completed backup matched the request."""

    def __init__(self, environment: str, backup_type: str | None = None):
        details: dict[str, Any] = {"environment": environment}
        if backup_type:
            details["type"] = backup_type
        super().__init__("No usable backups were found.", details)


class UntrustedBackupHost(DeployKitError):
    """A backup download link points somewhere other than the cloud API."""

    def __init__(self, url: str):
        super().__init__(
            "Backup URL is not hosted on the Acquia API. Refusing to follow it.",
            {"url": url},
        )
        self.url = url


class ProcessExecutionError(DeployKitError):
    """A remote shell or Drush process exited non-zero."""

    def __init__(self, command: str, returncode: int, output: str | None = None):
        details: dict[str, Any] = {"command": command, "returncode": returncode}
        if output:
            details["output"] = output
        super().__init__(
            f"Command '{command}' failed with exit code {returncode}",
            details,
        )
        self.command = command
        self.returncode = returncode


class DeploymentInProgress(DeployKitError):
    """Another run already holds the lease for this target."""

    def __init__(self, target: str, holder: str | None = None):
        details: dict[str, Any] = {"target": target}
        if holder:
            details["holder"] = holder
        super().__init__(f"A deployment to {target} is already running.", details)
        self.target = target
