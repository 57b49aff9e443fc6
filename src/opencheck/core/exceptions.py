"""
Custom exceptions for OpenCheck.
"""


class OpenCheckError(Exception):
    """Base exception for all OpenCheck errors."""

    def __init__(self, message: str, details: str | None = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class PackageNotFoundError(OpenCheckError):
    """Raised when a package cannot be found on the npm registry."""

    def __init__(self, package_name: str):
        super().__init__(
            f"Package not found: {package_name}",
            details="The package does not exist on the registry or has been unpublished.",
        )
        self.package_name = package_name


class ManifestError(OpenCheckError):
    """Raised when a package.json manifest cannot be read or parsed."""

    def __init__(self, file_path: str, details: str | None = None):
        super().__init__(f"Failed to read manifest: {file_path}", details=details)
        self.file_path = file_path


class ValidationError(OpenCheckError):
    """Raised when input validation fails."""

    def __init__(self, field: str, value: str, reason: str):
        super().__init__(
            f"Validation failed for {field}",
            details=f"Value '{value}' is invalid: {reason}",
        )
        self.field = field
        self.value = value
        self.reason = reason


class NetworkError(OpenCheckError):
    """Raised when a network request fails or returns an unusable payload."""

    def __init__(self, url: str, status_code: int | None = None, details: str | None = None):
        message = f"Network request failed: {url}"
        if status_code:
            message += f" (status {status_code})"
        super().__init__(message, details=details)
        self.url = url
        self.status_code = status_code
