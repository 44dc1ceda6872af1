class BackendError(Exception):
    """Base class for errors raised by a storage backend."""

    pass


class ConfigurationError(BackendError):
    """Raised when a backend is constructed with incomplete settings."""

    pass


class CredentialsError(ConfigurationError):
    """Raised when the storage account name or access key is missing."""

    def __init__(self, message: str = "Credentials not found"):
        super().__init__(message)


class InvalidIDError(BackendError, ValueError):
    """Raised when a blob id is empty or malformed."""

    pass


class InvalidUploadableError(BackendError, TypeError):
    """Raised when an upload source cannot be read from."""

    pass


class FileTooLargeError(BackendError, ValueError):
    """Raised when an upload source exceeds the backend's max_size."""

    pass


class ConfirmationRequiredError(BackendError):
    """Raised when clear() is called without the CONFIRM sentinel."""

    pass
