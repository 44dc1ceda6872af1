"""
blobbackend
===========

Azure Blob Storage backend for file-upload libraries: upload, read, stat and
delete files by id, with "not found" mapped to None/False instead of errors.

Main entry points:
- AzureBackend: the backend class
- CONFIRM: sentinel required by AzureBackend.clear()
- File: lazy (backend, id) handle returned by upload() and get()
- RandomHasher, ContentHasher: id generation strategies
- load_config, AzureBackendConfig: environment / .env configuration
- BackendError and subclasses: exceptions

Example:
    from blobbackend import AzureBackend, ContentHasher

    backend = AzureBackend(
        storage_account_name="mystorage",
        storage_access_key="secret_key",
        container="uploads",
        max_size=10 * 1024 * 1024,
        hasher=ContentHasher(),
    )
    file = backend.upload(open("photo.jpg", "rb"))
"""

from .azure_backend import CONFIRM, AzureBackend

from .config import AzureBackendConfig, load_config

from .errors import (
    BackendError,
    ConfigurationError,
    ConfirmationRequiredError,
    CredentialsError,
    FileTooLargeError,
    InvalidIDError,
    InvalidUploadableError,
)
from .file import File
from .hashers import ContentHasher, RandomHasher
from .storage_protocols import Backend, Hasher, Uploadable
from .validators import valid_id

import importlib.metadata

try:
    __version__ = importlib.metadata.version(__name__)
except importlib.metadata.PackageNotFoundError:
    __version__ = "0.0.0"

__all__ = [
    "AzureBackend",
    "CONFIRM",
    "AzureBackendConfig",
    "load_config",
    "BackendError",
    "ConfigurationError",
    "ConfirmationRequiredError",
    "CredentialsError",
    "FileTooLargeError",
    "InvalidIDError",
    "InvalidUploadableError",
    "File",
    "ContentHasher",
    "RandomHasher",
    "Backend",
    "Hasher",
    "Uploadable",
    "valid_id",
]
