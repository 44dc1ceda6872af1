import io
import logging
import mimetypes
from enum import Enum
from typing import IO, Any, Callable

from azure.core.exceptions import HttpResponseError, ResourceNotFoundError
from azure.storage.blob import BlobServiceClient, ContentSettings

from .config import AzureBackendConfig
from .errors import (
    ConfigurationError,
    ConfirmationRequiredError,
    CredentialsError,
    FileTooLargeError,
    InvalidUploadableError,
)
from .file import File
from .hashers import RandomHasher
from .storage_protocols import Backend, Hasher, Uploadable
from .validators import verify_id, verify_uploadable

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"


class _Confirm(Enum):
    CONFIRM = "confirm"


# Pass to AzureBackend.clear() to delete every blob in the container.
CONFIRM = _Confirm.CONFIRM


class AzureBackend(Backend):
    """
    Backend which stores files as block blobs in an Azure Storage container.

    Example:
        backend = AzureBackend(
            storage_account_name="mystorage",
            storage_access_key="secret_key",
            container="my-container",
        )
        file = backend.upload(io.BytesIO(b"hello"))
        backend.read(file.id)  # b"hello"
    """

    def __init__(
        self,
        storage_account_name: str,
        storage_access_key: str,
        container: str,
        max_size: int | None = None,
        hasher: Hasher | Callable[[Uploadable], str] | None = None,
        **azure_options: Any,
    ) -> None:
        """
        azure_options are forwarded verbatim to BlobServiceClient; an
        explicit account_url replaces the default *.blob.core.windows.net one.
        """
        if not storage_account_name or not storage_access_key:
            raise CredentialsError()
        if not container:
            raise ConfigurationError("Container name not given")

        options = dict(azure_options)
        account_url = options.pop(
            "account_url", f"https://{storage_account_name}.blob.core.windows.net"
        )
        self._client = BlobServiceClient(
            account_url=account_url,
            credential={
                "account_name": storage_account_name,
                "account_key": storage_access_key,
            },
            **options,
        )
        self._container_client = self._client.get_container_client(container)
        self._storage_account_name = storage_account_name
        self._container = container
        self._max_size = max_size
        self._hasher = hasher or RandomHasher()

    @classmethod
    def from_config(
        cls, config: AzureBackendConfig, **kwargs: Any
    ) -> "AzureBackend":
        """Convenience builder: create a backend from an AzureBackendConfig."""
        if config.account_url:
            kwargs.setdefault("account_url", config.account_url)
        kwargs.setdefault("max_size", config.max_size)
        return cls(
            storage_account_name=config.storage_account_name,
            storage_access_key=config.storage_access_key,
            container=config.container,
            **kwargs,
        )

    @property
    def storage_account_name(self) -> str:
        return self._storage_account_name

    @property
    def container(self) -> str:
        return self._container

    @property
    def max_size(self) -> int | None:
        return self._max_size

    def __repr__(self) -> str:
        return (
            f"AzureBackend(storage_account_name={self._storage_account_name!r}, "
            f"container={self._container!r})"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AzureBackend):
            return NotImplemented
        return (self.storage_account_name, self.container) == (
            other.storage_account_name,
            other.container,
        )

    def __hash__(self) -> int:
        return hash((self.storage_account_name, self.container))

    def _generate_id(self, uploadable: Uploadable) -> str:
        if hasattr(self._hasher, "hash"):
            return self._hasher.hash(uploadable)
        return self._hasher(uploadable)

    def _can_copy_from(self, uploadable: Uploadable) -> bool:
        return (
            isinstance(uploadable, File)
            and isinstance(uploadable.backend, AzureBackend)
            and uploadable.backend.storage_account_name == self.storage_account_name
        )

    @staticmethod
    def _content_type(uploadable: Uploadable) -> str:
        content_type = getattr(uploadable, "content_type", None)
        if content_type:
            return content_type
        for attr in ("path", "name"):
            path = getattr(uploadable, attr, None)
            if isinstance(path, str):
                guessed, _ = mimetypes.guess_type(path)
                if guessed:
                    return guessed
        return DEFAULT_CONTENT_TYPE

    @verify_uploadable
    def upload(self, uploadable: Uploadable) -> File:
        """
        Store the uploadable under a new id and return a handle to it.

        The source is read once, from its current position, and the hasher
        is given an in-memory copy of those bytes, so content-addressed ids
        always match the stored blob.

        A File on the same storage account is copied server-side. The
        hasher still sees that File, so a ContentHasher downloads the
        source blob to name the copy; only the upload is saved.
        """
        if self._can_copy_from(uploadable):
            id = self._generate_id(uploadable)
            blob_client = self._container_client.get_blob_client(id)
            source = uploadable.backend._container_client.get_blob_client(
                uploadable.id
            )
            logger.debug(
                "Copying blob %s/%s to %s/%s",
                uploadable.backend.container,
                uploadable.id,
                self.container,
                id,
            )
            try:
                blob_client.start_copy_from_url(source.url)
            except HttpResponseError as e:
                logger.error("Failed to copy blob %s/%s: %s", self.container, id, e)
                raise
            return File(self, id)

        body = uploadable.read()
        if body is None:
            raise InvalidUploadableError(f"{uploadable!r} has no content to upload")
        if isinstance(body, str):
            body = body.encode("utf-8")
        if self.max_size is not None and len(body) > self.max_size:
            raise FileTooLargeError(
                f"Upload of {len(body)} bytes exceeds max_size {self.max_size}"
            )

        id = self._generate_id(io.BytesIO(body))
        blob_client = self._container_client.get_blob_client(id)
        content_type = self._content_type(uploadable)
        try:
            blob_client.upload_blob(
                body,
                overwrite=True,
                content_settings=ContentSettings(content_type=content_type),
            )
        except HttpResponseError as e:
            logger.error("Failed to upload blob %s/%s: %s", self.container, id, e)
            raise
        logger.debug(
            "Uploaded blob %s/%s (%d bytes, %s)",
            self.container,
            id,
            len(body),
            content_type,
        )
        return File(self, id)

    @verify_id
    def get(self, id: str) -> File:
        """
        Return a handle for id. This never touches the network, so the
        handle is returned even if no such blob exists; use exists() to check.
        """
        return File(self, id)

    @verify_id
    def delete(self, id: str) -> None:
        try:
            self._container_client.delete_blob(id)
        except ResourceNotFoundError:
            logger.debug("Blob %s/%s already absent", self.container, id)
            return
        logger.debug("Deleted blob %s/%s", self.container, id)

    @verify_id
    def open(self, id: str) -> IO[bytes]:
        return io.BytesIO(self.read(id) or b"")

    @verify_id
    def read(self, id: str) -> bytes | None:
        """Return the blob's full content, or None if it does not exist."""
        try:
            return self._container_client.download_blob(id).readall()
        except ResourceNotFoundError:
            return None

    @verify_id
    def size(self, id: str) -> int | None:
        """Return the blob's size in bytes, or None if it does not exist."""
        try:
            blob_client = self._container_client.get_blob_client(id)
            return blob_client.get_blob_properties().size
        except ResourceNotFoundError:
            return None

    @verify_id
    def exists(self, id: str) -> bool:
        try:
            self._container_client.get_blob_client(id).get_blob_properties()
        except ResourceNotFoundError:
            return False
        return True

    def clear(self, confirm: _Confirm | None = None) -> None:
        """
        Remove every blob in the container. Deletion must be confirmed by
        passing CONFIRM. Blobs that vanish mid-way are skipped; any other
        error aborts the operation, leaving already-deleted blobs deleted.
        """
        if confirm is not CONFIRM:
            raise ConfirmationRequiredError(
                "Pass CONFIRM to clear() to delete every blob in the container"
            )

        deleted = 0
        for blob in self._container_client.list_blobs():
            try:
                self._container_client.delete_blob(blob.name)
            except ResourceNotFoundError:
                continue
            deleted += 1
        logger.info("Cleared %d blobs from container %s", deleted, self.container)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "AzureBackend":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
