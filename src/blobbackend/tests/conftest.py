from dataclasses import dataclass, field

import pytest
from azure.core.exceptions import HttpResponseError, ResourceNotFoundError

import blobbackend.azure_backend as azure_backend_module
from blobbackend import AzureBackend


def http_error(status_code: int, cls=HttpResponseError) -> HttpResponseError:
    """Build an azure-core error carrying the given HTTP status."""
    exc = cls(message=f"HTTP {status_code}")
    exc.status_code = status_code
    return exc


@dataclass
class FakeBlob:
    data: bytes
    content_type: str | None


@dataclass
class FakeContentSettings:
    content_type: str | None


@dataclass
class FakeProperties:
    name: str
    size: int
    content_settings: FakeContentSettings


class FakeDownloader:
    def __init__(self, data: bytes):
        self._data = data

    def readall(self) -> bytes:
        return self._data


@dataclass
class FakeAzure:
    """
    In-memory stand-in for the Blob service, shared by every client created
    during a test. Records each remote call and can be told to fail one.
    """

    # account_url -> container -> blob name -> blob
    accounts: dict[str, dict[str, dict[str, FakeBlob]]] = field(default_factory=dict)
    calls: list[tuple[str, str, str]] = field(default_factory=list)
    errors: dict[str, Exception] = field(default_factory=dict)
    clients: list["FakeBlobServiceClient"] = field(default_factory=list)

    def container(self, account_url: str, name: str) -> dict[str, FakeBlob]:
        return self.accounts.setdefault(account_url, {}).setdefault(name, {})

    def record(self, op: str, container: str, name: str = "") -> None:
        self.calls.append((op, container, name))
        if op in self.errors:
            raise self.errors[op]

    def ops(self) -> list[str]:
        return [op for op, _, _ in self.calls]

    def resolve_url(self, url: str) -> FakeBlob:
        base, container, name = url.rsplit("/", 2)
        blob = self.accounts.get(base, {}).get(container, {}).get(name)
        if blob is None:
            raise http_error(404, ResourceNotFoundError)
        return blob


class FakeBlobClient:
    def __init__(self, fake: FakeAzure, account_url: str, container: str, name: str):
        self._fake = fake
        self._account_url = account_url
        self.container_name = container
        self.blob_name = name
        self.url = f"{account_url}/{container}/{name}"

    def _blobs(self) -> dict[str, FakeBlob]:
        return self._fake.container(self._account_url, self.container_name)

    def upload_blob(self, data, overwrite=False, content_settings=None, **kwargs):
        self._fake.record("upload_blob", self.container_name, self.blob_name)
        if not overwrite and self.blob_name in self._blobs():
            raise http_error(409)
        if not isinstance(data, bytes):
            data = data.read()
        content_type = content_settings.content_type if content_settings else None
        self._blobs()[self.blob_name] = FakeBlob(data, content_type)

    def start_copy_from_url(self, source_url: str, **kwargs):
        self._fake.record("start_copy_from_url", self.container_name, self.blob_name)
        source = self._fake.resolve_url(source_url)
        self._blobs()[self.blob_name] = FakeBlob(source.data, source.content_type)
        return {"copy_status": "success"}

    def get_blob_properties(self, **kwargs) -> FakeProperties:
        self._fake.record("get_blob_properties", self.container_name, self.blob_name)
        blob = self._blobs().get(self.blob_name)
        if blob is None:
            raise http_error(404, ResourceNotFoundError)
        return FakeProperties(
            self.blob_name, len(blob.data), FakeContentSettings(blob.content_type)
        )


class FakeContainerClient:
    def __init__(self, fake: FakeAzure, account_url: str, name: str):
        self._fake = fake
        self._account_url = account_url
        self.container_name = name

    def _blobs(self) -> dict[str, FakeBlob]:
        return self._fake.container(self._account_url, self.container_name)

    def get_blob_client(self, blob: str) -> FakeBlobClient:
        return FakeBlobClient(self._fake, self._account_url, self.container_name, blob)

    def download_blob(self, blob: str, **kwargs) -> FakeDownloader:
        self._fake.record("download_blob", self.container_name, blob)
        if blob not in self._blobs():
            raise http_error(404, ResourceNotFoundError)
        return FakeDownloader(self._blobs()[blob].data)

    def delete_blob(self, blob: str, **kwargs) -> None:
        self._fake.record("delete_blob", self.container_name, blob)
        if blob not in self._blobs():
            raise http_error(404, ResourceNotFoundError)
        del self._blobs()[blob]

    def list_blobs(self, name_starts_with: str | None = None, **kwargs):
        self._fake.record("list_blobs", self.container_name)
        prefix = name_starts_with or ""
        return [
            FakeProperties(name, len(blob.data), FakeContentSettings(blob.content_type))
            for name, blob in list(self._blobs().items())
            if name.startswith(prefix)
        ]


class FakeBlobServiceClient:
    fake: FakeAzure

    def __init__(self, account_url: str, credential=None, **kwargs):
        self.account_url = account_url
        self.credential = credential
        self.options = kwargs
        self.closed = False
        self.fake.clients.append(self)

    def get_container_client(self, container: str) -> FakeContainerClient:
        return FakeContainerClient(self.fake, self.account_url, container)

    def close(self) -> None:
        self.closed = True


# ---------------------------
# Fixtures
# ---------------------------
@pytest.fixture
def fake_azure(monkeypatch) -> FakeAzure:
    """Replace BlobServiceClient with the in-memory fake for one test."""
    fake = FakeAzure()
    client_cls = type("BoundFakeBlobServiceClient", (FakeBlobServiceClient,), {"fake": fake})
    monkeypatch.setattr(azure_backend_module, "BlobServiceClient", client_cls)
    return fake


@pytest.fixture
def make_backend(fake_azure):
    def _make(**kwargs) -> AzureBackend:
        options = {
            "storage_account_name": "teststorage",
            "storage_access_key": "c2VjcmV0",
            "container": "uploads",
            "max_size": 100,
        }
        options.update(kwargs)
        return AzureBackend(**options)

    return _make


@pytest.fixture
def backend(make_backend) -> AzureBackend:
    return make_backend()
