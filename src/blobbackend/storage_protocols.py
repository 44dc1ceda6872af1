from typing import IO, TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .file import File


@runtime_checkable
class Uploadable(Protocol):
    """Anything with a read() method can be uploaded."""

    def read(self) -> bytes:
        """Return the full content as bytes."""
        ...


class Hasher(Protocol):
    """Produces a blob id for an uploadable."""

    def hash(self, uploadable: Uploadable) -> str:
        """Return an id string for the given content."""
        ...


class Backend(Protocol):
    """Protocol for a blob storage backend used by the upload layer."""

    max_size: int | None

    def upload(self, uploadable: Uploadable) -> "File": ...

    def get(self, id: str) -> "File": ...

    def delete(self, id: str) -> None: ...

    def open(self, id: str) -> IO[bytes]: ...

    def read(self, id: str) -> bytes | None: ...

    def size(self, id: str) -> int | None: ...

    def exists(self, id: str) -> bool: ...

    def clear(self, confirm=None) -> None: ...
