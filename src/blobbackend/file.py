import tempfile
from typing import IO

from .storage_protocols import Backend


class File:
    """
    Lazy reference to a blob: a backend plus an id.
    Constructing one does no I/O and does not imply the blob exists.
    """

    def __init__(self, backend: Backend, id: str) -> None:
        self.backend = backend
        self.id = id

    def __repr__(self) -> str:
        return f"File(backend={self.backend!r}, id={self.id!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, File):
            return NotImplemented
        return self.backend == other.backend and self.id == other.id

    def __hash__(self) -> int:
        return hash((self.backend, self.id))

    def read(self) -> bytes | None:
        return self.backend.read(self.id)

    def size(self) -> int | None:
        return self.backend.size(self.id)

    def exists(self) -> bool:
        return self.backend.exists(self.id)

    def delete(self) -> None:
        self.backend.delete(self.id)

    def open(self) -> IO[bytes]:
        return self.backend.open(self.id)

    def download(self) -> IO[bytes]:
        """Copy the blob into a temporary file, rewound and ready to read."""
        tmp = tempfile.NamedTemporaryFile(prefix=f"{self.id}-")
        tmp.write(self.read() or b"")
        tmp.flush()
        tmp.seek(0)
        return tmp
