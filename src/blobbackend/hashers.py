import hashlib
import secrets

from .storage_protocols import Hasher, Uploadable


class RandomHasher(Hasher):
    """Ignores the content and returns a random 60 character hex id."""

    def hash(self, uploadable: Uploadable) -> str:
        return secrets.token_hex(30)


class ContentHasher(Hasher):
    """
    Content-addressed ids: the hex digest of the uploadable's bytes.
    Seekable sources are returned to their starting position afterwards.
    """

    def __init__(self, algorithm: str = "sha256"):
        if algorithm not in hashlib.algorithms_available:
            raise ValueError(f"Unknown hash algorithm '{algorithm}'")
        self.algorithm = algorithm

    def hash(self, uploadable: Uploadable) -> str:
        seekable = _is_seekable(uploadable) and callable(getattr(uploadable, "tell", None))
        position = uploadable.tell() if seekable else None
        data = uploadable.read()
        if isinstance(data, str):
            data = data.encode("utf-8")
        if position is not None:
            uploadable.seek(position)
        return hashlib.new(self.algorithm, data).hexdigest()


def _is_seekable(uploadable) -> bool:
    seekable = getattr(uploadable, "seekable", None)
    if callable(seekable):
        return bool(seekable())
    return callable(getattr(uploadable, "seek", None))
