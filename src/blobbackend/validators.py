import functools
import re

from .errors import FileTooLargeError, InvalidIDError, InvalidUploadableError
from .hashers import _is_seekable

_ID_PATTERN = re.compile(r"^[A-Za-z0-9]+$")


def valid_id(id) -> bool:
    return isinstance(id, str) and _ID_PATTERN.fullmatch(id) is not None


def uploadable_size(uploadable) -> int | None:
    """
    Best-effort count of the bytes left to read, without consuming them.
    Uses a `size` attribute or method, falling back to seek/tell.
    Returns None if the size cannot be determined.
    """
    size = getattr(uploadable, "size", None)
    if callable(size):
        size = size()
    if isinstance(size, int):
        return size

    if _is_seekable(uploadable) and callable(getattr(uploadable, "tell", None)):
        position = uploadable.tell()
        try:
            uploadable.seek(0, 2)
            return uploadable.tell() - position
        finally:
            uploadable.seek(position)
    return None


def verify_id(method):
    """Reject malformed ids before the wrapped method touches the network."""

    @functools.wraps(method)
    def wrapper(self, id, *args, **kwargs):
        if not valid_id(id):
            raise InvalidIDError(f"Invalid blob id {id!r}")
        return method(self, id, *args, **kwargs)

    return wrapper


def verify_uploadable(method):
    """Reject unreadable or oversized sources before the wrapped upload runs."""

    @functools.wraps(method)
    def wrapper(self, uploadable, *args, **kwargs):
        if not callable(getattr(uploadable, "read", None)):
            raise InvalidUploadableError(
                f"{type(uploadable).__name__} does not respond to read()"
            )
        if self.max_size is not None:
            size = uploadable_size(uploadable)
            if size is not None and size > self.max_size:
                raise FileTooLargeError(
                    f"Upload of {size} bytes exceeds max_size {self.max_size}"
                )
        return method(self, uploadable, *args, **kwargs)

    return wrapper
