"""Binary attachments sent alongside Graph API calls."""

import io
import mimetypes
import os
from typing import Any, BinaryIO

DEFAULT_CONTENT_TYPE = "application/octet-stream"


class UploadableIO:
    """
    A binary payload plus the metadata needed to send it as a multipart part.

    Accepts raw bytes, a filesystem path, or a binary file-like object.
    """

    def __init__(
        self,
        source: bytes | bytearray | str | os.PathLike | BinaryIO,
        content_type: str | None = None,
        filename: str | None = None,
    ):
        if isinstance(source, (bytes, bytearray)):
            self._content: bytes | None = bytes(source)
            self._file: BinaryIO | None = None
            self._path: str | None = None
        elif isinstance(source, (str, os.PathLike)):
            self._content = None
            self._file = None
            self._path = os.fspath(source)
            filename = filename or os.path.basename(self._path)
        elif _is_binary_file(source):
            self._content = None
            self._file = source
            self._path = None
            name = getattr(source, "name", None)
            if filename is None and isinstance(name, str):
                filename = os.path.basename(name)
        else:
            raise TypeError(
                f"UploadableIO needs bytes, a path or a binary file object "
                f"(got {type(source).__name__})"
            )

        self.filename = filename or "upload"
        self.content_type = (
            content_type
            or mimetypes.guess_type(self.filename)[0]
            or DEFAULT_CONTENT_TYPE
        )

    def read(self) -> bytes:
        """Return the whole payload."""
        if self._content is not None:
            return self._content
        if self._path is not None:
            with open(self._path, "rb") as handle:
                return handle.read()
        return self._file.read()

    def to_multipart(self) -> tuple[str, bytes, str]:
        """(filename, content, content_type) triple as httpx expects for ``files=``."""
        return (self.filename, self.read(), self.content_type)

    def __repr__(self) -> str:
        return f"UploadableIO(filename={self.filename!r}, content_type={self.content_type!r})"


def _is_binary_file(value: Any) -> bool:
    if isinstance(value, (io.BufferedIOBase, io.RawIOBase)):
        return True
    mode = getattr(value, "mode", None)
    return hasattr(value, "read") and isinstance(mode, str) and "b" in mode


def is_binary_content(value: Any) -> bool:
    """True when a parameter value should travel as a file attachment."""
    return isinstance(value, (UploadableIO, bytes, bytearray)) or _is_binary_file(value)


def as_uploadable(value: Any) -> UploadableIO:
    return value if isinstance(value, UploadableIO) else UploadableIO(value)
