"""Type definitions for files."""

import io
from typing import Protocol


class BinaryIORead(Protocol):
    """A typing.BinaryIO class that provides only the read method."""

    def read(self, size: int = -1) -> bytes:
        raise io.UnsupportedOperation
