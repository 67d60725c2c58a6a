# warchief/storage/txlog.py
import os
from pathlib import Path
from typing import BinaryIO, Iterator, Optional, Union

from warchief.core.errors import LedgerClosedError
from . import TxLogBackend

RECORD_SEPARATOR = b"\n"


class FileTxLog(TxLogBackend):
    """Newline-delimited transaction log kept in a single append-only file."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        # The log is never created here: a missing file is a FileNotFoundError.
        fd = os.open(self.path, os.O_RDWR | os.O_APPEND)
        self._file: Optional[BinaryIO] = os.fdopen(fd, "r+b")

    @property
    def file(self) -> BinaryIO:
        if self._file is None:
            raise LedgerClosedError(f"Transaction log {self.path} is closed")
        return self._file

    def append(self, record: bytes) -> None:
        """Write one record plus separator and force it to disk."""
        f = self.file
        f.write(record + RECORD_SEPARATOR)
        f.flush()
        os.fsync(f.fileno())

    def records(self) -> Iterator[bytes]:
        """
        Yield raw records from the start of the file, separator stripped.
        Lazy and single-pass; appending while iterating is not supported.
        """
        f = self.file
        f.seek(0)
        for line in f:
            yield line.rstrip(b"\r\n")

    def read_all(self) -> bytes:
        f = self.file
        f.seek(0)
        return f.read()

    def close(self) -> None:
        if self._file:
            self._file.close()
            self._file = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
