"""
Storage backends for the append-only transaction log.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterator


class TxLogBackend(ABC):
    """Abstract base for all transaction log implementations."""

    @abstractmethod
    def append(self, record: bytes) -> None:
        pass

    @abstractmethod
    def records(self) -> Iterator[bytes]:
        pass

    @abstractmethod
    def read_all(self) -> bytes:
        pass

    @abstractmethod
    def close(self) -> None:
        pass


def create_storage(uri: str) -> TxLogBackend:
    if uri.startswith("file://"):
        from .txlog import FileTxLog
        raw_path = uri[len("file://"):]
        return FileTxLog(Path(raw_path).resolve())

    if "://" in uri:
        raise ValueError(f"Unsupported storage URI: {uri}")

    from .txlog import FileTxLog
    return FileTxLog(Path(uri).resolve())


from .txlog import FileTxLog

__all__ = ["TxLogBackend", "create_storage", "FileTxLog"]
