# warchief/crypto/hashing.py
import hashlib
from dataclasses import dataclass

SNAPSHOT_SIZE = 32


@dataclass(frozen=True)
class Snapshot:
    """SHA-256 fingerprint of the full transaction log content."""
    digest: bytes

    def __post_init__(self):
        if len(self.digest) != SNAPSHOT_SIZE:
            raise ValueError(f"Snapshot must be {SNAPSHOT_SIZE} bytes, got {len(self.digest)}")

    def hex(self) -> str:
        return self.digest.hex()

    @classmethod
    def from_hex(cls, value: str) -> "Snapshot":
        return cls(bytes.fromhex(value.strip()))

    def __str__(self):
        return self.hex()


def snapshot_of(data: bytes) -> Snapshot:
    """
    Hash the complete byte content of a log.
    Not incremental: callers pass everything committed so far.
    """
    return Snapshot(hashlib.sha256(data).digest())
