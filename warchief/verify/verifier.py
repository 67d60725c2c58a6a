# warchief/verify/verifier.py
from typing import Dict, Iterable, List, Optional, Union
from dataclasses import dataclass, field
from pathlib import Path

from warchief.chain.apply import apply_tx
from warchief.core.canon import decode_tx
from warchief.core.errors import InsufficientBalanceError, ParseError
from warchief.core.types import Account, Genesis
from warchief.crypto.hashing import Snapshot, snapshot_of


@dataclass
class VerificationFailure:
    index: int
    message: str
    category: str = "general"  # e.g. "parse", "balance", "snapshot", "storage"


@dataclass
class VerificationResult:
    is_valid: bool
    message: str = ""
    failures: List[VerificationFailure] = None
    balances: Dict[Account, int] = field(default_factory=dict)
    snapshot: Optional[Snapshot] = None

    def __post_init__(self):
        if self.failures is None:
            self.failures = []

    @property
    def first_failure(self) -> Optional[VerificationFailure]:
        return self.failures[0] if self.failures else None

    def __bool__(self):
        return self.is_valid

    def __str__(self):
        if self.is_valid:
            return "Log is valid ✓"
        lines = [f"Verification FAILED ({len(self.failures)} issues):"]
        for f in self.failures:
            lines.append(f"  • [{f.index}] {f.category}: {f.message}")
        return "\n".join(lines)


class LogVerifier:
    """
    Offline verifier for transaction logs.
    Replays every record from genesis and reports all problems instead of
    stopping at the first one. Records that fail are skipped.
    """

    def __init__(self, genesis: Genesis):
        self.genesis = genesis

    def verify(self, records: Iterable[Union[bytes, str]]) -> VerificationResult:
        """Core verification logic over raw log records (one per line)."""
        result = VerificationResult(True)
        balances: Dict[Account, int] = dict(self.genesis.balances)

        for lineno, record in enumerate(records, start=1):
            try:
                tx = decode_tx(record, lineno=lineno)
            except ParseError as e:
                result.failures.append(VerificationFailure(lineno, str(e), "parse"))
                result.is_valid = False
                continue

            try:
                apply_tx(balances, tx)
            except InsufficientBalanceError as e:
                result.failures.append(VerificationFailure(lineno, str(e), "balance"))
                result.is_valid = False

        result.balances = balances
        result.message = "Valid log" if result.is_valid else f"Failed with {len(result.failures)} issues"
        return result

    def verify_file(self, path: Union[str, Path], expected_snapshot: Optional[Snapshot] = None) -> VerificationResult:
        """
        Read a log file, replay it and optionally compare its digest.
        Returns a result with a single storage failure if the file cannot be read.
        """
        try:
            data = Path(path).read_bytes()
        except OSError as e:
            return VerificationResult(
                False,
                f"Failed to read transaction log '{path}': {str(e)}",
                [VerificationFailure(-1, str(e), "storage")]
            )

        result = self.verify(data.splitlines())
        result.snapshot = snapshot_of(data)

        if expected_snapshot is not None and result.snapshot != expected_snapshot:
            result.failures.append(VerificationFailure(
                -1,
                f"Snapshot mismatch: expected {expected_snapshot}, got {result.snapshot}",
                "snapshot"
            ))
            result.is_valid = False
            result.message = f"Failed with {len(result.failures)} issues"

        return result
