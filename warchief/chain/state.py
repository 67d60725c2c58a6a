# warchief/chain/state.py
import logging
from collections import deque
from pathlib import Path
from typing import Deque, Dict, Optional, Tuple, Union

from warchief.chain.apply import apply_tx
from warchief.core.canon import decode_tx, encode_tx
from warchief.core.errors import InsufficientBalanceError, LedgerClosedError
from warchief.core.genesis import load_genesis
from warchief.core.types import Account, Genesis, Tx
from warchief.crypto.hashing import Snapshot, snapshot_of
from warchief.storage import TxLogBackend, create_storage

log = logging.getLogger(__name__)


class State:
    """
    Authoritative account balances plus the mempool of staged transactions.

    Built once per process from genesis + the transaction log, then mutated
    only through add() and persist(). Owns the log handle exclusively.

    Transactions are applied to balances as soon as they are added, before
    they are durable: if the process dies before persist(), they are lost and
    a reload falls back to the balances replayed from the log alone.

    Not thread-safe. Callers embedding this in a concurrent program must
    serialise every call behind a single lock.
    """

    def __init__(self, genesis: Genesis, storage: TxLogBackend):
        self._balances: Dict[Account, int] = dict(genesis.balances)
        self._mempool: Deque[Tx] = deque()
        self._storage: Optional[TxLogBackend] = storage
        self._snapshot: Optional[Snapshot] = None

    @classmethod
    def from_disk(cls, genesis_path: Union[str, Path], log_path: Union[str, Path]) -> "State":
        """
        Load genesis, open the existing log and replay it in file order.
        Any parse or balance failure aborts the whole load; no State is returned.
        """
        genesis = load_genesis(genesis_path)
        storage = create_storage(str(log_path))
        state = cls(genesis, storage)
        try:
            count = state._replay()
            state._snapshot = snapshot_of(storage.read_all())
        except Exception:
            storage.close()
            raise

        log.info("Replayed %d transactions from %s, snapshot %s", count, log_path, state._snapshot)
        return state

    def _replay(self) -> int:
        count = 0
        for lineno, record in enumerate(self.storage.records(), start=1):
            tx = decode_tx(record, lineno=lineno)
            try:
                apply_tx(self._balances, tx)
            except InsufficientBalanceError as e:
                raise InsufficientBalanceError(e.account, e.balance, e.value, lineno=lineno) from e
            count += 1
        return count

    @property
    def storage(self) -> TxLogBackend:
        self._ensure_open()
        return self._storage

    def _ensure_open(self) -> None:
        if self._storage is None:
            raise LedgerClosedError("State is closed")

    @property
    def balances(self) -> Dict[Account, int]:
        """Copy of the current balances, pending transactions included."""
        self._ensure_open()
        return dict(self._balances)

    @property
    def mempool(self) -> Tuple[Tx, ...]:
        """Pending transactions, oldest first."""
        self._ensure_open()
        return tuple(self._mempool)

    def add(self, tx: Tx) -> None:
        """Validate and apply ``tx``, then stage it for the next persist()."""
        self._ensure_open()
        try:
            apply_tx(self._balances, tx)
        except InsufficientBalanceError as e:
            log.warning("Rejected transaction %s -> %s: %s", tx.from_account, tx.to_account, e)
            raise
        self._mempool.append(tx)
        log.debug("Staged transaction %s -> %s (%d)", tx.from_account, tx.to_account, tx.value)

    def latest_snapshot(self) -> Snapshot:
        self._ensure_open()
        return self._snapshot

    def persist(self) -> Snapshot:
        """
        Flush the mempool to the log, oldest first.

        The snapshot is recomputed from the full log after every single
        record, so the log and the snapshot never disagree mid-batch. On an
        I/O error the remaining entries stay in the mempool for a retry.
        """
        storage = self.storage
        while self._mempool:
            tx = self._mempool[0]
            record = encode_tx(tx)

            log.info("Saving new TX to disk: %s", record.decode("utf-8"))
            storage.append(record)

            self._snapshot = snapshot_of(storage.read_all())
            log.info("New DB snapshot: %s", self._snapshot)

            self._mempool.popleft()
        return self._snapshot

    def close(self) -> None:
        """Release the log. The State cannot be used afterwards."""
        if self._storage:
            self._storage.close()
            self._storage = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
