# warchief/chain/apply.py
from typing import MutableMapping

from warchief.core.errors import InsufficientBalanceError
from warchief.core.types import Account, Tx


def apply_tx(balances: MutableMapping[Account, int], tx: Tx) -> None:
    """
    Apply ``tx`` to ``balances`` in place.

    Reward transactions mint ``value`` into the receiver and never fail.
    Transfers require the sender to cover ``value``; otherwise
    InsufficientBalanceError is raised and ``balances`` is left untouched.
    """
    if tx.is_reward():
        balances[tx.to_account] = balances.get(tx.to_account, 0) + tx.value
        return

    available = balances.get(tx.from_account, 0)
    if tx.value > available:
        raise InsufficientBalanceError(tx.from_account, available, tx.value)

    balances[tx.from_account] = available - tx.value
    balances[tx.to_account] = balances.get(tx.to_account, 0) + tx.value
