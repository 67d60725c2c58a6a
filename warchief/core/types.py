# warchief/core/types.py
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, NewType, Optional

Account = NewType("Account", str)

REWARD_MARKER = "reward"

# Values are unsigned 64-bit on the wire.
MAX_VALUE = 2**64 - 1


@dataclass(frozen=True)
class Tx:
    """Single transfer (or reward mint) between two accounts."""
    from_account: Account
    to_account: Account
    value: int
    data: Optional[str] = ""        # "reward" mints value into to_account

    def __post_init__(self):
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ValueError(f"Transaction value must be an integer, got {self.value!r}")
        if self.value < 0:
            raise ValueError(f"Transaction value must be non-negative, got {self.value}")
        if self.value > MAX_VALUE:
            raise ValueError(f"Transaction value exceeds {MAX_VALUE}, got {self.value}")
        if self.data is None:
            object.__setattr__(self, "data", "")

    def is_reward(self) -> bool:
        return self.data == REWARD_MARKER

    def to_dict(self) -> dict:
        """Wire shape of the record, as written to the transaction log."""
        return {
            "from": self.from_account,
            "to": self.to_account,
            "value": self.value,
            "data": self.data,
        }


@dataclass(frozen=True)
class Genesis:
    """Initial balances the ledger starts from. Read once, never mutated."""
    balances: Mapping[Account, int] = field(default_factory=dict)
    genesis_time: str = ""
    chain_id: str = ""

    def __post_init__(self):
        object.__setattr__(self, "balances", MappingProxyType(dict(self.balances)))
