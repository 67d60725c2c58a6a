# warchief/core/genesis.py
import json
import logging
from pathlib import Path
from typing import Union

from warchief.core.errors import ParseError
from warchief.core.types import Account, Genesis, MAX_VALUE

log = logging.getLogger(__name__)


def load_genesis(path: Union[str, Path]) -> Genesis:
    """
    Read the genesis document at ``path``.

    Expected shape: {"genesis_time": "...", "chain_id": "...", "balances": {"andrej": 1000000}}.
    Only ``balances`` is required. OSError propagates for unreadable files,
    ParseError is raised for anything that is not a valid balance mapping.
    """
    path = Path(path)
    raw = path.read_text(encoding="utf-8")

    try:
        doc = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ParseError(f"invalid JSON: {e}", source=str(path)) from e

    if not isinstance(doc, dict):
        raise ParseError("genesis document must be a JSON object", source=str(path))

    balances = doc.get("balances")
    if not isinstance(balances, dict):
        raise ParseError("'balances' must be an object of account -> balance", source=str(path))

    for account, balance in balances.items():
        if isinstance(balance, bool) or not isinstance(balance, int):
            valid = False
        else:
            valid = 0 <= balance <= MAX_VALUE
        if not valid:
            raise ParseError(
                f"balance for '{account}' must be a non-negative integer, got {balance!r}",
                source=str(path),
            )

    genesis = Genesis(
        balances={Account(a): b for a, b in balances.items()},
        genesis_time=str(doc.get("genesis_time") or ""),
        chain_id=str(doc.get("chain_id") or ""),
    )
    log.info("Loaded genesis from %s (%d accounts)", path, len(genesis.balances))
    return genesis
