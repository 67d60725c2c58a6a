# warchief/core/canon.py
import json
from typing import Any, Optional, Union

try:
    import jcs
except ImportError:
    raise ImportError("Please install jcs: pip install jcs")

from warchief.core.errors import ParseError
from warchief.core.types import Account, Tx


def canonical_json(obj: Any) -> bytes:
    """
    Produce deterministic UTF-8 bytes according to RFC 8785 (JSON Canonicalization Scheme).
    Returns bytes ready for hashing or writing to the log.
    """
    return jcs.canonicalize(obj)


def encode_tx(tx: Tx) -> bytes:
    """Canonical log record for a transaction (no trailing newline)."""
    return canonical_json(tx.to_dict())


def _str_field(payload: dict, key: str, lineno: Optional[int]) -> str:
    value = payload.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ParseError(f"field '{key}' must be a string, got {type(value).__name__}", lineno=lineno)
    return value


def decode_tx(line: Union[bytes, str], lineno: Optional[int] = None) -> Tx:
    """
    Parse one log record back into a Tx.
    Absent fields fall back to their zero values; unknown fields are ignored.
    """
    try:
        payload = json.loads(line)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ParseError(f"invalid transaction JSON: {e}", lineno=lineno) from e

    if not isinstance(payload, dict):
        raise ParseError("transaction record must be a JSON object", lineno=lineno)

    try:
        value = payload.get("value", 0)
        if value is None:
            value = 0
        return Tx(
            from_account=Account(_str_field(payload, "from", lineno)),
            to_account=Account(_str_field(payload, "to", lineno)),
            value=value,
            data=_str_field(payload, "data", lineno),
        )
    except ValueError as e:
        raise ParseError(str(e), lineno=lineno) from e
