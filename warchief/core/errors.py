# warchief/core/errors.py
"""
Typed exceptions raised by the ledger engine.

Every class carries a machine-readable ``code``. I/O failures are not
wrapped: missing or unreadable files surface as the builtin ``OSError``
family (``FileNotFoundError``, ``PermissionError``, ...).
"""

from typing import Optional


class LedgerError(Exception):
    """Base class for all ledger errors."""

    code: str = "LEDGER_ERROR"


class ParseError(LedgerError):
    """Malformed genesis document or transaction record."""

    code = "PARSE_ERROR"

    def __init__(self, message: str, source: Optional[str] = None, lineno: Optional[int] = None):
        self.source = source
        self.lineno = lineno
        location = ""
        if source:
            location = f"{source}:{lineno}: " if lineno else f"{source}: "
        elif lineno:
            location = f"line {lineno}: "
        super().__init__(f"{location}{message}")


class InsufficientBalanceError(LedgerError):
    """A non-reward transfer would overdraw its sender."""

    code = "INSUFFICIENT_BALANCE"

    def __init__(self, account: str, balance: int, value: int, lineno: Optional[int] = None):
        self.account = account
        self.balance = balance
        self.value = value
        self.lineno = lineno
        prefix = f"line {lineno}: " if lineno else ""
        super().__init__(
            f"{prefix}insufficient balance: account '{account}' has {balance}, needs {value}"
        )


class LedgerClosedError(LedgerError, RuntimeError):
    """Operation attempted on a closed state or log."""

    code = "LEDGER_CLOSED"
