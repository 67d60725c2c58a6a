# warchief/__init__.py
"""
Warchief — a small account ledger rebuilt from an append-only transaction log.
Balances are replayed from genesis, new transactions are staged in a mempool,
and every flush to disk refreshes a SHA-256 snapshot of the whole log.
"""

__version__ = "0.1.0-dev"
