"""Wallet score API: read and upsert per-wallet scores over HTTP."""

__version__ = "1.0.0"
