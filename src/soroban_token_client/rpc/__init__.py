"""Clients for the Soroban RPC and Horizon services"""

from .ledger import LedgerClient, fetch_current_ledger, ledger_session
from .history import HistoryClient, history_session

__all__ = [
    "LedgerClient",
    "HistoryClient",
    "ledger_session",
    "history_session",
    "fetch_current_ledger",
]
