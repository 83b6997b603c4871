"""
Account Transaction Ledger

This package provides:
- Balance use and full cancellation against user-owned accounts
- Ordered validation rules with one error code per failure
- Immutable transaction records, including failed use attempts
- A ledger store contract with an in-memory, version-checked implementation
"""

from .exceptions import AccountException, ErrorCode
from .models import (
    AccountStatus,
    TransactionType,
    TransactionResultType,
    AccountUser,
    Account,
    Transaction,
    TransactionResult,
)
from .policy import BalancePolicy, Decision
from .service import TransactionService
from .storage import LedgerStore, InMemoryLedgerStore

__all__ = [
    "AccountException",
    "ErrorCode",
    "AccountStatus",
    "TransactionType",
    "TransactionResultType",
    "AccountUser",
    "Account",
    "Transaction",
    "TransactionResult",
    "BalancePolicy",
    "Decision",
    "TransactionService",
    "LedgerStore",
    "InMemoryLedgerStore",
]
