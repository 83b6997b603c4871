"""
Ledger store contract and an in-memory implementation.

The service only talks to a ``LedgerStore``. Serializing read-modify-write of
an account balance is the store's job: ``InMemoryLedgerStore.save_account``
is a compare-and-swap on ``Account.version``.
"""

import threading
from abc import ABC, abstractmethod
from typing import Optional

from .exceptions import StaleAccountError
from .models import Account, AccountUser, Transaction


class LedgerStore(ABC):

    @abstractmethod
    def find_user_by_id(self, user_id: int) -> Optional[AccountUser]:
        pass

    @abstractmethod
    def find_account_by_number(self, account_number: str) -> Optional[Account]:
        pass

    @abstractmethod
    def save_account(self, account: Account) -> Account:
        """
        Persist an account.

        Raises:
            StaleAccountError: if the stored account was saved by someone
                else since ``account`` was read.
        """
        pass

    @abstractmethod
    def find_transaction_by_id(self, transaction_id: str) -> Optional[Transaction]:
        pass

    @abstractmethod
    def find_cancel_for(self, transaction_id: str) -> Optional[Transaction]:
        """Return the CANCEL record reversing ``transaction_id``, if any."""
        pass

    @abstractmethod
    def save_transaction(self, transaction: Transaction) -> Transaction:
        """Persist a transaction under its caller-supplied id and timestamp."""
        pass


class InMemoryLedgerStore(LedgerStore):
    def __init__(self):
        self.users: dict[int, AccountUser] = {}
        self.accounts: dict[str, Account] = {}
        self.transactions: dict[str, Transaction] = {}
        self._lock = threading.Lock()

    def add_user(self, user: AccountUser) -> AccountUser:
        with self._lock:
            self.users[user.id] = user
        return user

    def add_account(self, account: Account) -> Account:
        with self._lock:
            self.accounts[account.account_number] = account
        return account

    def find_user_by_id(self, user_id: int) -> Optional[AccountUser]:
        return self.users.get(user_id)

    def find_account_by_number(self, account_number: str) -> Optional[Account]:
        return self.accounts.get(account_number)

    def save_account(self, account: Account) -> Account:
        with self._lock:
            current = self.accounts.get(account.account_number)
            if current is not None and current.version != account.version:
                raise StaleAccountError(
                    f"Account {account.account_number} was modified concurrently "
                    f"(expected version {account.version}, found {current.version})"
                )
            saved = account.model_copy(update={"version": account.version + 1})
            self.accounts[account.account_number] = saved
        return saved

    def find_transaction_by_id(self, transaction_id: str) -> Optional[Transaction]:
        return self.transactions.get(transaction_id)

    def find_cancel_for(self, transaction_id: str) -> Optional[Transaction]:
        for t in self.transactions.values():
            if t.cancelled_transaction_id == transaction_id:
                return t
        return None

    def save_transaction(self, transaction: Transaction) -> Transaction:
        with self._lock:
            self.transactions[transaction.transaction_id] = transaction
        return transaction

    def list_transactions(self, account_number: str) -> list[Transaction]:
        entries = [
            t for t in self.transactions.values()
            if t.account.account_number == account_number
        ]
        entries.sort(key=lambda t: t.transacted_at)
        return entries
