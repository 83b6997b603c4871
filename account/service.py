from datetime import datetime
from typing import Callable, Optional

from .config import get_settings
from .exceptions import AccountException, ErrorCode
from .log import get_logger
from .models import (
    Account,
    AccountUser,
    Transaction,
    TransactionResult,
    TransactionType,
)
from .policy import BalancePolicy
from .recorder import TransactionRecorder
from .storage import InMemoryLedgerStore, LedgerStore

logger = get_logger(__name__)


def _require_positive(amount: int) -> None:
    # Runs before any store access.
    if amount <= 0:
        raise ValueError(f"amount must be positive, got {amount}")


class TransactionService:
    def __init__(
        self,
        store: Optional[LedgerStore] = None,
        policy: Optional[BalancePolicy] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.store = store if store is not None else InMemoryLedgerStore()
        self.policy = policy or BalancePolicy(get_settings().cancel_window_years)
        self.recorder = TransactionRecorder(self.store, clock)

    def use_balance(self, user_id: int, account_number: str, amount: int) -> TransactionResult:
        _require_positive(amount)
        user = self._get_user(user_id)
        account = self._get_account(account_number)

        decision = self.policy.evaluate_use(account, amount, user)
        if not decision.allowed:
            self.recorder.record(account, TransactionType.USE, amount, decision)
            logger.warning(
                "balance_use_denied",
                user_id=user_id,
                account_number=account_number,
                amount=amount,
                error_code=decision.error_code.value,
            )
            raise AccountException(decision.error_code)

        saved_account = self.store.save_account(
            account.model_copy(update={"balance": decision.new_balance})
        )
        transaction = self.recorder.record(saved_account, TransactionType.USE, amount, decision)

        logger.info(
            "balance_used",
            account_number=account_number,
            transaction_id=transaction.transaction_id,
            amount=amount,
            balance_before=account.balance,
            balance_after=decision.new_balance,
        )
        return TransactionResult.from_transaction(transaction, balance_snapshot=account.balance)

    def cancel_balance(self, transaction_id: str, account_number: str, amount: int) -> TransactionResult:
        _require_positive(amount)
        original = self._get_transaction(transaction_id)
        account = self._get_account(account_number)

        decision = self.policy.evaluate_cancel(
            account,
            original,
            amount,
            now=self.recorder.clock(),
            already_cancelled=self.store.find_cancel_for(transaction_id) is not None,
        )
        if not decision.allowed:
            logger.warning(
                "balance_cancel_denied",
                transaction_id=transaction_id,
                account_number=account_number,
                amount=amount,
                error_code=decision.error_code.value,
            )
            raise AccountException(decision.error_code)

        saved_account = self.store.save_account(
            account.model_copy(update={"balance": decision.new_balance})
        )
        transaction = self.recorder.record(
            saved_account, TransactionType.CANCEL, amount, decision,
            cancelled_transaction_id=original.transaction_id,
        )

        logger.info(
            "balance_cancelled",
            account_number=account_number,
            original_transaction_id=transaction_id,
            transaction_id=transaction.transaction_id,
            amount=amount,
            balance_after=decision.new_balance,
        )
        return TransactionResult.from_transaction(transaction)

    def query_transaction(self, transaction_id: str) -> TransactionResult:
        transaction = self._get_transaction(transaction_id)
        return TransactionResult(
            transaction_result_type=transaction.transaction_result_type,
            transaction_type=transaction.transaction_type,
            transaction_id=transaction.transaction_id,
            amount=transaction.amount,
            transacted_at=transaction.transacted_at,
        )

    def save_failed_use_transaction(self, account_number: str, amount: int) -> Transaction:
        """Record a failed use attempt for a request aborted outside the policy checks."""
        _require_positive(amount)
        account = self._get_account(account_number)
        return self.recorder.record_failure(account, TransactionType.USE, amount)

    def _get_user(self, user_id: int) -> AccountUser:
        user = self.store.find_user_by_id(user_id)
        if user is None:
            raise AccountException(ErrorCode.USER_NOT_FOUND)
        return user

    def _get_account(self, account_number: str) -> Account:
        account = self.store.find_account_by_number(account_number)
        if account is None:
            raise AccountException(ErrorCode.ACCOUNT_NOT_FOUND)
        return account

    def _get_transaction(self, transaction_id: str) -> Transaction:
        transaction = self.store.find_transaction_by_id(transaction_id)
        if transaction is None:
            raise AccountException(ErrorCode.TRANSACTION_NOT_FOUND)
        return transaction
