"""
Balance policy engine.

Pure decision logic for use and cancel operations. Checks run in a fixed
order and stop at the first failure so each malformed request maps to exactly
one error code. Nothing here touches storage, and denials are returned
rather than raised.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from .exceptions import ErrorCode
from .models import Account, AccountUser, Transaction, TransactionResultType


@dataclass(frozen=True)
class Decision:
    allowed: bool
    new_balance: int
    result_type: TransactionResultType
    error_code: Optional[ErrorCode] = None

    @classmethod
    def allow(cls, new_balance: int) -> "Decision":
        return cls(allowed=True, new_balance=new_balance, result_type=TransactionResultType.SUCCESS)

    @classmethod
    def deny(cls, balance: int, error_code: ErrorCode) -> "Decision":
        return cls(
            allowed=False,
            new_balance=balance,
            result_type=TransactionResultType.FAILURE,
            error_code=error_code,
        )


def years_before(moment: datetime, years: int) -> datetime:
    """Same calendar date ``years`` earlier; Feb 29 falls back to Feb 28."""
    try:
        return moment.replace(year=moment.year - years)
    except ValueError:
        return moment.replace(year=moment.year - years, day=28)


def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        raise ValueError("naive datetime; pass a timezone-aware value")
    return moment.astimezone(timezone.utc)


class BalancePolicy:
    def __init__(self, cancel_window_years: int = 1):
        self.cancel_window_years = cancel_window_years

    def evaluate_use(self, account: Account, amount: int, user: AccountUser) -> Decision:
        if not account.is_owned_by(user):
            return Decision.deny(account.balance, ErrorCode.USER_ACCOUNT_MISMATCH)

        if not account.is_active():
            return Decision.deny(account.balance, ErrorCode.ACCOUNT_ALREADY_UNREGISTERED)

        if amount > account.balance:
            return Decision.deny(account.balance, ErrorCode.AMOUNT_EXCEEDS_BALANCE)

        return Decision.allow(account.balance - amount)

    def evaluate_cancel(
        self,
        account: Account,
        transaction: Transaction,
        amount: int,
        now: Optional[datetime] = None,
        already_cancelled: bool = False,
    ) -> Decision:
        """
        Decide a compensating credit for ``transaction``.

        Order: cancellable use, same account, account active, full amount,
        cancellation window. Only a successful USE that has not been cancelled
        yet can be reversed; anything else is reported as TRANSACTION_NOT_FOUND.
        """
        if not transaction.is_successful_use() or already_cancelled:
            return Decision.deny(account.balance, ErrorCode.TRANSACTION_NOT_FOUND)

        if not transaction.account.is_same_account(account):
            return Decision.deny(account.balance, ErrorCode.TRANSACTION_ACCOUNT_MISMATCH)

        if not account.is_active():
            return Decision.deny(account.balance, ErrorCode.ACCOUNT_ALREADY_UNREGISTERED)

        if transaction.amount != amount:
            return Decision.deny(account.balance, ErrorCode.CANCEL_MUST_BE_FULL)

        now = _as_utc(now or datetime.now(timezone.utc))
        cutoff = years_before(now, self.cancel_window_years)
        if _as_utc(transaction.transacted_at) < cutoff:
            return Decision.deny(account.balance, ErrorCode.TOO_OLD_TO_CANCEL)

        return Decision.allow(account.balance + amount)
