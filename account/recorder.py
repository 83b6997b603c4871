from datetime import datetime, timezone
from typing import Callable, Optional
from uuid import uuid4

from .log import get_logger
from .models import Account, Transaction, TransactionResultType, TransactionType
from .policy import Decision
from .storage import LedgerStore

logger = get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_transaction_id() -> str:
    return uuid4().hex


class TransactionRecorder:
    """
    Turns a policy decision into a persisted, immutable transaction record.

    A record is written for every decision, allowed or denied. Requests that
    fail before an account is resolved never reach the recorder.
    """

    def __init__(self, store: LedgerStore, clock: Optional[Callable[[], datetime]] = None):
        self.store = store
        self.clock = clock or _utcnow

    def record(
        self,
        account: Account,
        transaction_type: TransactionType,
        amount: int,
        decision: Decision,
        cancelled_transaction_id: Optional[str] = None,
    ) -> Transaction:
        transaction = Transaction(
            transaction_id=new_transaction_id(),
            account=account,
            transaction_type=transaction_type,
            transaction_result_type=decision.result_type,
            amount=amount,
            balance_snapshot=decision.new_balance,
            transacted_at=self.clock(),
            cancelled_transaction_id=cancelled_transaction_id,
        )
        saved = self.store.save_transaction(transaction)

        logger.info(
            "transaction_recorded",
            transaction_id=saved.transaction_id,
            account_number=account.account_number,
            transaction_type=transaction_type.value,
            result=decision.result_type.value,
            amount=amount,
            balance_snapshot=saved.balance_snapshot,
        )
        return saved

    def record_failure(
        self,
        account: Account,
        transaction_type: TransactionType,
        amount: int,
    ) -> Transaction:
        return self.record(
            account,
            transaction_type,
            amount,
            Decision(
                allowed=False,
                new_balance=account.balance,
                result_type=TransactionResultType.FAILURE,
            ),
        )
