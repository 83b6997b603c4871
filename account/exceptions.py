from enum import Enum
from typing import Optional


class ErrorCode(str, Enum):
    USER_NOT_FOUND = "USER_NOT_FOUND"
    ACCOUNT_NOT_FOUND = "ACCOUNT_NOT_FOUND"
    USER_ACCOUNT_MISMATCH = "USER_ACCOUNT_MISMATCH"
    ACCOUNT_ALREADY_UNREGISTERED = "ACCOUNT_ALREADY_UNREGISTERED"
    AMOUNT_EXCEEDS_BALANCE = "AMOUNT_EXCEEDS_BALANCE"
    TRANSACTION_NOT_FOUND = "TRANSACTION_NOT_FOUND"
    TRANSACTION_ACCOUNT_MISMATCH = "TRANSACTION_ACCOUNT_MISMATCH"
    CANCEL_MUST_BE_FULL = "CANCEL_MUST_BE_FULL"
    TOO_OLD_TO_CANCEL = "TOO_OLD_TO_CANCEL"

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]

    @property
    def is_not_found(self) -> bool:
        return self in (
            ErrorCode.USER_NOT_FOUND,
            ErrorCode.ACCOUNT_NOT_FOUND,
            ErrorCode.TRANSACTION_NOT_FOUND,
        )


_DESCRIPTIONS = {
    ErrorCode.USER_NOT_FOUND: "User not found",
    ErrorCode.ACCOUNT_NOT_FOUND: "Account not found",
    ErrorCode.USER_ACCOUNT_MISMATCH: "Account is not owned by the requesting user",
    ErrorCode.ACCOUNT_ALREADY_UNREGISTERED: "Account is already unregistered",
    ErrorCode.AMOUNT_EXCEEDS_BALANCE: "Amount exceeds account balance",
    ErrorCode.TRANSACTION_NOT_FOUND: "Transaction not found",
    ErrorCode.TRANSACTION_ACCOUNT_MISMATCH: "Transaction does not belong to the account",
    ErrorCode.CANCEL_MUST_BE_FULL: "Partial cancellation is not allowed",
    ErrorCode.TOO_OLD_TO_CANCEL: "Transactions older than the cancellation window cannot be cancelled",
}


class AccountException(Exception):
    def __init__(self, error_code: ErrorCode, message: Optional[str] = None):
        self.error_code = error_code
        self.error_message = message or error_code.description
        super().__init__(self.error_message)


class LedgerStoreError(Exception):
    pass


class StaleAccountError(LedgerStoreError):
    pass
