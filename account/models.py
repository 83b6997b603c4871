from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import AwareDatetime, BaseModel, Field, ConfigDict


class AccountStatus(str, Enum):
    ACTIVE = "ACTIVE"
    UNREGISTERED = "UNREGISTERED"


class TransactionType(str, Enum):
    USE = "USE"
    CANCEL = "CANCEL"


class TransactionResultType(str, Enum):
    SUCCESS = "SUCCESS"
    FAILURE = "FAILURE"


class AccountUser(BaseModel):
    id: int
    name: str

    model_config = ConfigDict(frozen=True, from_attributes=True)


class Account(BaseModel):
    id: int
    account_number: str
    account_user: AccountUser
    account_status: AccountStatus = AccountStatus.ACTIVE
    balance: int = Field(default=0, ge=0)
    version: int = 0
    registered_at: Optional[datetime] = None
    unregistered_at: Optional[datetime] = None

    model_config = ConfigDict(frozen=True, from_attributes=True)

    def is_active(self) -> bool:
        return self.account_status == AccountStatus.ACTIVE

    def is_owned_by(self, user: AccountUser) -> bool:
        return self.account_user.id == user.id

    def is_same_account(self, other: "Account") -> bool:
        return self.id == other.id


class Transaction(BaseModel):
    transaction_id: str
    account: Account
    transaction_type: TransactionType
    transaction_result_type: TransactionResultType
    amount: int = Field(..., gt=0)
    balance_snapshot: int
    # Must be timezone-aware; naive datetimes fail validation.
    transacted_at: AwareDatetime
    # Set on CANCEL records: the USE transaction this record reverses.
    cancelled_transaction_id: Optional[str] = None

    model_config = ConfigDict(frozen=True, from_attributes=True)

    def is_successful_use(self) -> bool:
        return (
            self.transaction_type == TransactionType.USE
            and self.transaction_result_type == TransactionResultType.SUCCESS
        )


class UseBalanceRequest(BaseModel):
    user_id: int = Field(..., ge=1)
    account_number: str = Field(..., min_length=10, max_length=10)
    amount: int = Field(..., ge=10, le=1_000_000_000)

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "user_id": 12,
            "account_number": "1000000012",
            "amount": 1000
        }
    })


class CancelBalanceRequest(BaseModel):
    transaction_id: str = Field(..., min_length=1)
    account_number: str = Field(..., min_length=10, max_length=10)
    amount: int = Field(..., ge=10, le=1_000_000_000)

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "transaction_id": "4f1c2d9e8a7b4c3d9e8f7a6b5c4d3e2f",
            "account_number": "1000000012",
            "amount": 1000
        }
    })


class TransactionResult(BaseModel):
    account_number: Optional[str] = None
    transaction_result_type: TransactionResultType
    transaction_type: TransactionType
    transaction_id: str
    amount: int
    balance_snapshot: Optional[int] = None
    transacted_at: datetime

    @classmethod
    def from_transaction(
        cls,
        transaction: Transaction,
        balance_snapshot: Optional[int] = None,
    ) -> "TransactionResult":
        return cls(
            account_number=transaction.account.account_number,
            transaction_result_type=transaction.transaction_result_type,
            transaction_type=transaction.transaction_type,
            transaction_id=transaction.transaction_id,
            amount=transaction.amount,
            balance_snapshot=(
                transaction.balance_snapshot if balance_snapshot is None else balance_snapshot
            ),
            transacted_at=transaction.transacted_at,
        )


class ErrorResponse(BaseModel):
    error_code: str
    error_message: str
