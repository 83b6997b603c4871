from datetime import datetime, timezone

from fastapi import FastAPI, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware

from .config import get_settings
from .exceptions import AccountException, StaleAccountError
from .log import get_logger
from .models import (
    Account, AccountUser, CancelBalanceRequest, ErrorResponse,
    TransactionResult, UseBalanceRequest,
)
from .service import TransactionService
from .storage import InMemoryLedgerStore

logger = get_logger(__name__)


def build_service() -> TransactionService:
    store = InMemoryLedgerStore()
    user = store.add_user(AccountUser(id=12, name="Pobi"))
    store.add_account(Account(
        id=1,
        account_number="1000000012",
        account_user=user,
        balance=10000,
        registered_at=datetime.now(timezone.utc),
    ))
    return TransactionService(store)


app = FastAPI(
    title="Account Transaction API",
    description="Balance use and cancellation with an auditable transaction ledger",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

transaction_service = build_service()

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
}


def _to_http_error(e: AccountException) -> HTTPException:
    code = status.HTTP_404_NOT_FOUND if e.error_code.is_not_found else status.HTTP_400_BAD_REQUEST
    return HTTPException(
        status_code=code,
        detail=ErrorResponse(error_code=e.error_code.value, error_message=e.error_message).model_dump(),
    )


def _conflict(e: StaleAccountError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail=ErrorResponse(error_code="CONCURRENT_UPDATE", error_message=str(e)).model_dump(),
    )


@app.get("/health", tags=["System"])
def health_check():
    settings = get_settings()
    return {"status": "healthy", "service": settings.app_name, "environment": settings.environment}


@app.post("/transaction/use", response_model=TransactionResult, responses=_ERROR_RESPONSES, tags=["Transactions"])
def use_balance(request: UseBalanceRequest) -> TransactionResult:
    try:
        return transaction_service.use_balance(request.user_id, request.account_number, request.amount)
    except AccountException as e:
        raise _to_http_error(e)
    except StaleAccountError as e:
        logger.warning("balance_use_conflict", account_number=request.account_number, amount=request.amount)
        transaction_service.save_failed_use_transaction(request.account_number, request.amount)
        raise _conflict(e)


@app.post("/transaction/cancel", response_model=TransactionResult, responses=_ERROR_RESPONSES, tags=["Transactions"])
def cancel_balance(request: CancelBalanceRequest) -> TransactionResult:
    try:
        return transaction_service.cancel_balance(request.transaction_id, request.account_number, request.amount)
    except AccountException as e:
        raise _to_http_error(e)
    except StaleAccountError as e:
        raise _conflict(e)


@app.get("/transaction/{transaction_id}", response_model=TransactionResult, responses=_ERROR_RESPONSES, tags=["Transactions"])
def query_transaction(transaction_id: str) -> TransactionResult:
    try:
        return transaction_service.query_transaction(transaction_id)
    except AccountException as e:
        raise _to_http_error(e)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
