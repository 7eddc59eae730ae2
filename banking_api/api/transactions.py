"""
Ledger endpoints: deposit, withdraw, transfer, history.

Every route checks ownership of the path account first; the
ledger service itself trusts the caller it is given.
"""

from fastapi import APIRouter, Depends, Query

from banking_api.api.deps import (
    get_current_identity,
    get_ledger_service,
    get_ownership_guard,
)
from banking_api.schemas.transaction import (
    DepositRequest,
    WithdrawalRequest,
    TransferRequest,
    TransactionResponse,
    BalanceChangeResponse,
    TransferResponse,
    TransactionListResponse,
)
from banking_api.services.ledger_service import LedgerService
from banking_api.services.ownership import OwnershipGuard
from banking_api.services.token_service import Identity

router = APIRouter(prefix="/accounts/{account_id}", tags=["Transactions"])


@router.post("/deposit", response_model=BalanceChangeResponse)
def deposit(
    account_id: str,
    request: DepositRequest,
    identity: Identity = Depends(get_current_identity),
    guard: OwnershipGuard = Depends(get_ownership_guard),
    ledger: LedgerService = Depends(get_ledger_service),
):
    """Deposit money into an account."""
    guard.assert_ownership(account_id, identity.user_id)
    entry = ledger.deposit(account_id, request.amount)
    return BalanceChangeResponse(
        message="Deposit successful",
        new_balance=entry.new_balance,
        transaction=TransactionResponse.model_validate(entry),
    )


@router.post("/withdraw", response_model=BalanceChangeResponse)
def withdraw(
    account_id: str,
    request: WithdrawalRequest,
    identity: Identity = Depends(get_current_identity),
    guard: OwnershipGuard = Depends(get_ownership_guard),
    ledger: LedgerService = Depends(get_ledger_service),
):
    """Withdraw money from an account."""
    guard.assert_ownership(account_id, identity.user_id)
    entry = ledger.withdraw(account_id, request.amount)
    return BalanceChangeResponse(
        message="Withdrawal successful",
        new_balance=entry.new_balance,
        transaction=TransactionResponse.model_validate(entry),
    )


@router.post("/transfer", response_model=TransferResponse)
def transfer(
    account_id: str,
    request: TransferRequest,
    identity: Identity = Depends(get_current_identity),
    guard: OwnershipGuard = Depends(get_ownership_guard),
    ledger: LedgerService = Depends(get_ledger_service),
):
    """
    Transfer money to any existing account.

    Only the source account has to belong to the caller.
    """
    guard.assert_ownership(account_id, identity.user_id)
    receipt = ledger.transfer(account_id, request.to_account_id, request.amount)
    return TransferResponse(
        reference=receipt.reference,
        new_balance=receipt.source_new_balance,
        transaction=TransactionResponse.model_validate(receipt.source_entry),
    )


@router.get("/transactions", response_model=TransactionListResponse)
def get_transactions(
    account_id: str,
    limit: int | None = Query(default=None, ge=1, le=1000),
    identity: Identity = Depends(get_current_identity),
    guard: OwnershipGuard = Depends(get_ownership_guard),
    ledger: LedgerService = Depends(get_ledger_service),
):
    """Get an account's transactions, newest first."""
    guard.assert_ownership(account_id, identity.user_id)
    entries = ledger.get_transactions(account_id, limit=limit)
    return TransactionListResponse(
        transactions=[TransactionResponse.model_validate(e) for e in entries],
        count=len(entries),
    )
