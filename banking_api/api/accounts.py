"""
Account endpoints.
"""

from fastapi import APIRouter, Depends

from banking_api.api.deps import (
    get_account_service,
    get_current_identity,
    get_ownership_guard,
)
from banking_api.schemas.account import (
    AccountCreate,
    AccountResponse,
    AccountListResponse,
    AccountBalanceResponse,
)
from banking_api.services.account_service import AccountService
from banking_api.services.ownership import OwnershipGuard
from banking_api.services.token_service import Identity

router = APIRouter(prefix="/accounts", tags=["Accounts"])


@router.post("", response_model=AccountResponse, status_code=201)
def create_account(
    request: AccountCreate,
    identity: Identity = Depends(get_current_identity),
    service: AccountService = Depends(get_account_service),
):
    """
    Open a new account owned by the caller.

    A positive initial balance is recorded as an
    initial_deposit transaction.
    """
    return service.create_account(
        user_id=identity.user_id,
        account_id=request.account_id,
        customer_name=request.customer_name,
        initial_balance=request.initial_balance,
    )


@router.get("", response_model=AccountListResponse)
def list_accounts(
    identity: Identity = Depends(get_current_identity),
    service: AccountService = Depends(get_account_service),
):
    """List the caller's accounts."""
    accounts = service.list_accounts(identity.user_id)
    return AccountListResponse(
        accounts=[AccountResponse.model_validate(a) for a in accounts],
        count=len(accounts),
    )


@router.get("/{account_id}", response_model=AccountResponse)
def get_account(
    account_id: str,
    identity: Identity = Depends(get_current_identity),
    guard: OwnershipGuard = Depends(get_ownership_guard),
):
    return guard.assert_ownership(account_id, identity.user_id)


@router.get("/{account_id}/balance", response_model=AccountBalanceResponse)
def get_account_balance(
    account_id: str,
    identity: Identity = Depends(get_current_identity),
    guard: OwnershipGuard = Depends(get_ownership_guard),
):
    account = guard.assert_ownership(account_id, identity.user_id)
    return AccountBalanceResponse(
        account_id=account.account_id,
        balance=account.balance,
    )
