"""
Pydantic schemas for ledger operations.
"""

from decimal import Decimal

from pydantic import BaseModel, Field

from banking_api.models.enums import TransactionType


class DepositRequest(BaseModel):
    amount: Decimal = Field(gt=0, decimal_places=4)


class WithdrawalRequest(BaseModel):
    amount: Decimal = Field(gt=0, decimal_places=4)


class TransferRequest(BaseModel):
    to_account_id: str = Field(min_length=1, max_length=64)
    amount: Decimal = Field(gt=0, decimal_places=4)


class TransactionResponse(BaseModel):
    account_id: str
    timestamp: int
    amount: Decimal
    transaction_type: TransactionType
    new_balance: Decimal
    to_account_id: str | None = None
    from_account_id: str | None = None
    reference: str | None = None

    model_config = {"from_attributes": True}


class BalanceChangeResponse(BaseModel):
    """Response after a deposit or withdrawal."""
    message: str
    new_balance: Decimal
    transaction: TransactionResponse


class TransferResponse(BaseModel):
    message: str = "Transfer successful"
    reference: str
    new_balance: Decimal
    transaction: TransactionResponse


class TransactionListResponse(BaseModel):
    transactions: list[TransactionResponse]
    count: int
