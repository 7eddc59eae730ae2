"""
Pydantic schemas for account operations.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field


class AccountCreate(BaseModel):
    """Request to open a new account for the caller."""
    account_id: str = Field(min_length=1, max_length=64)
    customer_name: str = Field(min_length=1, max_length=255)
    initial_balance: Decimal = Field(default=Decimal("0"), ge=0, decimal_places=4)


class AccountResponse(BaseModel):
    account_id: str
    user_id: str
    customer_name: str
    balance: Decimal
    created_at: datetime

    model_config = {"from_attributes": True}


class AccountListResponse(BaseModel):
    accounts: list[AccountResponse]
    count: int


class AccountBalanceResponse(BaseModel):
    account_id: str
    balance: Decimal
