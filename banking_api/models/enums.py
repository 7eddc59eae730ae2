"""
Shared enumerations for database models.

Using Python enums mapped to database enums ensures that
only valid values can be stored.
"""

import enum


class UserRole(str, enum.Enum):
    CUSTOMER = "customer"
    # Reserved; nothing grants it yet.
    ADMIN = "admin"


class TransactionType(str, enum.Enum):
    """Kind of ledger row. The sign of the amount follows the kind."""
    INITIAL_DEPOSIT = "initial_deposit"
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    TRANSFER_OUT = "transfer_out"
    TRANSFER_IN = "transfer_in"
    TRANSFER_REVERSAL = "transfer_reversal"
