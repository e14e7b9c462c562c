"""
Domain model for wallet tracking.

Quick Start:
    >>> from wallet_ledger.domain import Wallet, Transaction, TransactionType
    >>>
    >>> wallet = Wallet("Card", "USD", Decimal("200"))
    >>> wallet.try_add_transaction(
    ...     Transaction(date(2025, 9, 3), Decimal("500"), TransactionType.INCOME)
    ... )
"""
from wallet_ledger.domain.enums import TransactionType
from wallet_ledger.domain.exceptions import OutOfRangeError
from wallet_ledger.domain.models import AddResult, Transaction, TransactionGroup
from wallet_ledger.domain.wallet import MonthTransactions, Wallet

__all__ = [
    "AddResult",
    "MonthTransactions",
    "OutOfRangeError",
    "Transaction",
    "TransactionGroup",
    "TransactionType",
    "Wallet",
]
