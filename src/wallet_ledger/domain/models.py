import uuid
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import List, Optional
from wallet_ledger.domain.enums import TransactionType
from wallet_ledger.domain.exceptions import OutOfRangeError

@dataclass(frozen=True)
class Transaction:
    """Core domain model representing a single income or expense"""
    date: date
    amount: Decimal
    type: TransactionType
    description: Optional[str] = ""
    id: uuid.UUID = field(default_factory=uuid.uuid4)

    def __post_init__(self):
        if self.amount <= 0:
            raise OutOfRangeError("amount", "Amount must be greater than zero.")
        if self.description is None:
            # frozen dataclass, so bypass __setattr__
            object.__setattr__(self, "description", "")

    @property
    def signed_amount(self) -> Decimal:
        """Return amount with sign for balance calculations"""
        return self.amount if self.type == TransactionType.INCOME else -self.amount

    def __str__(self):
        return f"{self.date:%Y-%m-%d} | {self.type.value} | {self.amount:.2f} | {self.description}"


@dataclass
class TransactionGroup:
    """Transactions of one type for a month, with their total"""
    type: TransactionType
    total: Decimal = Decimal("0")
    transactions: List[Transaction] = field(default_factory=list)


@dataclass(frozen=True)
class AddResult:
    """
    Outcome of offering a transaction to a wallet.

    Truthy when the transaction was accepted, so callers that only care
    about success can use it directly in a condition.
    """
    success: bool
    error: Optional[str] = None

    @classmethod
    def accepted(cls) -> "AddResult":
        return cls(success=True)

    @classmethod
    def rejected(cls, error: str) -> "AddResult":
        return cls(success=False, error=error)

    def __bool__(self) -> bool:
        return self.success
