"""
Service layer models - DTOs for service operations.

These models represent the results of service operations, not domain entities.
"""
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import List, Optional
from wallet_ledger.domain.models import Transaction, TransactionGroup

@dataclass
class ImportResult:
    """
    Result of loading wallets from a CSV file.

    success is False only for file-level failures (missing, unreadable or
    empty file); row-level problems are collected in error_messages and
    leave success untouched.
    """
    success: bool
    error_messages: List[str] = field(default_factory=list)

    filepath: str = ""
    lines_processed: int = 0
    wallets_loaded: int = 0
    transactions_added: int = 0

    @classmethod
    def failure(cls, message: str, filepath: str = "") -> "ImportResult":
        """A fatal, file-level failure"""
        return cls(success=False, error_messages=[message], filepath=filepath)

    @property
    def message(self) -> Optional[str]:
        """All diagnostics, one per line, or None when there were none"""
        if not self.error_messages:
            return None
        return "\n".join(self.error_messages)

    @property
    def has_warnings(self) -> bool:
        """Loaded, but some rows reported problems"""
        return self.success and bool(self.error_messages)

    def __str__(self) -> str:
        "Human-readable summary"
        if not self.success:
            return f"Import failed: {self.message}"

        lines = [
            f"Import summary:",
            f" 📄 File: {self.filepath}",
            f" 👛 Wallets: {self.wallets_loaded}",
            f" ✅ Transactions added: {self.transactions_added}",
        ]

        if self.error_messages:
            lines.append(f" ⚠️ Warnings: {len(self.error_messages)}")

        return "\n".join(lines)


@dataclass(frozen=True)
class WalletSummary:
    """One row of the wallet listing"""
    name: str
    currency: str
    initial_balance: Decimal
    current_balance: Decimal

    def __str__(self) -> str:
        return (
            f"{self.name} ({self.currency}) - Initial: {self.initial_balance:.2f}"
            f" - Current: {self.current_balance:.2f}"
        )


@dataclass
class MonthlyReport:
    """
    Report of one wallet's activity for a specific month.

    Groups come ordered by total (largest first), each with its
    transactions oldest first. top_expenses is ordered by amount.
    """

    wallet_name: str
    currency: str
    year: int
    month: int
    initial_balance: Decimal
    current_balance: Decimal
    top_n: int = 3

    groups: List[TransactionGroup] = field(default_factory=list)
    top_expenses: List[Transaction] = field(default_factory=list)

    @property
    def start_date(self) -> date:
        """First day of the month"""
        return date(self.year, self.month, 1)

    @property
    def total_transactions(self) -> int:
        return sum(len(g.transactions) for g in self.groups)

    def __str__(self) -> str:
        """Human-readable report"""
        lines = [
            f"=== Wallet: {self.wallet_name} ({self.currency}) ===",
            f"Initial balance: {self.initial_balance:.2f}, Current balance: {self.current_balance:.2f}",
        ]

        if not self.groups:
            lines.append("No transactions for this month.")
        else:
            lines.append("Transactions grouped by type (sorted by total desc):")
            for group in self.groups:
                lines.append(f"-- {group.type.value} : Total = {group.total:.2f}")
                for txn in group.transactions:
                    lines.append(f"   {txn.date:%Y-%m-%d} | {txn.amount:.2f} | {txn.description}")

        lines.append("")
        lines.append(f"Top {self.top_n} expenses for month:")
        if not self.top_expenses:
            lines.append("  No expenses.")
        for rank, txn in enumerate(self.top_expenses, start=1):
            lines.append(f"  {rank}. {txn.date:%Y-%m-%d} | {txn.amount:.2f} | {txn.description}")

        return "\n".join(lines)
