import uuid
from collections import defaultdict
from decimal import Decimal
from typing import Dict, Iterator, List, Optional

from wallet_ledger.domain.enums import TransactionType
from wallet_ledger.domain.exceptions import OutOfRangeError
from wallet_ledger.domain.models import AddResult, Transaction, TransactionGroup


class Wallet:
    """
    A named account holding a single currency.

    The balance is never stored: it is derived from the initial balance and
    the accepted transactions every time it is read. Transactions can only
    be appended through try_add_transaction(), which enforces that an
    expense never exceeds the balance at the moment it is offered.

    Example:
        wallet = Wallet("Card", "USD", Decimal("200"))
        result = wallet.try_add_transaction(txn)
        if not result:
            print(result.error)
    """

    def __init__(self, name: str, currency: str, initial_balance: Decimal):
        if name is None or not name.strip():
            raise ValueError("Wallet name cannot be empty.")
        if currency is None or not currency.strip():
            raise ValueError("Currency cannot be empty.")
        if initial_balance < 0:
            raise OutOfRangeError("initial_balance", "Initial balance cannot be negative.")

        self.id = uuid.uuid4()
        self.name = name.strip()
        self.currency = currency.strip()
        self.initial_balance = Decimal(initial_balance)
        self._transactions: List[Transaction] = []

    @property
    def transactions(self) -> List[Transaction]:
        """Accepted transactions in insertion order (a copy)"""
        return list(self._transactions)

    @property
    def current_balance(self) -> Decimal:
        """Initial balance plus incomes minus expenses"""
        return self.initial_balance + sum(
            (t.signed_amount for t in self._transactions), Decimal("0")
        )

    def try_add_transaction(self, transaction: Optional[Transaction]) -> AddResult:
        """
        Attempt to append a transaction to this wallet.

        Checks, in order: missing transaction, non-positive amount, and an
        expense larger than the current balance. Nothing is appended when a
        check fails.

        Args:
            transaction: The transaction to accept

        Returns:
            AddResult - truthy on success, otherwise carrying the reason
        """
        if transaction is None:
            return AddResult.rejected("Transaction is null.")

        if transaction.amount <= 0:
            return AddResult.rejected("Transaction amount must be greater than zero.")

        if transaction.type == TransactionType.EXPENSE:
            balance = self.current_balance
            if transaction.amount > balance:
                return AddResult.rejected(
                    f"Insufficient funds: current balance {balance:.2f} {self.currency}"
                )

        self._transactions.append(transaction)
        return AddResult.accepted()

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------

    def get_transactions_for_month(self, year: int, month: int) -> "MonthTransactions":
        """
        All transactions dated in the given year and month, in insertion order.

        The returned view is lazy and can be iterated more than once.
        """
        return MonthTransactions(self, year, month)

    def get_transaction_groups_for_month(self, year: int, month: int) -> List[TransactionGroup]:
        """
        Group the month's transactions by type.

        Each group's transactions are sorted by date (oldest first, ties keep
        insertion order). Groups are sorted by total, largest first; equal
        totals keep the order in which each type first appears in the month.
        """
        by_type: Dict[TransactionType, List[Transaction]] = defaultdict(list)
        for txn in self.get_transactions_for_month(year, month):
            by_type[txn.type].append(txn)

        groups = [
            TransactionGroup(
                type=txn_type,
                total=sum((t.amount for t in txns), Decimal("0")),
                transactions=sorted(txns, key=lambda t: t.date),
            )
            for txn_type, txns in by_type.items()
        ]
        return sorted(groups, key=lambda g: g.total, reverse=True)

    def get_top_expenses_for_month(self, year: int, month: int, top_n: int) -> List[Transaction]:
        """
        The month's largest expenses, largest first.

        Empty when top_n <= 0. Equal amounts keep insertion order.
        """
        if top_n <= 0:
            return []

        expenses = [
            t for t in self.get_transactions_for_month(year, month)
            if t.type == TransactionType.EXPENSE
        ]
        expenses.sort(key=lambda t: t.amount, reverse=True)
        return expenses[:top_n]

    def __repr__(self):
        return (
            f"Wallet({self.name!r}, {self.currency}, "
            f"initial={self.initial_balance:.2f}, current={self.current_balance:.2f})"
        )


class MonthTransactions:
    """Restartable, lazily filtered view of a wallet's transactions for one month"""

    def __init__(self, wallet: Wallet, year: int, month: int):
        self._wallet = wallet
        self.year = year
        self.month = month

    def __iter__(self) -> Iterator[Transaction]:
        for txn in self._wallet._transactions:
            if txn.date.year == self.year and txn.date.month == self.month:
                yield txn

    def __repr__(self):
        return f"MonthTransactions({self._wallet.name!r}, {self.year}-{self.month:02d})"
