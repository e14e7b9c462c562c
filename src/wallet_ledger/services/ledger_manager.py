from datetime import date
from decimal import Decimal
from typing import List, Optional

from wallet_ledger.domain.enums import TransactionType
from wallet_ledger.domain.models import Transaction
from wallet_ledger.domain.wallet import Wallet
from wallet_ledger.logging_setup import get_logger
from wallet_ledger.services.csv_import import CsvImporter
from wallet_ledger.services.models import ImportResult, MonthlyReport, WalletSummary

logger = get_logger(__name__)


class LedgerManager:
    """
    Owns the session's wallets and the CSV import pipeline.

    Wallets are kept in insertion order. Names are not required to be
    unique; lookups return the first wallet whose trimmed name matches
    case-insensitively.
    """

    def __init__(self, importer: Optional[CsvImporter] = None):
        self.wallets: List[Wallet] = []
        self._importer: Optional[CsvImporter] = importer

    @property
    def importer(self) -> CsvImporter:
        """Lazy-load the CSV importer from configuration"""
        if self._importer is None:
            self._importer = CsvImporter.from_config()
        return self._importer

    def create_wallet(self, name: str, currency: str, initial_balance: Decimal) -> Wallet:
        """
        Create a wallet and add it to the ledger.

        Raises:
            ValueError: If name or currency is empty
            OutOfRangeError: If initial_balance is negative
        """
        wallet = Wallet(name, currency, initial_balance)
        self.wallets.append(wallet)
        logger.debug("Created wallet %r", wallet)
        return wallet

    def find_wallet_by_name(self, name: Optional[str]) -> Optional[Wallet]:
        """First wallet whose name matches, ignoring case and surrounding spaces"""
        if name is None:
            return None
        key = name.strip().casefold()
        return next((w for w in self.wallets if w.name.casefold() == key), None)

    def clear(self) -> None:
        """Drop every wallet"""
        self.wallets.clear()

    def load_from_csv(self, filepath: Optional[str]) -> ImportResult:
        """
        Replace all wallets with the contents of a CSV file.

        Args:
            filepath: Path to the CSV file

        Returns:
            ImportResult - success=False only when the file itself could not
            be used, with row-level problems listed in error_messages.

        Example:
            result = manager.load_from_csv('wallets.csv')
            if result.has_warnings:
                print(result.message)
        """
        return self.importer.load(self, filepath)

    def list_wallets(self) -> List[WalletSummary]:
        """Name, currency, initial and current balance of every wallet"""
        return [
            WalletSummary(
                name=w.name,
                currency=w.currency,
                initial_balance=w.initial_balance,
                current_balance=w.current_balance,
            )
            for w in self.wallets
        ]

    def monthly_report(self, year: int, month: int, top_n: int = 3) -> List[MonthlyReport]:
        """
        Build a report for every wallet for the given month.

        Args:
            year: Calendar year (positive)
            month: Month number, 1-12
            top_n: How many of the largest expenses to include

        Raises:
            ValueError: If year or month is out of range
        """
        if year <= 0 or not 1 <= month <= 12:
            raise ValueError(f"Invalid year/month: {year}/{month}")

        return [
            MonthlyReport(
                wallet_name=w.name,
                currency=w.currency,
                year=year,
                month=month,
                initial_balance=w.initial_balance,
                current_balance=w.current_balance,
                top_n=top_n,
                groups=w.get_transaction_groups_for_month(year, month),
                top_expenses=list(w.get_top_expenses_for_month(year, month, top_n)),
            )
            for w in self.wallets
        ]

    def generate_sample_data(self) -> None:
        """
        Replace all wallets with a small demo data set.

        The last expense on the 'Card' wallet is larger than its balance
        and is rejected.
        """
        self.clear()

        cash = self.create_wallet("Cash", "RUB", Decimal("10000"))
        for txn in [
            Transaction(date(2025, 9, 5), Decimal("2500"), TransactionType.INCOME, "Salary"),
            Transaction(date(2025, 9, 7), Decimal("150"), TransactionType.EXPENSE, "Groceries"),
            Transaction(date(2025, 9, 10), Decimal("1200"), TransactionType.EXPENSE, "Rent"),
            Transaction(date(2025, 9, 20), Decimal("900"), TransactionType.EXPENSE, "New Shoes"),
            Transaction(date(2025, 8, 21), Decimal("500"), TransactionType.INCOME, "Gift"),
        ]:
            cash.try_add_transaction(txn)

        card = self.create_wallet("Card", "USD", Decimal("200"))
        for txn in [
            Transaction(date(2025, 9, 3), Decimal("500"), TransactionType.INCOME, "Freelance"),
            Transaction(date(2025, 9, 5), Decimal("60"), TransactionType.EXPENSE, "Uber"),
            Transaction(date(2025, 9, 15), Decimal("90"), TransactionType.EXPENSE, "Restaurant"),
            Transaction(date(2025, 9, 25), Decimal("300"), TransactionType.EXPENSE, "Gadget"),
        ]:
            card.try_add_transaction(txn)

        result = card.try_add_transaction(
            Transaction(date(2025, 10, 1), Decimal("500"), TransactionType.EXPENSE, "Too big")
        )
        if not result:
            logger.debug("Sample oversized expense rejected: %s", result.error)
