import pytest
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Callable

from wallet_ledger.domain.wallet import Wallet
from wallet_ledger.parsers.values import INVARIANT
from wallet_ledger.parsers.wallet_csv import WalletCsvParser
from wallet_ledger.services.csv_import import CsvImporter
from wallet_ledger.services.ledger_manager import LedgerManager

CSV_HEADER = "WalletName,Currency,InitialBalance,TransactionDate,Amount,Type,Description"

FIXED_TODAY = date(2025, 10, 1)

@pytest.fixture
def wallet() -> Wallet:
    """A USD wallet starting at 100"""
    return Wallet("Test", "USD", Decimal("100"))

@pytest.fixture
def csv_parser() -> WalletCsvParser:
    """Create a parser instance for each test"""
    return WalletCsvParser()

@pytest.fixture
def fixed_today() -> date:
    """The date the pinned importer treats as today"""
    return FIXED_TODAY

@pytest.fixture
def importer() -> CsvImporter:
    """Importer pinned to invariant culture and a fixed 'today'"""
    return CsvImporter(culture=INVARIANT, today=lambda: FIXED_TODAY)

@pytest.fixture
def manager(importer: CsvImporter) -> LedgerManager:
    """Empty ledger using the pinned importer"""
    return LedgerManager(importer=importer)

@pytest.fixture
def write_csv(tmp_path: Path) -> Callable[..., Path]:
    """Write data rows (header added) to a temporary CSV file"""
    def _write(*rows: str, header: bool = True, name: str = "wallets.csv") -> Path:
        path = tmp_path / name
        lines = ([CSV_HEADER] if header else []) + list(rows)
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path
    return _write
