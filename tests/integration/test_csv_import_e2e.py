import pytest
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Callable

from wallet_ledger.domain.enums import TransactionType
from wallet_ledger.parsers.values import CULTURES
from wallet_ledger.services.csv_import import CsvImporter
from wallet_ledger.services.ledger_manager import LedgerManager

@pytest.mark.integration
class TestCsvImportHappyPath:

    def test_quoted_fields_and_commas(self, manager: LedgerManager, write_csv: Callable[..., Path]):
        """Test a quoted description with a comma survives the import"""
        path = write_csv('MyWallet,USD,100.50,2025-09-05,25.75,Income,"Payment, client #123"')

        result = manager.load_from_csv(str(path))

        assert result.success is True
        assert result.message is None
        assert not result.has_warnings

        wallet = manager.find_wallet_by_name("MyWallet")
        assert wallet is not None
        assert wallet.currency == "USD"
        assert wallet.initial_balance == Decimal("100.50")

        txs = list(wallet.get_transactions_for_month(2025, 9))
        assert len(txs) == 1
        assert txs[0].description == "Payment, client #123"
        assert txs[0].amount == Decimal("25.75")
        assert txs[0].type == TransactionType.INCOME
        assert txs[0].date == date(2025, 9, 5)

    def test_multiple_wallets_and_rows(self, manager: LedgerManager, write_csv: Callable[..., Path]):
        path = write_csv(
            "Cash,RUB,10000,2025-09-05,2500,Income,Salary",
            "Cash,RUB,999,07.09.2025,150,E,Groceries",
            "Card,USD,200,9/3/2025,500,i,Freelance",
            "card,USD,200,2025-9-5,60,expense",
        )

        result = manager.load_from_csv(str(path))

        assert result.success
        assert result.error_messages == []
        assert result.wallets_loaded == 2
        assert result.transactions_added == 4
        assert result.lines_processed == 4

        cash, card = manager.wallets
        # initial balance comes from the row that created the wallet
        assert cash.initial_balance == Decimal("10000")
        assert cash.current_balance == Decimal("12350")
        assert card.current_balance == Decimal("640")
        assert card.transactions[1].description == ""

    def test_blank_lines_are_skipped_silently(self, manager: LedgerManager, write_csv: Callable[..., Path]):
        path = write_csv("", "Cash,USD,10,2025-09-05,5,Income", "   ")

        result = manager.load_from_csv(str(path))

        assert result.success
        assert result.message is None
        assert len(manager.wallets[0].transactions) == 1

    def test_import_replaces_existing_wallets(self, manager: LedgerManager, write_csv: Callable[..., Path]):
        manager.generate_sample_data()
        path = write_csv("Fresh,EUR,1,2025-09-05,5,Income")

        manager.load_from_csv(str(path))

        assert [w.name for w in manager.wallets] == ["Fresh"]

    def test_comma_decimal_culture(self, write_csv: Callable[..., Path]):
        manager = LedgerManager(importer=CsvImporter(culture=CULTURES["ru"]))
        path = write_csv('Cash,RUB,"1\u00a0000,50",05.09.2025,"12,25",Income')

        result = manager.load_from_csv(str(path))

        assert result.message is None
        wallet = manager.wallets[0]
        assert wallet.initial_balance == Decimal("1000.50")
        assert wallet.transactions[0].amount == Decimal("12.25")


@pytest.mark.integration
class TestCsvImportFaultIsolation:
    """Test that bad rows are reported and skipped without stopping the import"""

    def test_invalid_type_and_amount(self, manager: LedgerManager, write_csv: Callable[..., Path]):
        path = write_csv(
            "BadWallet,USD,10,2025-09-05,notanumber,Income,Bad amount",
            "BadWallet,USD,10,2025-09-06,10,UnknownType,Bad type",
        )

        result = manager.load_from_csv(str(path))

        assert result.success is True
        assert result.message is not None
        assert "invalid amount" in result.message.lower()
        assert "invalid transaction type" in result.message.lower()

        wallet = manager.find_wallet_by_name("BadWallet")
        assert wallet is not None
        assert wallet.transactions == []

    def test_expense_exceeds_balance(self, manager: LedgerManager, write_csv: Callable[..., Path]):
        path = write_csv("Small,USD,10,2025-09-05,100,Expense,Too big")

        result = manager.load_from_csv(str(path))

        assert result.success
        assert "transaction not added" in result.message.lower()
        assert "insufficient funds" in result.message.lower()

        wallet = manager.find_wallet_by_name("Small")
        assert wallet.transactions == []
        assert wallet.initial_balance == Decimal("10")
        assert wallet.current_balance == Decimal("10")

    def test_not_enough_columns(self, manager: LedgerManager, write_csv: Callable[..., Path]):
        path = write_csv("Short,USD,10,2025-09-05,5")

        result = manager.load_from_csv(str(path))

        assert result.success
        assert result.error_messages == ["Line 2: not enough columns."]
        assert manager.wallets == []

    def test_trailing_delimiter_does_not_fill_missing_column(
        self, manager: LedgerManager, write_csv: Callable[..., Path]
    ):
        path = write_csv("W,USD,10,2025-09-05,5,")

        result = manager.load_from_csv(str(path))

        assert result.error_messages == ["Line 2: not enough columns."]
        assert manager.wallets == []

    def test_invalid_date_defaults_to_today_and_keeps_row(
        self, manager: LedgerManager, write_csv: Callable[..., Path], fixed_today: date
    ):
        path = write_csv("Cash,USD,10,someday,5,Income,Dateless")

        result = manager.load_from_csv(str(path))

        assert "invalid date 'someday'" in result.message
        txn = manager.wallets[0].transactions[0]
        assert txn.date == fixed_today
        assert txn.description == "Dateless"

    @pytest.mark.parametrize("raw_date", ["now", "today", "2025"])
    def test_relative_words_and_bare_years_are_not_dates(
        self, manager: LedgerManager, write_csv: Callable[..., Path], fixed_today: date, raw_date: str
    ):
        path = write_csv(f"Cash,USD,10,{raw_date},5,Income")

        result = manager.load_from_csv(str(path))

        assert result.error_messages == [
            f"Line 2: invalid date '{raw_date}', defaulted to now."
        ]
        assert manager.wallets[0].transactions[0].date == fixed_today

    def test_invalid_initial_balance_defaults_to_zero(
        self, manager: LedgerManager, write_csv: Callable[..., Path]
    ):
        path = write_csv("Cash,USD,lots,2025-09-05,5,Income")

        result = manager.load_from_csv(str(path))

        assert "invalid initial balance 'lots'" in result.message
        wallet = manager.wallets[0]
        assert wallet.initial_balance == Decimal("0")
        assert wallet.current_balance == Decimal("5")

    def test_wallet_creation_failure_skips_row(self, manager: LedgerManager, write_csv: Callable[..., Path]):
        path = write_csv(
            "NoCurrency,,10,2025-09-05,5,Income",
            "Negative,USD,-5,2025-09-05,5,Income",
            "Good,USD,0,2025-09-05,5,Income",
        )

        result = manager.load_from_csv(str(path))

        assert result.success
        assert len(result.error_messages) == 2
        assert result.error_messages[0].startswith("Line 2: failed to create wallet 'NoCurrency'")
        assert "Currency cannot be empty" in result.error_messages[0]
        assert result.error_messages[1].startswith("Line 3: failed to create wallet 'Negative'")
        assert [w.name for w in manager.wallets] == ["Good"]

    def test_non_positive_amount_is_a_row_diagnostic(
        self, manager: LedgerManager, write_csv: Callable[..., Path]
    ):
        path = write_csv("Cash,USD,10,2025-09-05,0,Income", "Cash,USD,10,2025-09-05,-3,Income")

        result = manager.load_from_csv(str(path))

        assert result.success
        assert len(result.error_messages) == 2
        assert all("invalid amount" in m for m in result.error_messages)
        assert manager.wallets[0].transactions == []

    def test_good_rows_after_bad_rows_still_load(
        self, manager: LedgerManager, write_csv: Callable[..., Path]
    ):
        path = write_csv(
            "Cash,USD,10,2025-09-05,x,Income",
            "only,two",
            "Cash,USD,10,2025-09-06,7,Income,ok",
        )

        result = manager.load_from_csv(str(path))

        assert result.transactions_added == 1
        assert result.error_messages[0].startswith("Line 2:")
        assert result.error_messages[1].startswith("Line 3:")
        assert result.message.count("\n") == 1
        assert manager.wallets[0].current_balance == Decimal("17")

    def test_append_order_decides_acceptance(self, manager: LedgerManager, write_csv: Callable[..., Path]):
        """Test an earlier-dated expense listed after the income is accepted"""
        path = write_csv(
            "Cash,USD,0,2025-09-20,100,Income",
            "Cash,USD,0,2025-09-01,80,Expense",
        )

        result = manager.load_from_csv(str(path))

        assert result.message is None
        assert manager.wallets[0].current_balance == Decimal("20")

    def test_row_diagnostics_are_logged_at_debug(
        self, manager: LedgerManager, write_csv: Callable[..., Path], mocker
    ):
        mock_logger = mocker.patch("wallet_ledger.services.csv_import.logger")
        path = write_csv("Cash,USD,10,2025-09-05,abc,Income")

        result = manager.load_from_csv(str(path))

        mock_logger.debug.assert_any_call(result.error_messages[0])
        mock_logger.warning.assert_not_called()


@pytest.mark.integration
class TestCsvImportFileErrors:
    """Test file-level failures"""

    def test_missing_file(self, manager: LedgerManager, tmp_path: Path):
        manager.generate_sample_data()

        result = manager.load_from_csv(str(tmp_path / "missing.csv"))

        assert result.success is False
        assert result.message.startswith("File not found")
        # nothing was cleared
        assert len(manager.wallets) == 2

    def test_header_only_file(self, manager: LedgerManager, write_csv: Callable[..., Path]):
        manager.generate_sample_data()
        path = write_csv()

        result = manager.load_from_csv(str(path))

        assert result.success is False
        assert result.message == "CSV file contains no data."
        assert len(manager.wallets) == 2

    @pytest.mark.parametrize("filepath", ["", None])
    def test_empty_path(self, manager: LedgerManager, filepath):
        result = manager.load_from_csv(filepath)

        assert result.success is False
        assert result.message == "Path is null or empty."
        assert str(result) == "Import failed: Path is null or empty."

    def test_undecodable_file(self, manager: LedgerManager, tmp_path: Path):
        path = tmp_path / "binary.csv"
        path.write_bytes(b"header\n\xff\xfe\xfa,bad\n")

        result = manager.load_from_csv(str(path))

        assert result.success is False
        assert result.message
