from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional, Sequence

from wallet_ledger.config.settings import ConfigLoader
from wallet_ledger.domain.models import Transaction
from wallet_ledger.domain.wallet import Wallet
from wallet_ledger.logging_setup import get_logger
from wallet_ledger.parsers.values import (
    DEFAULT_DATE_FORMATS,
    DEFAULT_EXPENSE_TOKENS,
    DEFAULT_INCOME_TOKENS,
    INVARIANT,
    ParsingCulture,
    parse_date,
    parse_decimal,
    parse_transaction_type,
)
from wallet_ledger.parsers.wallet_csv import WalletCsvParser
from wallet_ledger.services.models import ImportResult

if TYPE_CHECKING:
    from wallet_ledger.services.ledger_manager import LedgerManager

logger = get_logger(__name__)


class CsvImporter:
    """
    Loads wallets and transactions from a wallet CSV file.

    Each data row is processed on its own: a bad row adds a diagnostic and
    the import moves on to the next one. Only file-level problems (missing,
    unreadable or empty file) fail the import as a whole.

    Per row:
        1. Split into fields; fewer than the minimum -> skip
        2. Find the wallet by name, creating it if needed; creation failure -> skip
        3. Parse the date; failure falls back to today and the row continues
        4. Parse the amount; failure -> skip
        5. Parse the type; failure -> skip
        6. Offer the transaction to the wallet; rejection is reported
    """

    def __init__(
        self,
        parser: Optional[WalletCsvParser] = None,
        culture: ParsingCulture = INVARIANT,
        date_formats: Sequence[str] = DEFAULT_DATE_FORMATS,
        income_tokens: Sequence[str] = DEFAULT_INCOME_TOKENS,
        expense_tokens: Sequence[str] = DEFAULT_EXPENSE_TOKENS,
        today: Callable[[], date] = date.today,
    ):
        self.parser = parser or WalletCsvParser()
        self.culture = culture
        self.date_formats = list(date_formats)
        self.income_tokens = list(income_tokens)
        self.expense_tokens = list(expense_tokens)
        self._today = today

    @classmethod
    def from_config(cls, config: Optional[Dict[str, Any]] = None) -> "CsvImporter":
        """
        Build an importer from configuration

        Args:
            config: Optional config dict. If None, loads from ConfigLoader.
                Useful for testing with custom configs.

        Example (testing):
            importer = CsvImporter.from_config({"culture": "ru"})
        """
        if config is None:
            config = ConfigLoader.load_importer_config()

        parser = WalletCsvParser(
            delimiter=config.get("delimiter", ","),
            quote=config.get("quote", '"'),
            min_columns=int(config.get("min_columns", 6)),
        )
        return cls(
            parser=parser,
            culture=ParsingCulture.named(config.get("culture", "invariant")),
            date_formats=config.get("date_formats", DEFAULT_DATE_FORMATS),
            income_tokens=config.get("income_tokens", DEFAULT_INCOME_TOKENS),
            expense_tokens=config.get("expense_tokens", DEFAULT_EXPENSE_TOKENS),
        )

    def load(self, manager: "LedgerManager", filepath: Optional[str]) -> ImportResult:
        """
        Replace the manager's wallets with the contents of a CSV file.

        The wallet collection is cleared only once the file has been read
        and found to contain data rows.

        Args:
            manager: The ledger whose wallets are replaced
            filepath: Path to the CSV file

        Returns:
            ImportResult with success=False only for file-level failures
        """
        try:
            lines = self.parser.read_lines(filepath)
        except (OSError, ValueError) as e:
            logger.error("Could not load %s: %s", filepath, e)
            return ImportResult.failure(str(e), filepath=str(filepath or ""))

        logger.info("Importing %s (%d data lines)", filepath, len(lines) - 1)
        manager.clear()

        errors: List[str] = []
        processed = 0
        added = 0

        # Line 1 is always the header
        for line_number, line in enumerate(lines[1:], start=2):
            if not line.strip():
                continue
            processed += 1
            if self._import_line(manager, line_number, line, errors):
                added += 1

        # Row diagnostics travel in the ImportResult; callers decide how to show them
        for message in errors:
            logger.debug(message)
        logger.info(
            "Imported %d transactions into %d wallets from %s (%d warnings)",
            added, len(manager.wallets), filepath, len(errors),
        )

        return ImportResult(
            success=True,
            error_messages=errors,
            filepath=str(filepath),
            lines_processed=processed,
            wallets_loaded=len(manager.wallets),
            transactions_added=added,
        )

    def _import_line(
        self,
        manager: "LedgerManager",
        line_number: int,
        line: str,
        errors: List[str],
    ) -> bool:
        """
        Process a single data row.

        Returns:
            True if a transaction was added to a wallet
        """
        p = self.parser
        fields = p.split_line(line)
        if not p.has_enough_columns(fields):
            errors.append(f"Line {line_number}: not enough columns.")
            return False

        wallet = self._resolve_wallet(manager, line_number, fields, errors)
        if wallet is None:
            return False

        raw_date = fields[p.DATE_COL]
        txn_date = parse_date(raw_date, self.culture, self.date_formats)
        if txn_date is None:
            errors.append(f"Line {line_number}: invalid date '{raw_date}', defaulted to now.")
            txn_date = self._today()

        raw_amount = fields[p.AMOUNT_COL]
        amount = parse_decimal(raw_amount, self.culture)
        if amount is None:
            errors.append(f"Line {line_number}: invalid amount '{raw_amount}', skipped transaction.")
            return False
        if amount <= 0:
            errors.append(
                f"Line {line_number}: invalid amount '{raw_amount}' "
                f"(must be greater than zero), skipped transaction."
            )
            return False

        raw_type = fields[p.TYPE_COL]
        txn_type = parse_transaction_type(raw_type, self.income_tokens, self.expense_tokens)
        if txn_type is None:
            errors.append(
                f"Line {line_number}: invalid transaction type '{raw_type}', skipped transaction."
            )
            return False

        transaction = Transaction(
            date=txn_date,
            amount=amount,
            type=txn_type,
            description=p.description(fields),
        )
        result = wallet.try_add_transaction(transaction)
        if not result:
            errors.append(f"Line {line_number}: transaction not added: {result.error}")
            return False

        return True

    def _resolve_wallet(
        self,
        manager: "LedgerManager",
        line_number: int,
        fields: List[str],
        errors: List[str],
    ) -> Optional[Wallet]:
        """Find the row's wallet, creating it on first sight"""
        p = self.parser
        name = fields[p.WALLET_NAME_COL].strip()

        wallet = manager.find_wallet_by_name(name)
        if wallet is not None:
            return wallet

        raw_balance = fields[p.INITIAL_BALANCE_COL]
        initial_balance = parse_decimal(raw_balance, self.culture)
        if initial_balance is None:
            errors.append(
                f"Line {line_number}: invalid initial balance '{raw_balance}', defaulted to 0."
            )
            initial_balance = Decimal("0")

        try:
            return manager.create_wallet(name, fields[p.CURRENCY_COL], initial_balance)
        except ValueError as e:
            errors.append(f"Line {line_number}: failed to create wallet '{name}': {e}")
            return None
