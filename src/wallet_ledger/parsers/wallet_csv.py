from pathlib import Path
from typing import List, Optional

from wallet_ledger.logging_setup import get_logger

logger = get_logger(__name__)


class WalletCsvParser:
    """
    Reader and tokenizer for wallet CSV exports.

    Expected layout (header row first, position-significant):
        WalletName,Currency,InitialBalance,TransactionDate,Amount,Type,Description

    Handles:
    - Double-quoted fields with embedded delimiters
    - Doubled quotes inside a quoted field ("" -> ")
    - Optional trailing Description column

    Example:
        parser = WalletCsvParser()
        lines = parser.read_lines('wallets.csv')
        fields = parser.split_line(lines[1])
    """

    # Column positions in the file
    WALLET_NAME_COL = 0
    CURRENCY_COL = 1
    INITIAL_BALANCE_COL = 2
    DATE_COL = 3
    AMOUNT_COL = 4
    TYPE_COL = 5
    DESCRIPTION_COL = 6

    def __init__(self, delimiter: str = ",", quote: str = '"', min_columns: int = 6):
        if len(delimiter) != 1 or len(quote) != 1:
            raise ValueError("Delimiter and quote must be single characters")
        if delimiter == quote:
            raise ValueError("Delimiter and quote must differ")

        self.delimiter = delimiter
        self.quote = quote
        self.min_columns = min_columns

    def read_lines(self, filepath: Optional[str]) -> List[str]:
        """
        Read every line of a wallet CSV file, header included.

        Args:
            filepath: Path to the CSV file

        Returns:
            The file's lines without line terminators

        Raises:
            ValueError: If the path is empty or the file holds no data rows
            FileNotFoundError: If the file doesn't exist
            OSError: If the file can't be read
        """
        if filepath is None or not str(filepath).strip():
            raise ValueError("Path is null or empty.")

        path = Path(filepath)
        if not path.is_file():
            raise FileNotFoundError(f"File not found: {filepath}")

        # utf-8-sig drops a BOM left by spreadsheet exports
        with open(path, encoding="utf-8-sig", newline="") as f:
            lines = f.read().splitlines()

        if len(lines) <= 1:
            raise ValueError("CSV file contains no data.")

        logger.debug("Read %d lines from %s", len(lines), path)
        return lines

    def split_line(self, line: Optional[str]) -> List[str]:
        """
        Split one line into fields.

        A field that starts with the quote character is read verbatim up to
        its closing quote, with doubled quotes collapsed into one; any text
        between the closing quote and the next delimiter is kept. Other
        fields run to the next delimiter and are stripped of surrounding
        whitespace. A delimiter at the very end of the line does not start
        another field.

        Args:
            line: A single line of the file

        Returns:
            List of field values (outer quotes removed)
        """
        if line is None:
            return []

        fields: List[str] = []
        i, length = 0, len(line)

        while i < length:
            if line[i] == self.quote:
                i += 1
                chars = []
                while i < length:
                    if line[i] == self.quote:
                        if i + 1 < length and line[i + 1] == self.quote:
                            chars.append(self.quote)
                            i += 2
                            continue
                        i += 1
                        break
                    chars.append(line[i])
                    i += 1

                end = self._next_delimiter(line, i)
                chars.append(line[i:end].rstrip())
                fields.append("".join(chars))
            else:
                end = self._next_delimiter(line, i)
                fields.append(line[i:end].strip())

            i = end + 1  # skip delimiter

        return fields

    def has_enough_columns(self, fields: List[str]) -> bool:
        return len(fields) >= self.min_columns

    def description(self, fields: List[str]) -> str:
        """The optional description column, empty when absent"""
        if len(fields) > self.DESCRIPTION_COL:
            return fields[self.DESCRIPTION_COL]
        return ""

    def _next_delimiter(self, line: str, start: int) -> int:
        end = line.find(self.delimiter, start)
        return len(line) if end == -1 else end
