"""Personal wallet ledger: balances, monthly reports and CSV import."""
