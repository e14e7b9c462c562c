from enum import Enum

class TransactionType(Enum):
    """Represents whether money is coming in or out"""
    INCOME = "Income" # in
    EXPENSE = "Expense" # out
