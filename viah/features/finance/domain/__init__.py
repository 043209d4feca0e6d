"""
Domain subpackage for budgets, expenses and contracts.
"""

from .models import (
    BudgetCategory,
    CategoryCreate,
    CategoryUpdate,
    Contract,
    ContractCreate,
    ContractUpdate,
    Expense,
    ExpenseCreate,
    ExpenseUpdate,
    PaymentMilestone,
    PaymentStatus,
    parse_milestones,
)

__all__ = [
    "BudgetCategory",
    "CategoryCreate",
    "CategoryUpdate",
    "Contract",
    "ContractCreate",
    "ContractUpdate",
    "Expense",
    "ExpenseCreate",
    "ExpenseUpdate",
    "PaymentMilestone",
    "PaymentStatus",
    "parse_milestones",
]
