"""
Persistence for budget categories, expenses and contracts.
"""

from psycopg.types.json import Jsonb

from viah.db.helpers import DatabaseError, build_update, execute_query, fetch_all, fetch_one
from viah.features.finance.domain import (
    BudgetCategory,
    CategoryCreate,
    CategoryUpdate,
    Contract,
    ContractCreate,
    ContractUpdate,
    Expense,
    ExpenseCreate,
    ExpenseUpdate,
)
from viah.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)


class FinanceRepositoryError(DatabaseError):
    """More specific exception for finance persistence failures."""


class BudgetCategoryRepository:
    CATEGORY_COLUMNS = "id, wedding_id, slug, display_name, allocated_amount"

    @classmethod
    def _row_to_category(cls, row: dict | None) -> BudgetCategory | None:
        return BudgetCategory.model_validate(row) if row else None

    @classmethod
    async def list_for_wedding(cls, wedding_id: str) -> list[BudgetCategory]:
        query = f"""
            SELECT {cls.CATEGORY_COLUMNS}
            FROM budget_categories
            WHERE wedding_id = %s
            ORDER BY display_name
        """
        return [cls._row_to_category(row) for row in await fetch_all(query, (wedding_id,))]

    @classmethod
    async def create(cls, wedding_id: str, payload: CategoryCreate) -> BudgetCategory:
        query = f"""
            INSERT INTO budget_categories (wedding_id, slug, display_name, allocated_amount)
            VALUES (%s, %s, %s, %s)
            RETURNING {cls.CATEGORY_COLUMNS}
        """
        row = await fetch_one(
            query, (wedding_id, payload.slug, payload.display_name, payload.allocated_amount)
        )
        if not row:
            raise FinanceRepositoryError("Failed to create category", operation="create_category")
        return cls._row_to_category(row)

    @classmethod
    async def update(
        cls, wedding_id: str, category_id: str, payload: CategoryUpdate
    ) -> BudgetCategory | None:
        values = payload.model_dump(exclude_unset=True)
        if not values:
            query = f"SELECT {cls.CATEGORY_COLUMNS} FROM budget_categories WHERE id = %s AND wedding_id = %s"
            return cls._row_to_category(await fetch_one(query, (category_id, wedding_id)))
        query, params = build_update(
            "budget_categories",
            values,
            {"id": category_id, "wedding_id": wedding_id},
            cls.CATEGORY_COLUMNS,
        )
        return cls._row_to_category(await fetch_one(query, params))


class ExpenseRepository:
    EXPENSE_COLUMNS = """
        id, wedding_id, event_id, category_id, parent_category, description, amount,
        amount_paid, payment_status, status, expense_date, created_at
    """

    @classmethod
    def _row_to_expense(cls, row: dict | None) -> Expense | None:
        return Expense.model_validate(row) if row else None

    @classmethod
    async def get(cls, expense_id: str) -> Expense | None:
        query = f"SELECT {cls.EXPENSE_COLUMNS} FROM expenses WHERE id = %s"
        return cls._row_to_expense(await fetch_one(query, (expense_id,)))

    @classmethod
    async def list_for_wedding(cls, wedding_id: str) -> list[Expense]:
        query = f"""
            SELECT {cls.EXPENSE_COLUMNS}
            FROM expenses
            WHERE wedding_id = %s
            ORDER BY created_at DESC
        """
        return [cls._row_to_expense(row) for row in await fetch_all(query, (wedding_id,))]

    @classmethod
    async def create(cls, wedding_id: str, payload: ExpenseCreate) -> Expense:
        query = f"""
            INSERT INTO expenses (
                wedding_id, event_id, category_id, parent_category, description, amount,
                amount_paid, payment_status, status, expense_date
            )
            VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
            RETURNING {cls.EXPENSE_COLUMNS}
        """
        row = await fetch_one(
            query,
            (
                wedding_id,
                payload.event_id,
                payload.category_id,
                payload.parent_category,
                payload.description,
                payload.amount,
                payload.amount_paid,
                payload.payment_status,
                payload.status,
                payload.expense_date,
            ),
        )
        if not row:
            raise FinanceRepositoryError("Failed to create expense", operation="create_expense")
        return cls._row_to_expense(row)

    @classmethod
    async def update(cls, expense_id: str, payload: ExpenseUpdate) -> Expense | None:
        values = payload.model_dump(exclude_unset=True)
        if not values:
            return await cls.get(expense_id)
        query, params = build_update("expenses", values, {"id": expense_id}, cls.EXPENSE_COLUMNS)
        return cls._row_to_expense(await fetch_one(query, params))

    @classmethod
    async def delete(cls, expense_id: str) -> bool:
        return await execute_query("DELETE FROM expenses WHERE id = %s", (expense_id,)) > 0


class ContractRepository:
    CONTRACT_COLUMNS = "id, wedding_id, event_id, vendor_id, total_amount, payment_milestones, status"

    @classmethod
    def _row_to_contract(cls, row: dict | None) -> Contract | None:
        return Contract.model_validate(row) if row else None

    @classmethod
    def _milestones_param(cls, milestones) -> Jsonb:
        return Jsonb([milestone.model_dump(mode="json") for milestone in milestones])

    @classmethod
    async def get(cls, contract_id: str) -> Contract | None:
        query = f"SELECT {cls.CONTRACT_COLUMNS} FROM contracts WHERE id = %s"
        return cls._row_to_contract(await fetch_one(query, (contract_id,)))

    @classmethod
    async def list_for_wedding(cls, wedding_id: str) -> list[Contract]:
        query = f"""
            SELECT {cls.CONTRACT_COLUMNS}
            FROM contracts
            WHERE wedding_id = %s
            ORDER BY created_at
        """
        return [cls._row_to_contract(row) for row in await fetch_all(query, (wedding_id,))]

    @classmethod
    async def create(cls, wedding_id: str, payload: ContractCreate) -> Contract:
        query = f"""
            INSERT INTO contracts (
                wedding_id, event_id, vendor_id, total_amount, payment_milestones, status
            )
            VALUES (%s, %s, %s, %s, %s, %s)
            RETURNING {cls.CONTRACT_COLUMNS}
        """
        row = await fetch_one(
            query,
            (
                wedding_id,
                payload.event_id,
                payload.vendor_id,
                payload.total_amount,
                cls._milestones_param(payload.payment_milestones),
                payload.status,
            ),
        )
        if not row:
            raise FinanceRepositoryError("Failed to create contract", operation="create_contract")
        return cls._row_to_contract(row)

    @classmethod
    async def update(cls, contract_id: str, payload: ContractUpdate) -> Contract | None:
        values = payload.model_dump(exclude_unset=True)
        if "payment_milestones" in values:
            values["payment_milestones"] = cls._milestones_param(payload.payment_milestones or [])
        if not values:
            return await cls.get(contract_id)
        query, params = build_update("contracts", values, {"id": contract_id}, cls.CONTRACT_COLUMNS)
        return cls._row_to_contract(await fetch_one(query, params))
