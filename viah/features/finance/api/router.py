"""
Budget, expense and contract routes plus the financial dashboard payload.

Usage:
    1. GET/POST  /api/budget-categories/{wedding_id}
    2. PATCH     /api/budget-categories/{wedding_id}/{category_id}
    3. GET/POST  /api/expenses/{wedding_id}
    4. PATCH/DELETE /api/expenses/item/{expense_id}
    5. GET/POST  /api/contracts/{wedding_id}
    6. PATCH     /api/contracts/item/{contract_id}
    7. GET       /api/dashboard/financial/{wedding_id}  - Widgets + aggregated summary
"""

import asyncio

from fastapi import APIRouter, Depends, HTTPException, Response, status

from viah.auth.access import ensure_wedding_access
from viah.auth.verify import auth_dependency
from viah.features.dashboard.service import get_widgets
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
from viah.features.finance.repository import (
    BudgetCategoryRepository,
    ContractRepository,
    ExpenseRepository,
)
from viah.features.finance.service import get_financial_summary

router = APIRouter(prefix="/api", tags=["finance"])


def _not_found(what: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{what} not found")


# Budget categories


@router.get("/budget-categories/{wedding_id}", response_model=list[BudgetCategory])
async def list_categories(wedding_id: str, claims: dict = Depends(auth_dependency)):
    await ensure_wedding_access(claims, wedding_id)
    return await BudgetCategoryRepository.list_for_wedding(wedding_id)


@router.post(
    "/budget-categories/{wedding_id}",
    response_model=BudgetCategory,
    status_code=status.HTTP_201_CREATED,
)
async def create_category(
    wedding_id: str, payload: CategoryCreate, claims: dict = Depends(auth_dependency)
):
    await ensure_wedding_access(claims, wedding_id)
    return await BudgetCategoryRepository.create(wedding_id, payload)


@router.patch("/budget-categories/{wedding_id}/{category_id}", response_model=BudgetCategory)
async def update_category(
    wedding_id: str,
    category_id: str,
    payload: CategoryUpdate,
    claims: dict = Depends(auth_dependency),
):
    await ensure_wedding_access(claims, wedding_id)
    category = await BudgetCategoryRepository.update(wedding_id, category_id, payload)
    if not category:
        raise _not_found("Category")
    return category


# Expenses


@router.get("/expenses/{wedding_id}", response_model=list[Expense])
async def list_expenses(wedding_id: str, claims: dict = Depends(auth_dependency)):
    await ensure_wedding_access(claims, wedding_id)
    return await ExpenseRepository.list_for_wedding(wedding_id)


@router.post("/expenses/{wedding_id}", response_model=Expense, status_code=status.HTTP_201_CREATED)
async def create_expense(
    wedding_id: str, payload: ExpenseCreate, claims: dict = Depends(auth_dependency)
):
    await ensure_wedding_access(claims, wedding_id)
    return await ExpenseRepository.create(wedding_id, payload)


async def _load_expense(claims: dict, expense_id: str) -> Expense:
    expense = await ExpenseRepository.get(expense_id)
    if not expense:
        raise _not_found("Expense")
    await ensure_wedding_access(claims, expense.wedding_id)
    return expense


@router.patch("/expenses/item/{expense_id}", response_model=Expense)
async def update_expense(
    expense_id: str, payload: ExpenseUpdate, claims: dict = Depends(auth_dependency)
):
    await _load_expense(claims, expense_id)
    expense = await ExpenseRepository.update(expense_id, payload)
    if not expense:
        raise _not_found("Expense")
    return expense


@router.delete("/expenses/item/{expense_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_expense(expense_id: str, claims: dict = Depends(auth_dependency)):
    await _load_expense(claims, expense_id)
    await ExpenseRepository.delete(expense_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Contracts


@router.get("/contracts/{wedding_id}", response_model=list[Contract])
async def list_contracts(wedding_id: str, claims: dict = Depends(auth_dependency)):
    await ensure_wedding_access(claims, wedding_id)
    return await ContractRepository.list_for_wedding(wedding_id)


@router.post(
    "/contracts/{wedding_id}", response_model=Contract, status_code=status.HTTP_201_CREATED
)
async def create_contract(
    wedding_id: str, payload: ContractCreate, claims: dict = Depends(auth_dependency)
):
    await ensure_wedding_access(claims, wedding_id)
    return await ContractRepository.create(wedding_id, payload)


@router.patch("/contracts/item/{contract_id}", response_model=Contract)
async def update_contract(
    contract_id: str, payload: ContractUpdate, claims: dict = Depends(auth_dependency)
):
    contract = await ContractRepository.get(contract_id)
    if not contract:
        raise _not_found("Contract")
    await ensure_wedding_access(claims, contract.wedding_id)
    updated = await ContractRepository.update(contract_id, payload)
    if not updated:
        raise _not_found("Contract")
    return updated


# Dashboard


@router.get("/dashboard/financial/{wedding_id}")
async def financial_dashboard(wedding_id: str, claims: dict = Depends(auth_dependency)):
    wedding = await ensure_wedding_access(claims, wedding_id)
    widgets, summary = await asyncio.gather(get_widgets(wedding_id), get_financial_summary(wedding))
    return {"widgets": widgets, "summary": summary}
