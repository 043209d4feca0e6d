from unittest.mock import AsyncMock

from fastapi.testclient import TestClient
from psycopg.types.json import Jsonb

from viah.features.finance.domain import BudgetCategory, Contract, Expense
from viah.features.finance.repository import (
    BudgetCategoryRepository,
    ContractRepository,
    ExpenseRepository,
)
from viah.main import app

client = TestClient(app)

COUPLE_CLAIMS = {"sub": "user-123"}
STRANGER_CLAIMS = {"sub": "someone-else"}

CATERING = BudgetCategory(id="bc1", wedding_id="w1", slug="catering", display_name="Catering", allocated_amount=20000)
DEPOSIT = Expense(id="x1", wedding_id="w1", description="Caterer deposit", amount=5000, amount_paid=5000, payment_status="paid")
CONTRACT_ROW = {
    "id": "c1",
    "wedding_id": "w1",
    "event_id": None,
    "vendor_id": "v1",
    "total_amount": 12000,
    "payment_milestones": [{"name": "Deposit", "amount": 3000, "status": "paid"}],
    "status": "active",
}


def test_owner_lists_categories(apply_auth_override, known_records, monkeypatch):
    apply_auth_override(app, COUPLE_CLAIMS)
    monkeypatch.setattr(BudgetCategoryRepository, "list_for_wedding", AsyncMock(return_value=[CATERING]))

    response = client.get("/api/budget-categories/w1")

    assert response.status_code == 200
    assert response.json()[0]["slug"] == "catering"


def test_stranger_cannot_read_expenses(apply_auth_override, known_records, monkeypatch):
    apply_auth_override(app, STRANGER_CLAIMS)
    listing = AsyncMock(return_value=[DEPOSIT])
    monkeypatch.setattr(ExpenseRepository, "list_for_wedding", listing)

    response = client.get("/api/expenses/w1")

    assert response.status_code == 403
    listing.assert_not_awaited()


def test_stranger_cannot_create_category(apply_auth_override, known_records, monkeypatch):
    apply_auth_override(app, STRANGER_CLAIMS)
    create = AsyncMock(return_value=CATERING)
    monkeypatch.setattr(BudgetCategoryRepository, "create", create)

    response = client.post("/api/budget-categories/w1", json={"slug": "catering", "display_name": "Catering"})

    assert response.status_code == 403
    create.assert_not_awaited()


def test_category_slug_must_be_lowercase(apply_auth_override, known_records):
    apply_auth_override(app, COUPLE_CLAIMS)

    response = client.post("/api/budget-categories/w1", json={"slug": "Catering Hall", "display_name": "Catering"})

    assert response.status_code == 422


def test_missing_category_update_is_404(apply_auth_override, known_records, monkeypatch):
    apply_auth_override(app, COUPLE_CLAIMS)
    monkeypatch.setattr(BudgetCategoryRepository, "update", AsyncMock(return_value=None))

    response = client.patch("/api/budget-categories/w1/bc9", json={"allocated_amount": 100})

    assert response.status_code == 404


def test_owner_creates_expense(apply_auth_override, known_records, monkeypatch):
    apply_auth_override(app, COUPLE_CLAIMS)
    create = AsyncMock(return_value=DEPOSIT)
    monkeypatch.setattr(ExpenseRepository, "create", create)

    response = client.post("/api/expenses/w1", json={"description": "Caterer deposit", "amount": 5000})

    assert response.status_code == 201
    wedding_id, payload = create.await_args.args
    assert wedding_id == "w1"
    assert payload.payment_status == "unpaid"


def test_negative_expense_is_rejected(apply_auth_override, known_records):
    apply_auth_override(app, COUPLE_CLAIMS)

    response = client.post("/api/expenses/w1", json={"description": "Refund", "amount": -10})

    assert response.status_code == 422


def test_owner_updates_expense(apply_auth_override, known_records, monkeypatch):
    apply_auth_override(app, COUPLE_CLAIMS)
    monkeypatch.setattr(ExpenseRepository, "get", AsyncMock(return_value=DEPOSIT))
    update = AsyncMock(return_value=DEPOSIT.model_copy(update={"amount": 6000}))
    monkeypatch.setattr(ExpenseRepository, "update", update)

    response = client.patch("/api/expenses/item/x1", json={"amount": 6000})

    assert response.status_code == 200
    assert response.json()["amount"] == 6000
    assert update.await_args.args[1].model_dump(exclude_unset=True) == {"amount": 6000}


def test_updating_unknown_expense_is_404(apply_auth_override, known_records, monkeypatch):
    apply_auth_override(app, COUPLE_CLAIMS)
    monkeypatch.setattr(ExpenseRepository, "get", AsyncMock(return_value=None))

    response = client.patch("/api/expenses/item/x9", json={"amount": 1})

    assert response.status_code == 404
    assert response.json()["detail"] == "Expense not found"


def test_stranger_cannot_delete_expense(apply_auth_override, known_records, monkeypatch):
    apply_auth_override(app, STRANGER_CLAIMS)
    monkeypatch.setattr(ExpenseRepository, "get", AsyncMock(return_value=DEPOSIT))
    delete = AsyncMock(return_value=True)
    monkeypatch.setattr(ExpenseRepository, "delete", delete)

    response = client.delete("/api/expenses/item/x1")

    assert response.status_code == 403
    delete.assert_not_awaited()


def test_owner_deletes_expense(apply_auth_override, known_records, monkeypatch):
    apply_auth_override(app, COUPLE_CLAIMS)
    monkeypatch.setattr(ExpenseRepository, "get", AsyncMock(return_value=DEPOSIT))
    delete = AsyncMock(return_value=True)
    monkeypatch.setattr(ExpenseRepository, "delete", delete)

    response = client.delete("/api/expenses/item/x1")

    assert response.status_code == 204
    delete.assert_awaited_once_with("x1")


def test_deleting_unknown_expense_is_404(apply_auth_override, known_records, monkeypatch):
    apply_auth_override(app, COUPLE_CLAIMS)
    monkeypatch.setattr(ExpenseRepository, "get", AsyncMock(return_value=None))

    response = client.delete("/api/expenses/item/x9")

    assert response.status_code == 404


def test_contract_milestones_are_stored_as_jsonb(apply_auth_override, known_records, monkeypatch):
    apply_auth_override(app, COUPLE_CLAIMS)
    fetch_one = AsyncMock(return_value=CONTRACT_ROW)
    monkeypatch.setattr("viah.features.finance.repository.fetch_one", fetch_one)

    response = client.post(
        "/api/contracts/w1",
        json={
            "vendor_id": "v1",
            "total_amount": 12000,
            "payment_milestones": [{"name": "Deposit", "amount": 3000, "dueDate": "2026-03-01T00:00:00Z"}],
        },
    )

    assert response.status_code == 201
    assert response.json()["payment_milestones"][0]["name"] == "Deposit"
    params = fetch_one.await_args.args[1]
    assert params[0] == "w1"
    milestones = params[4]
    assert isinstance(milestones, Jsonb)
    assert milestones.obj[0]["amount"] == 3000
    assert milestones.obj[0]["due_date"].startswith("2026-03-01")


def test_owner_patches_contract_milestones(apply_auth_override, known_records, monkeypatch):
    apply_auth_override(app, COUPLE_CLAIMS)
    monkeypatch.setattr(ContractRepository, "get", AsyncMock(return_value=Contract.model_validate(CONTRACT_ROW)))
    fetch_one = AsyncMock(return_value={**CONTRACT_ROW, "status": "completed"})
    monkeypatch.setattr("viah.features.finance.repository.fetch_one", fetch_one)

    response = client.patch(
        "/api/contracts/item/c1",
        json={"status": "completed", "payment_milestones": [{"name": "Final", "amount": 9000}]},
    )

    assert response.status_code == 200
    assert response.json()["status"] == "completed"
    params = fetch_one.await_args.args[1]
    assert params[-1] == "c1"
    jsonb_params = [param for param in params if isinstance(param, Jsonb)]
    assert len(jsonb_params) == 1
    assert jsonb_params[0].obj[0]["name"] == "Final"


def test_stranger_cannot_patch_contract(apply_auth_override, known_records, monkeypatch):
    apply_auth_override(app, STRANGER_CLAIMS)
    monkeypatch.setattr(ContractRepository, "get", AsyncMock(return_value=Contract.model_validate(CONTRACT_ROW)))
    update = AsyncMock()
    monkeypatch.setattr(ContractRepository, "update", update)

    response = client.patch("/api/contracts/item/c1", json={"status": "cancelled"})

    assert response.status_code == 403
    update.assert_not_awaited()


def test_unknown_contract_is_404(apply_auth_override, known_records, monkeypatch):
    apply_auth_override(app, COUPLE_CLAIMS)
    monkeypatch.setattr(ContractRepository, "get", AsyncMock(return_value=None))

    response = client.patch("/api/contracts/item/c9", json={"status": "cancelled"})

    assert response.status_code == 404
