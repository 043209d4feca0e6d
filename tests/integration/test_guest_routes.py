from unittest.mock import AsyncMock

from fastapi.testclient import TestClient

from viah.features.guests.domain import Guest, Household
from viah.features.guests.repository import GuestRepository, HouseholdRepository
from viah.main import app

client = TestClient(app)

COUPLE_CLAIMS = {"sub": "user-123"}
STRANGER_CLAIMS = {"sub": "someone-else"}

PATELS = Household(id="h1", wedding_id="w1", name="The Patel Family", max_count=4)
ASHA = Guest(id="g1", wedding_id="w1", household_id="h1", name="Asha Patel", side="bride", rsvp_status="confirmed", plus_one=True)
RAVI = Guest(id="g2", wedding_id="w1", name="Ravi Shah", side="groom")


def test_owner_lists_guests_filtered_by_side(apply_auth_override, known_records, monkeypatch):
    apply_auth_override(app, COUPLE_CLAIMS)
    monkeypatch.setattr(GuestRepository, "list_for_wedding", AsyncMock(return_value=[ASHA, RAVI]))

    response = client.get("/api/guests/w1", params={"side": "groom"})

    assert response.status_code == 200
    assert [guest["id"] for guest in response.json()] == ["g2"]


def test_stranger_cannot_read_guest_list(apply_auth_override, known_records, monkeypatch):
    apply_auth_override(app, STRANGER_CLAIMS)
    listing = AsyncMock(return_value=[ASHA])
    monkeypatch.setattr(GuestRepository, "list_for_wedding", listing)

    response = client.get("/api/guests/w1")

    assert response.status_code == 403
    listing.assert_not_awaited()


def test_guest_summary(apply_auth_override, known_records, monkeypatch):
    apply_auth_override(app, COUPLE_CLAIMS)
    monkeypatch.setattr(GuestRepository, "list_for_wedding", AsyncMock(return_value=[ASHA, RAVI]))

    data = client.get("/api/guests/w1/summary").json()

    assert data["total"] == 2
    assert data["confirmed"] == 1
    assert data["expected_headcount"] == 2


def test_owner_adds_guest_to_household(apply_auth_override, known_records, monkeypatch):
    apply_auth_override(app, COUPLE_CLAIMS)
    monkeypatch.setattr(HouseholdRepository, "get", AsyncMock(return_value=PATELS))
    create = AsyncMock(return_value=ASHA)
    monkeypatch.setattr(GuestRepository, "create", create)

    response = client.post("/api/guests/w1", json={"name": "Asha Patel", "household_id": "h1", "side": "bride"})

    assert response.status_code == 201
    wedding_id, payload = create.await_args.args
    assert wedding_id == "w1"
    assert payload.household_id == "h1"


def test_guest_cannot_join_household_of_another_wedding(apply_auth_override, known_records, monkeypatch):
    apply_auth_override(app, COUPLE_CLAIMS)
    monkeypatch.setattr(
        HouseholdRepository, "get", AsyncMock(return_value=PATELS.model_copy(update={"wedding_id": "w2"}))
    )
    create = AsyncMock()
    monkeypatch.setattr(GuestRepository, "create", create)

    response = client.post("/api/guests/w1", json={"name": "Asha Patel", "household_id": "h1"})

    assert response.status_code == 422
    assert response.json()["detail"]["code"] == "household_mismatch"
    create.assert_not_awaited()


def test_unknown_side_is_rejected(apply_auth_override, known_records):
    apply_auth_override(app, COUPLE_CLAIMS)

    response = client.post("/api/guests/w1", json={"name": "Asha", "side": "cousin"})

    assert response.status_code == 422


def test_bulk_import_returns_per_row_errors(apply_auth_override, known_records, monkeypatch):
    apply_auth_override(app, COUPLE_CLAIMS)
    monkeypatch.setattr(GuestRepository, "create", AsyncMock(return_value=RAVI))

    response = client.post("/api/guests/w1/bulk", json={"guests": [{"name": "Ravi Shah"}, {"email": "x@example.com"}]})

    assert response.status_code == 200
    data = response.json()
    assert (data["success"], data["failed"]) == (1, 1)
    assert data["errors"][0]["index"] == 1


def test_bulk_import_requires_guest_array(apply_auth_override, known_records):
    apply_auth_override(app, COUPLE_CLAIMS)

    response = client.post("/api/guests/w1/bulk", json={"guests": "Ravi"})

    assert response.status_code == 422


def test_owner_records_rsvp(apply_auth_override, known_records, monkeypatch):
    apply_auth_override(app, COUPLE_CLAIMS)
    monkeypatch.setattr(GuestRepository, "get", AsyncMock(return_value=RAVI))
    update = AsyncMock(return_value=RAVI.model_copy(update={"rsvp_status": "declined"}))
    monkeypatch.setattr(GuestRepository, "update", update)

    response = client.patch("/api/guests/item/g2", json={"rsvp_status": "declined"})

    assert response.status_code == 200
    assert response.json()["rsvp_status"] == "declined"
    assert update.await_args.args[0] == "g2"


def test_stranger_cannot_delete_guest(apply_auth_override, known_records, monkeypatch):
    apply_auth_override(app, STRANGER_CLAIMS)
    monkeypatch.setattr(GuestRepository, "get", AsyncMock(return_value=RAVI))
    delete = AsyncMock(return_value=True)
    monkeypatch.setattr(GuestRepository, "delete", delete)

    response = client.delete("/api/guests/item/g2")

    assert response.status_code == 403
    delete.assert_not_awaited()


def test_unknown_guest_is_404(apply_auth_override, known_records, monkeypatch):
    apply_auth_override(app, COUPLE_CLAIMS)
    monkeypatch.setattr(GuestRepository, "get", AsyncMock(return_value=None))

    response = client.delete("/api/guests/item/g9")

    assert response.status_code == 404
    assert response.json()["detail"] == "Guest not found"


def test_owner_creates_household(apply_auth_override, known_records, monkeypatch):
    apply_auth_override(app, COUPLE_CLAIMS)
    create = AsyncMock(return_value=PATELS)
    monkeypatch.setattr(HouseholdRepository, "create", create)

    response = client.post("/api/households/w1", json={"name": "The Patel Family", "max_count": 4})

    assert response.status_code == 201
    assert response.json()["max_count"] == 4
    assert create.await_args.args[1].priority_tier == "should_invite"


def test_household_needs_at_least_one_seat(apply_auth_override, known_records):
    apply_auth_override(app, COUPLE_CLAIMS)

    response = client.post("/api/households/w1", json={"name": "The Patel Family", "max_count": 0})

    assert response.status_code == 422


def test_household_members(apply_auth_override, known_records, monkeypatch):
    apply_auth_override(app, COUPLE_CLAIMS)
    monkeypatch.setattr(HouseholdRepository, "get", AsyncMock(return_value=PATELS))
    monkeypatch.setattr(GuestRepository, "list_for_household", AsyncMock(return_value=[ASHA]))

    response = client.get("/api/guests/by-household/h1")

    assert response.status_code == 200
    assert response.json()[0]["name"] == "Asha Patel"


def test_stranger_cannot_edit_household(apply_auth_override, known_records, monkeypatch):
    apply_auth_override(app, STRANGER_CLAIMS)
    monkeypatch.setattr(HouseholdRepository, "get", AsyncMock(return_value=PATELS))
    update = AsyncMock()
    monkeypatch.setattr(HouseholdRepository, "update", update)

    response = client.patch("/api/households/item/h1", json={"max_count": 6})

    assert response.status_code == 403
    update.assert_not_awaited()


def test_owner_deletes_household(apply_auth_override, known_records, monkeypatch):
    apply_auth_override(app, COUPLE_CLAIMS)
    monkeypatch.setattr(HouseholdRepository, "get", AsyncMock(return_value=PATELS))
    delete = AsyncMock(return_value=True)
    monkeypatch.setattr(HouseholdRepository, "delete", delete)

    response = client.delete("/api/households/item/h1")

    assert response.status_code == 204
    delete.assert_awaited_once_with("h1")
