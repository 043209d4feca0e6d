from unittest.mock import AsyncMock

import pytest

from viah.features.planning.domain import Wedding
from viah.features.planning.repository import WeddingRepository
from viah.features.vendors.domain import Vendor
from viah.features.vendors.repository import VendorRepository


@pytest.fixture
def wedding() -> Wedding:
    return Wedding(
        id="w1",
        user_id="user-123",
        tradition="hindu",
        location="Edison",
        partner1_name="Priya",
        partner2_name="Arjun",
        total_budget=60000,
    )


@pytest.fixture
def vendor() -> Vendor:
    return Vendor(id="v1", user_id="vendor-user", name="Royal Caterers", categories=["catering"], city="Edison")


@pytest.fixture
def known_records(monkeypatch, wedding, vendor):
    """WeddingRepository / VendorRepository lookups return the fixtures above."""
    monkeypatch.setattr(
        WeddingRepository, "get", AsyncMock(side_effect=lambda wedding_id: wedding if wedding_id == "w1" else None)
    )
    monkeypatch.setattr(
        VendorRepository, "get", AsyncMock(side_effect=lambda vendor_id: vendor if vendor_id == "v1" else None)
    )
