from viah.features.vendors.domain import Vendor, VendorSubmission
from viah.features.vendors.duplicates import (
    find_duplicate_vendors,
    normalize_phone,
    string_similarity,
)


def _vendor(vendor_id: str, name: str, city: str = "Edison", **overrides) -> Vendor:
    return Vendor(id=vendor_id, name=name, city=city, categories=["catering"], **overrides)


def _submission(name: str, city: str = "Edison", **overrides) -> VendorSubmission:
    return VendorSubmission(name=name, city=city, categories=["catering"], **overrides)


def test_string_similarity_normalises_case_and_spacing():
    assert string_similarity("  Royal   Caterers ", "royal caterers") == 1.0
    assert string_similarity("", "abc") == 0.0
    assert 0.8 <= string_similarity("Royal Caterers", "Royal Caterer") < 0.95


def test_normalize_phone_keeps_last_ten_digits():
    assert normalize_phone("+1 (732) 555-0100") == "7325550100"


def test_same_name_same_city_is_duplicate():
    matches = find_duplicate_vendors(_submission("Royal Caterers"), [_vendor("v1", "royal caterers")])

    assert [m.vendor_id for m in matches] == ["v1"]
    assert matches[0].confidence == 0.5


def test_same_name_other_city_is_not_duplicate():
    matches = find_duplicate_vendors(
        _submission("Royal Caterers"), [_vendor("v1", "Royal Caterers", city="Houston")]
    )

    assert matches == []


def test_email_or_phone_match_regardless_of_name():
    existing = [
        _vendor("v1", "Something Else", city="Houston", email="Hello@Royal.com"),
        _vendor("v2", "Another", city="Houston", phone="732-555-0100"),
    ]

    matches = find_duplicate_vendors(
        _submission("Royal Caterers", email="hello@royal.com ", phone="+1 732 555 0100"), existing
    )

    assert [(m.vendor_id, m.confidence) for m in matches] == [("v1", 0.7), ("v2", 0.6)]


def test_confidence_is_capped_at_one():
    existing = [_vendor("v1", "Royal Caterers", email="a@b.com", phone="7325550100")]

    matches = find_duplicate_vendors(
        _submission("Royal Caterers", email="a@b.com", phone="7325550100"), existing
    )

    assert matches[0].confidence == 1.0
    assert len(matches[0].reasons) == 3


def test_similar_name_alone_stays_below_threshold():
    matches = find_duplicate_vendors(_submission("Royal Caterers"), [_vendor("v1", "Royal Caterer")])

    assert matches == []
