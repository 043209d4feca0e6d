import json

from viah.features.finance.domain import Contract, PaymentMilestone, parse_milestones


def test_parse_accepts_json_string():
    raw = json.dumps([{"name": "Deposit", "amount": 500}])

    assert parse_milestones(raw) == [{"name": "Deposit", "amount": 500}]


def test_parse_accepts_list_and_drops_non_objects():
    assert parse_milestones([{"name": "A"}, "junk", 3]) == [{"name": "A"}]


def test_parse_malformed_json_is_empty():
    assert parse_milestones("[{not json") == []


def test_parse_undecodable_bytes_are_empty():
    assert parse_milestones(b"\xff") == []


def test_contract_with_undecodable_milestones_has_none():
    assert _contract(b"\xff\xfe").payment_milestones == []


def test_parse_other_shapes_are_empty():
    assert parse_milestones(None) == []
    assert parse_milestones({"name": "A"}) == []
    assert parse_milestones(42) == []


def _contract(milestones) -> Contract:
    return Contract(id="c1", wedding_id="w1", vendor_id="v1", total_amount=1000, payment_milestones=milestones)


def test_contract_parses_milestones_once_at_the_boundary():
    contract = _contract(json.dumps([{"name": "Deposit", "amount": 250, "dueDate": "2026-05-01T00:00:00Z"}]))

    assert len(contract.payment_milestones) == 1
    milestone = contract.payment_milestones[0]
    assert isinstance(milestone, PaymentMilestone)
    assert milestone.due_date.year == 2026


def test_contract_skips_invalid_milestones():
    contract = _contract([{"name": "Ok", "amount": 10}, {"name": "Bad", "amount": "lots"}])

    assert [m.name for m in contract.payment_milestones] == ["Ok"]


def test_contract_with_broken_json_has_no_milestones():
    assert _contract("oops").payment_milestones == []


def test_contract_accepts_milestone_instances():
    contract = _contract([PaymentMilestone(name="Deposit", amount=100)])

    assert contract.payment_milestones[0].name == "Deposit"
