from viah.features.messaging.domain import Conversation
from viah.features.messaging.grouping import (
    auto_expand,
    group_conversations,
    pick_initial_conversation,
)


def _conversation(vendor_id: str, unread: int, event_id: str | None = None) -> Conversation:
    suffix = f"-event-{event_id}" if event_id else ""
    return Conversation(
        conversation_id=f"w1-vendor-{vendor_id}{suffix}",
        wedding_id="w1",
        vendor_id=vendor_id,
        event_id=event_id,
        vendor_name=f"Vendor {vendor_id}",
        unread_count=unread,
    )


def test_groups_by_vendor_and_sorts_by_unread():
    a_mehndi = _conversation("A", 3, "mehndi")
    b = _conversation("B", 5)
    a_sangeet = _conversation("A", 0, "sangeet")

    groups = group_conversations([a_mehndi, b, a_sangeet])

    assert [g.vendor_id for g in groups] == ["B", "A"]
    assert [g.total_unread for g in groups] == [5, 3]
    assert groups[1].events == [a_mehndi, a_sangeet]


def test_group_totals_match_input_unread_sum():
    conversations = [
        _conversation("A", 1, "e1"),
        _conversation("B", 4),
        _conversation("C", 0),
        _conversation("A", 2, "e2"),
        _conversation("C", 7, "e3"),
    ]

    groups = group_conversations(conversations)

    assert sum(g.total_unread for g in groups) == sum(c.unread_count for c in conversations)
    totals = [g.total_unread for g in groups]
    assert totals == sorted(totals, reverse=True)
    for group in groups:
        assert group.total_unread == sum(c.unread_count for c in group.events)


def test_ties_keep_first_appearance_order():
    conversations = [
        _conversation("C", 2),
        _conversation("A", 1),
        _conversation("B", 2),
        _conversation("A", 1, "e1"),
        _conversation("D", 0),
    ]

    groups = group_conversations(conversations)

    assert [g.vendor_id for g in groups] == ["C", "A", "B", "D"]


def test_empty_input_gives_no_groups():
    assert group_conversations([]) == []
    assert pick_initial_conversation([]) is None


def test_auto_expand_only_multi_conversation_groups_with_unread():
    groups = group_conversations(
        [
            _conversation("A", 1, "e1"),
            _conversation("A", 0, "e2"),
            _conversation("B", 3),
            _conversation("C", 0, "e1"),
            _conversation("C", 0, "e2"),
        ]
    )

    expanded = auto_expand(groups)

    assert expanded == {"A"}


def test_auto_expand_is_idempotent():
    groups = group_conversations([_conversation("A", 1, "e1"), _conversation("A", 1, "e2")])
    expanded = {"Z"}

    first = auto_expand(groups, expanded)
    second = auto_expand(groups, expanded)

    assert first is expanded
    assert second == {"A", "Z"}


def test_initial_conversation_prefers_first_unread_in_top_group():
    read = _conversation("A", 0, "e1")
    unread = _conversation("A", 2, "e2")
    groups = group_conversations([read, unread, _conversation("B", 1)])

    assert pick_initial_conversation(groups) == unread


def test_initial_conversation_falls_back_to_first():
    first = _conversation("A", 0, "e1")
    groups = group_conversations([first, _conversation("A", 0, "e2")])

    assert pick_initial_conversation(groups) == first
