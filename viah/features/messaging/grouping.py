"""
Vendor grouping, auto-expansion and initial selection for the inbox.

Pure functions over already-loaded conversations; used by the grouped
conversations endpoint and by viah.client's MessagesController.
"""

from collections.abc import Iterable

from viah.features.messaging.domain import Conversation, VendorGroup


def group_conversations(conversations: Iterable[Conversation]) -> list[VendorGroup]:
    """
    Fold conversations into one group per vendor, highest unread first.

    Within a group conversations keep their input order. Groups with equal
    unread totals keep the order in which their vendor first appeared
    (sorted() is stable), so the output is deterministic for a given input.
    """
    groups: dict[str, VendorGroup] = {}
    for conversation in conversations:
        group = groups.get(conversation.vendor_id)
        if group is None:
            group = VendorGroup(
                vendor_id=conversation.vendor_id,
                vendor_name=conversation.vendor_name,
                vendor_category=conversation.vendor_category,
            )
            groups[conversation.vendor_id] = group
        group.events.append(conversation)
        group.total_unread += conversation.unread_count

    return sorted(groups.values(), key=lambda group: group.total_unread, reverse=True)


def auto_expand(groups: Iterable[VendorGroup], expanded: set[str] | None = None) -> set[str]:
    """
    Add every multi-conversation group with unread messages to the expanded set.

    Returns the same set (mutated in place) so repeated calls are no-ops.
    """
    expanded = set() if expanded is None else expanded
    for group in groups:
        if len(group.events) > 1 and group.total_unread > 0:
            expanded.add(group.vendor_id)
    return expanded


def pick_initial_conversation(groups: list[VendorGroup]) -> Conversation | None:
    """First group's first unread conversation, else its first conversation."""
    if not groups or not groups[0].events:
        return None

    first = groups[0]
    for conversation in first.events:
        if conversation.unread_count > 0:
            return conversation
    return first.events[0]
