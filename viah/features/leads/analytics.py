"""
Lead pipeline analytics and list filtering, computed over already-loaded leads.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime

from viah.features.leads.domain import (
    CLOSED_LEAD_STATUSES,
    LEAD_PRIORITIES,
    LEAD_STATUSES,
    VendorLead,
)


@dataclass(slots=True)
class LeadAnalytics:
    total: int = 0
    by_status: dict[str, int] = field(default_factory=dict)
    by_priority: dict[str, int] = field(default_factory=dict)
    conversion_rate: float = 0.0
    avg_score: float = 0.0
    needs_follow_up: int = 0


def _as_utc(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=UTC)


def needs_follow_up(lead: VendorLead, now: datetime) -> bool:
    if lead.status in CLOSED_LEAD_STATUSES or lead.next_follow_up_at is None:
        return False
    return _as_utc(lead.next_follow_up_at) <= now


def lead_analytics(leads: Iterable[VendorLead], now: datetime | None = None) -> LeadAnalytics:
    """Every status and priority appears in the breakdowns, zero when absent."""
    now = now or datetime.now(UTC)
    leads = list(leads)
    analytics = LeadAnalytics(
        total=len(leads),
        by_status=dict.fromkeys(LEAD_STATUSES, 0),
        by_priority=dict.fromkeys(LEAD_PRIORITIES, 0),
    )
    if not leads:
        return analytics

    for lead in leads:
        analytics.by_status[lead.status] += 1
        analytics.by_priority[lead.priority] += 1
        if needs_follow_up(lead, now):
            analytics.needs_follow_up += 1

    analytics.conversion_rate = round(analytics.by_status["won"] * 100 / len(leads), 1)
    analytics.avg_score = round(sum(lead.overall_score for lead in leads) / len(leads), 1)
    return analytics


def filter_leads(
    leads: Iterable[VendorLead],
    *,
    status: str | None = None,
    priority: str | None = None,
    query: str | None = None,
) -> list[VendorLead]:
    """'all' or None disables a filter; query matches couple name or email."""
    needle = (query or "").strip().lower()
    result = []
    for lead in leads:
        if status and status != "all" and lead.status != status:
            continue
        if priority and priority != "all" and lead.priority != priority:
            continue
        if needle and needle not in lead.couple_name.lower() and needle not in (lead.couple_email or "").lower():
            continue
        result.append(lead)
    return result
