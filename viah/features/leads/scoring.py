"""
Lead scoring for booking requests and manual leads.

overall = 0.4 * urgency + 0.3 * budget_fit + 0.3 * qualification, halves rounded up
"""

from dataclasses import dataclass
from datetime import UTC, datetime

URGENCY_BANDS = ((30, 100), (90, 85), (180, 70), (365, 50))
BUDGET_BANDS = ((50_000, 100), (30_000, 85), (20_000, 70), (10_000, 50))
NEUTRAL_SCORE = 50
LOW_SCORE = 30
QUALIFICATION_STEP = 25
DEFAULT_ENGAGEMENT = 50


@dataclass(frozen=True, slots=True)
class LeadScores:
    urgency_score: int
    budget_fit_score: int
    qualification_score: int
    engagement_score: int
    overall_score: int
    priority: str


def urgency_score(event_date: datetime | None, now: datetime) -> int:
    if event_date is None:
        return NEUTRAL_SCORE
    if event_date.tzinfo is None:
        event_date = event_date.replace(tzinfo=UTC)
    days_until = (event_date - now).days
    if days_until < 0:
        return 0
    for limit, score in URGENCY_BANDS:
        if days_until <= limit:
            return score
    return LOW_SCORE


def budget_fit_score(estimated_budget: float | None) -> int:
    if not estimated_budget:
        return NEUTRAL_SCORE
    for floor, score in BUDGET_BANDS:
        if estimated_budget >= floor:
            return score
    return LOW_SCORE


def qualification_score(
    *,
    event_date: datetime | None,
    estimated_budget: float | None,
    guest_count: int | None,
    has_location_or_tradition: bool,
) -> int:
    known = [event_date is not None, bool(estimated_budget), bool(guest_count), has_location_or_tradition]
    return QUALIFICATION_STEP * sum(known)


def weighted_overall(urgency: int, budget_fit: int, qualification: int) -> int:
    """Weighted blend in tenths, rounded half up (74.5 scores 75)."""
    tenths = 4 * urgency + 3 * budget_fit + 3 * qualification
    return (tenths + 5) // 10


def priority_for(overall: int) -> str:
    if overall >= 80:
        return "hot"
    if overall >= 60:
        return "warm"
    if overall >= 40:
        return "medium"
    return "cold"


def score_lead(
    *,
    event_date: datetime | None,
    estimated_budget: float | None,
    guest_count: int | None,
    city: str | None = None,
    tradition: str | None = None,
    now: datetime | None = None,
) -> LeadScores:
    now = now or datetime.now(UTC)
    urgency = urgency_score(event_date, now)
    budget_fit = budget_fit_score(estimated_budget)
    qualification = qualification_score(
        event_date=event_date,
        estimated_budget=estimated_budget,
        guest_count=guest_count,
        has_location_or_tradition=bool(city or tradition),
    )
    overall = weighted_overall(urgency, budget_fit, qualification)
    return LeadScores(
        urgency_score=urgency,
        budget_fit_score=budget_fit,
        qualification_score=qualification,
        engagement_score=DEFAULT_ENGAGEMENT,
        overall_score=overall,
        priority=priority_for(overall),
    )
