"""
Lead service - scoring on creation, status changes with an activity trail,
and pipeline analytics.
"""

from datetime import UTC, datetime

from viah.features.leads.analytics import LeadAnalytics, filter_leads, lead_analytics
from viah.features.leads.domain import ActivityCreate, LeadActivity, LeadCreate, LeadUpdate, VendorLead
from viah.features.leads.repository import LeadActivityRepository, LeadRepository
from viah.features.leads.scoring import score_lead
from viah.features.planning.domain import Wedding
from viah.features.vendors.domain import Booking
from viah.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)


class LeadServiceError(Exception):
    code = "lead_error"


class LeadNotFoundError(LeadServiceError):
    code = "lead_not_found"


async def list_leads(
    vendor_id: str,
    *,
    status: str | None = None,
    priority: str | None = None,
    query: str | None = None,
) -> list[VendorLead]:
    leads = await LeadRepository.list_for_vendor(vendor_id)
    return filter_leads(leads, status=status, priority=priority, query=query)


async def get_analytics(vendor_id: str, now: datetime | None = None) -> LeadAnalytics:
    return lead_analytics(await LeadRepository.list_for_vendor(vendor_id), now=now)


async def get_lead(vendor_id: str, lead_id: str) -> tuple[VendorLead, list[LeadActivity]]:
    lead = await LeadRepository.get(vendor_id, lead_id)
    if not lead:
        raise LeadNotFoundError("Lead not found")
    return lead, await LeadActivityRepository.list_for_lead(lead_id)


async def create_manual_lead(vendor_id: str, payload: LeadCreate, user_id: str) -> VendorLead:
    scores = score_lead(
        event_date=payload.event_date,
        estimated_budget=payload.estimated_budget,
        guest_count=payload.guest_count,
        city=payload.city,
        tradition=payload.tradition,
    )
    fields = payload.model_dump(exclude={"city", "tradition"}, exclude_none=True)
    lead = await LeadRepository.create(vendor_id, fields, scores)
    await LeadActivityRepository.create(lead.id, "created", "Lead added manually", user_id)
    return lead


async def create_booking_lead(*, vendor_id: str, wedding: Wedding, booking: Booking) -> VendorLead:
    """Every booking request becomes a scored lead in the vendor's pipeline."""
    scores = score_lead(
        event_date=wedding.wedding_date,
        estimated_budget=wedding.total_budget,
        guest_count=wedding.guest_count_estimate,
        city=wedding.location,
        tradition=wedding.tradition,
    )
    fields = {
        "wedding_id": wedding.id,
        "booking_id": booking.id,
        "couple_name": wedding.couple_name,
        "couple_email": wedding.couple_email,
        "source_type": "booking_request",
        "event_date": wedding.wedding_date,
        "estimated_budget": wedding.total_budget,
        "guest_count": wedding.guest_count_estimate,
        "notes": booking.couple_notes,
    }
    lead = await LeadRepository.create(vendor_id, fields, scores)
    await LeadActivityRepository.create(
        lead.id, "created", "Lead created from booking request", wedding.user_id
    )
    return lead


async def update_lead(
    vendor_id: str, lead_id: str, payload: LeadUpdate, user_id: str
) -> VendorLead:
    current = await LeadRepository.get(vendor_id, lead_id)
    if not current:
        raise LeadNotFoundError("Lead not found")

    values = payload.model_dump(exclude_unset=True)
    status_changed = "status" in values and values["status"] != current.status
    if status_changed and values["status"] == "contacted":
        values["last_contacted_at"] = datetime.now(UTC)

    lead = await LeadRepository.update(vendor_id, lead_id, values)
    if not lead:
        raise LeadNotFoundError("Lead not found")

    if status_changed:
        await LeadActivityRepository.create(
            lead_id,
            "status_change",
            f"Status changed from {current.status} to {lead.status}",
            user_id,
        )
        logger.info(
            "Lead status changed",
            lead_id=lead_id,
            vendor_id=vendor_id,
            old_status=current.status,
            new_status=lead.status,
        )
    return lead


async def add_activity(
    vendor_id: str, lead_id: str, payload: ActivityCreate, user_id: str
) -> LeadActivity:
    if not await LeadRepository.get(vendor_id, lead_id):
        raise LeadNotFoundError("Lead not found")
    return await LeadActivityRepository.create(
        lead_id, payload.activity_type, payload.description, user_id
    )
