"""
Persistence for vendor leads and their activity log.
"""

from datetime import UTC, datetime

from viah.db.helpers import DatabaseError, build_update, fetch_all, fetch_one
from viah.features.leads.domain import LeadActivity, VendorLead
from viah.features.leads.scoring import LeadScores
from viah.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)


class LeadRepositoryError(DatabaseError):
    """More specific exception for lead persistence failures."""


class LeadRepository:
    LEAD_COLUMNS = """
        id, vendor_id, wedding_id, booking_id, couple_name, couple_email, couple_phone,
        source_type, status, priority, event_date, estimated_budget, guest_count, notes,
        urgency_score, budget_fit_score, engagement_score, qualification_score, overall_score,
        next_follow_up_at, last_contacted_at, created_at, updated_at
    """

    @classmethod
    def _row_to_lead(cls, row: dict | None) -> VendorLead | None:
        return VendorLead.model_validate(row) if row else None

    @classmethod
    async def get(cls, vendor_id: str, lead_id: str) -> VendorLead | None:
        query = f"SELECT {cls.LEAD_COLUMNS} FROM vendor_leads WHERE id = %s AND vendor_id = %s"
        return cls._row_to_lead(await fetch_one(query, (lead_id, vendor_id)))

    @classmethod
    async def list_for_vendor(cls, vendor_id: str) -> list[VendorLead]:
        query = f"""
            SELECT {cls.LEAD_COLUMNS}
            FROM vendor_leads
            WHERE vendor_id = %s
            ORDER BY overall_score DESC, created_at DESC
        """
        return [cls._row_to_lead(row) for row in await fetch_all(query, (vendor_id,))]

    @classmethod
    async def create(cls, vendor_id: str, fields: dict, scores: LeadScores) -> VendorLead:
        values = {
            "vendor_id": vendor_id,
            **fields,
            "priority": scores.priority,
            "urgency_score": scores.urgency_score,
            "budget_fit_score": scores.budget_fit_score,
            "engagement_score": scores.engagement_score,
            "qualification_score": scores.qualification_score,
            "overall_score": scores.overall_score,
        }
        columns = ", ".join(values)
        placeholders = ", ".join(["%s"] * len(values))
        query = f"""
            INSERT INTO vendor_leads ({columns})
            VALUES ({placeholders})
            RETURNING {cls.LEAD_COLUMNS}
        """
        row = await fetch_one(query, tuple(values.values()))
        if not row:
            raise LeadRepositoryError("Failed to create lead", operation="create_lead")

        lead = cls._row_to_lead(row)
        logger.info(
            "Lead created",
            lead_id=lead.id,
            vendor_id=vendor_id,
            source_type=lead.source_type,
            overall_score=lead.overall_score,
        )
        return lead

    @classmethod
    async def update(cls, vendor_id: str, lead_id: str, values: dict) -> VendorLead | None:
        if not values:
            return await cls.get(vendor_id, lead_id)
        query, params = build_update(
            "vendor_leads",
            {**values, "updated_at": datetime.now(UTC)},
            {"id": lead_id, "vendor_id": vendor_id},
            cls.LEAD_COLUMNS,
        )
        return cls._row_to_lead(await fetch_one(query, params))


class LeadActivityRepository:
    ACTIVITY_COLUMNS = "id, lead_id, activity_type, description, performed_by, created_at"

    @classmethod
    async def list_for_lead(cls, lead_id: str) -> list[LeadActivity]:
        query = f"""
            SELECT {cls.ACTIVITY_COLUMNS}
            FROM lead_activity_log
            WHERE lead_id = %s
            ORDER BY created_at DESC
        """
        return [LeadActivity.model_validate(row) for row in await fetch_all(query, (lead_id,))]

    @classmethod
    async def create(
        cls, lead_id: str, activity_type: str, description: str, performed_by: str | None
    ) -> LeadActivity:
        query = f"""
            INSERT INTO lead_activity_log (lead_id, activity_type, description, performed_by)
            VALUES (%s, %s, %s, %s)
            RETURNING {cls.ACTIVITY_COLUMNS}
        """
        row = await fetch_one(query, (lead_id, activity_type, description, performed_by))
        if not row:
            raise LeadRepositoryError("Failed to log lead activity", operation="create_activity")
        return LeadActivity.model_validate(row)
