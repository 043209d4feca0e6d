"""
Domain subpackage for vendor leads.
"""

from .models import (
    CLOSED_LEAD_STATUSES,
    LEAD_PRIORITIES,
    LEAD_STATUSES,
    ActivityCreate,
    LeadActivity,
    LeadCreate,
    LeadPriority,
    LeadStatus,
    LeadUpdate,
    VendorLead,
)

__all__ = [
    "ActivityCreate",
    "CLOSED_LEAD_STATUSES",
    "LEAD_PRIORITIES",
    "LEAD_STATUSES",
    "LeadActivity",
    "LeadCreate",
    "LeadPriority",
    "LeadStatus",
    "LeadUpdate",
    "VendorLead",
]
