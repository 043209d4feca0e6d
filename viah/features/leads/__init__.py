"""
Vendor lead pipeline: scoring, analytics and the lead inbox.
"""

from .analytics import LeadAnalytics, filter_leads, lead_analytics  # noqa: F401
from .scoring import LeadScores, score_lead  # noqa: F401
