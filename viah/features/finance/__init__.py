"""
Budget categories, expenses, contracts and the aggregations behind the
financial dashboard.
"""

from .aggregation import FinancialSummary, build_financial_summary  # noqa: F401
