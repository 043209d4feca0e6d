"""
Loads a wedding's financial records and derives the dashboard views.
"""

import asyncio
from datetime import UTC, datetime

from viah.features.finance.aggregation import FinancialSummary, build_financial_summary
from viah.features.finance.repository import (
    BudgetCategoryRepository,
    ContractRepository,
    ExpenseRepository,
)
from viah.features.planning.domain import Wedding
from viah.features.vendors.repository import VendorRepository
from viah.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)


async def get_financial_summary(wedding: Wedding, now: datetime | None = None) -> FinancialSummary:
    categories, expenses, contracts = await asyncio.gather(
        BudgetCategoryRepository.list_for_wedding(wedding.id),
        ExpenseRepository.list_for_wedding(wedding.id),
        ContractRepository.list_for_wedding(wedding.id),
    )
    vendors = await VendorRepository.get_many(sorted({c.vendor_id for c in contracts}))

    summary = build_financial_summary(
        total_budget=wedding.total_budget,
        wedding_date=wedding.wedding_date,
        categories=categories,
        expenses=expenses,
        contracts=contracts,
        vendor_names={vendor_id: vendor.name for vendor_id, vendor in vendors.items()},
        now=now or datetime.now(UTC),
    )

    logger.info(
        "Financial summary built",
        wedding_id=wedding.id,
        expenses=len(expenses),
        contracts=len(contracts),
        alerts=len(summary.alerts),
        percent_used=round(summary.overview.percent_used, 1),
    )
    return summary
