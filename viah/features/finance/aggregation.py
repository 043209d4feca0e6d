"""
Financial dashboard aggregations.

Every function here is a pure derivation over records that were already
loaded: no I/O, no clock reads (callers pass `now`). Naive datetimes are
treated as UTC.
"""

import calendar
import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

from viah.features.finance.domain import BudgetCategory, Contract, Expense, parse_milestones

__all__ = [
    "BudgetAlert",
    "BudgetOverview",
    "CategorySpending",
    "FinancialSummary",
    "ProjectionPoint",
    "SpendingForecast",
    "TrendPoint",
    "UpcomingPayment",
    "budget_overview",
    "build_alerts",
    "build_financial_summary",
    "expenses_for_category",
    "parse_milestones",
    "recent_expenses",
    "spending_by_category",
    "spending_forecast",
    "spending_trend",
    "total_spent",
    "upcoming_payments",
]

OVERALL_DANGER_PERCENT = 100
OVERALL_WARNING_PERCENT = 90
CATEGORY_DANGER_PERCENT = 100
CATEGORY_WARNING_PERCENT = 80
URGENT_WITHIN_DAYS = 7
RECENT_EXPENSES_LIMIT = 5
UPCOMING_PAYMENTS_LIMIT = 5
DAYS_PER_MONTH = 30
DEFAULT_MONTHS_UNTIL_WEDDING = 6

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


@dataclass(slots=True)
class BudgetOverview:
    total_budget: float
    total_spent: float
    remaining: float
    percent_used: float
    is_over_budget: bool


@dataclass(slots=True)
class BudgetAlert:
    id: str
    type: str  # "danger" | "warning" | "info"
    title: str
    message: str
    category_id: str | None = None


@dataclass(slots=True)
class CategorySpending:
    category_id: str
    name: str
    spent: float
    allocated: float
    percent_used: float


@dataclass(slots=True)
class TrendPoint:
    month: str  # YYYY-MM
    label: str
    spending: float
    cumulative: float


@dataclass(slots=True)
class UpcomingPayment:
    contract_id: str
    vendor_id: str
    vendor_name: str
    milestone_name: str
    amount: float
    due_date: datetime
    status: str
    days_until: int
    is_urgent: bool


@dataclass(slots=True)
class ProjectionPoint:
    month: str
    label: str
    projected: float
    budget: float


@dataclass(slots=True)
class SpendingForecast:
    total_committed: float
    total_paid: float
    outstanding: float
    avg_monthly_spend: float
    months_until_wedding: int
    projected_total: float
    projected_over_budget: float
    projection: list[ProjectionPoint] = field(default_factory=list)


@dataclass(slots=True)
class FinancialSummary:
    overview: BudgetOverview
    alerts: list[BudgetAlert]
    spending_by_category: list[CategorySpending]
    spending_trend: list[TrendPoint]
    recent_expenses: list[Expense]
    upcoming_payments: list[UpcomingPayment]
    forecast: SpendingForecast


def _as_utc(value: datetime) -> datetime:
    return value.replace(tzinfo=UTC) if value.tzinfo is None else value


def _percent(part: float, whole: float) -> float:
    """part as a percentage of whole; 0 when whole is not positive."""
    if whole <= 0:
        return 0.0
    return part * 100 / whole


def total_spent(expenses: Iterable[Expense]) -> float:
    return sum(expense.amount for expense in expenses)


def budget_overview(total_budget: float | None, spent: float) -> BudgetOverview:
    budget = total_budget or 0.0
    remaining = budget - spent
    return BudgetOverview(
        total_budget=budget,
        total_spent=spent,
        remaining=remaining,
        percent_used=_percent(spent, budget),
        is_over_budget=remaining < 0,
    )


def expenses_for_category(category: BudgetCategory, expenses: Iterable[Expense]) -> list[Expense]:
    return [
        expense
        for expense in expenses
        if expense.category_id == category.id or expense.parent_category == category.slug
    ]


def build_alerts(
    total_budget: float | None,
    expenses: list[Expense],
    categories: Iterable[BudgetCategory],
) -> list[BudgetAlert]:
    """
    Threshold alerts: overall budget, then per category, then partial payments.

    Overall and per-category rules each emit at most one alert, danger taking
    precedence over warning.
    """
    alerts: list[BudgetAlert] = []
    budget = total_budget or 0.0
    spent = total_spent(expenses)
    percent_used = _percent(spent, budget)

    if percent_used >= OVERALL_DANGER_PERCENT:
        alerts.append(
            BudgetAlert(
                id="over-budget",
                type="danger",
                title="Over Budget",
                message=f"You've spent ${spent:,.0f} against a ${budget:,.0f} budget "
                f"(${spent - budget:,.0f} over)",
            )
        )
    elif percent_used >= OVERALL_WARNING_PERCENT:
        alerts.append(
            BudgetAlert(
                id="near-budget",
                type="warning",
                title="Approaching Budget Limit",
                message=f"You've used {percent_used:.0f}% of your total budget",
            )
        )

    for category in categories:
        category_spent = total_spent(expenses_for_category(category, expenses))
        category_percent = _percent(category_spent, category.allocated_amount)
        if category_percent >= CATEGORY_DANGER_PERCENT:
            alerts.append(
                BudgetAlert(
                    id=f"cat-over-{category.id}",
                    type="danger",
                    title=f"{category.display_name} Over Budget",
                    message=f"Spent ${category_spent:,.0f} of ${category.allocated_amount:,.0f} allocated",
                    category_id=category.id,
                )
            )
        elif category_percent >= CATEGORY_WARNING_PERCENT:
            alerts.append(
                BudgetAlert(
                    id=f"cat-warn-{category.id}",
                    type="warning",
                    title=f"{category.display_name} at {category_percent:.0f}%",
                    message=f"${category.allocated_amount - category_spent:,.0f} remaining in this category",
                    category_id=category.id,
                )
            )

    partial = [expense for expense in expenses if expense.payment_status == "partial"]
    if partial:
        owed = sum(expense.amount - expense.amount_paid for expense in partial)
        alerts.append(
            BudgetAlert(
                id="partial-payments",
                type="info",
                title=f"{len(partial)} Partial Payments",
                message=f"${owed:,.0f} still owed across partially paid expenses",
            )
        )

    return alerts


def spending_by_category(
    categories: Iterable[BudgetCategory], expenses: list[Expense]
) -> list[CategorySpending]:
    """Spent vs allocated per category, omitting categories with no spend."""
    result = []
    for category in categories:
        spent = total_spent(expenses_for_category(category, expenses))
        if spent <= 0:
            continue
        result.append(
            CategorySpending(
                category_id=category.id,
                name=category.display_name,
                spent=spent,
                allocated=category.allocated_amount,
                percent_used=_percent(spent, category.allocated_amount),
            )
        )
    return result


def spending_trend(expenses: Iterable[Expense]) -> list[TrendPoint]:
    """Monthly spend with a running cumulative total, oldest month first."""
    monthly: dict[str, float] = {}
    for expense in expenses:
        when = expense.expense_date or expense.created_at
        if when is None:
            continue
        key = f"{when.year:04d}-{when.month:02d}"
        monthly[key] = monthly.get(key, 0.0) + expense.amount

    points = []
    cumulative = 0.0
    for key in sorted(monthly):
        cumulative += monthly[key]
        month_number = int(key[5:])
        points.append(
            TrendPoint(
                month=key,
                label=calendar.month_abbr[month_number],
                spending=monthly[key],
                cumulative=cumulative,
            )
        )
    return points


def recent_expenses(expenses: Iterable[Expense], limit: int = RECENT_EXPENSES_LIMIT) -> list[Expense]:
    def sort_key(expense: Expense) -> datetime:
        when = expense.created_at or expense.expense_date
        return _as_utc(when) if when else _EPOCH

    return sorted(expenses, key=sort_key, reverse=True)[:limit]


def upcoming_payments(
    contracts: Iterable[Contract],
    vendor_names: Mapping[str, str],
    now: datetime,
    limit: int = UPCOMING_PAYMENTS_LIMIT,
) -> list[UpcomingPayment]:
    """Nearest unpaid milestones due from now on, soonest first."""
    now = _as_utc(now)
    payments = []
    for contract in contracts:
        for milestone in contract.payment_milestones:
            if milestone.due_date is None or milestone.status == "paid":
                continue
            due = _as_utc(milestone.due_date)
            if due < now:
                continue
            days_until = math.ceil((due - now) / timedelta(days=1))
            payments.append(
                UpcomingPayment(
                    contract_id=contract.id,
                    vendor_id=contract.vendor_id,
                    vendor_name=vendor_names.get(contract.vendor_id, "Vendor"),
                    milestone_name=milestone.name,
                    amount=milestone.amount,
                    due_date=due,
                    status=milestone.status,
                    days_until=days_until,
                    is_urgent=days_until <= URGENT_WITHIN_DAYS,
                )
            )

    payments.sort(key=lambda payment: payment.due_date)
    return payments[:limit]


def _add_months(moment: datetime, months: int) -> tuple[int, int]:
    index = moment.year * 12 + (moment.month - 1) + months
    return index // 12, index % 12 + 1


def spending_forecast(
    total_budget: float | None,
    expenses: list[Expense],
    wedding_date: datetime | None,
    now: datetime,
) -> SpendingForecast:
    """
    Straight-line projection of paid spend to the wedding date.

    Months are 30-day periods. Months until the wedding and months elapsed
    since the first expense are both at least 1; with no wedding date the
    horizon defaults to six months.
    """
    now = _as_utc(now)
    budget = total_budget or 0.0
    committed = sum(expense.amount for expense in expenses)
    paid = sum(expense.amount_paid for expense in expenses)
    month = timedelta(days=DAYS_PER_MONTH)

    if wedding_date:
        months_until = max(1, math.ceil((_as_utc(wedding_date) - now) / month))
    else:
        months_until = DEFAULT_MONTHS_UNTIL_WEDDING

    first_expense = min(
        (_as_utc(expense.created_at) for expense in expenses if expense.created_at),
        default=now,
    )
    months_elapsed = max(1, math.ceil((now - first_expense) / month))
    avg_monthly = paid / months_elapsed
    projected = paid + avg_monthly * months_until

    projection = []
    running = paid
    for offset in range(months_until + 1):
        year, month_number = _add_months(now, offset)
        projection.append(
            ProjectionPoint(
                month=f"{year:04d}-{month_number:02d}",
                label=f"{calendar.month_abbr[month_number]} {year % 100:02d}",
                projected=round(running),
                budget=budget,
            )
        )
        running += avg_monthly

    return SpendingForecast(
        total_committed=committed,
        total_paid=paid,
        outstanding=committed - paid,
        avg_monthly_spend=avg_monthly,
        months_until_wedding=months_until,
        projected_total=projected,
        projected_over_budget=max(0.0, projected - budget) if budget > 0 else 0.0,
        projection=projection,
    )


def build_financial_summary(
    *,
    total_budget: float | None,
    wedding_date: datetime | None,
    categories: list[BudgetCategory],
    expenses: list[Expense],
    contracts: list[Contract],
    vendor_names: Mapping[str, str],
    now: datetime,
) -> FinancialSummary:
    spent = total_spent(expenses)
    return FinancialSummary(
        overview=budget_overview(total_budget, spent),
        alerts=build_alerts(total_budget, expenses, categories),
        spending_by_category=spending_by_category(categories, expenses),
        spending_trend=spending_trend(expenses),
        recent_expenses=recent_expenses(expenses),
        upcoming_payments=upcoming_payments(contracts, vendor_names, now),
        forecast=spending_forecast(total_budget, expenses, wedding_date, now),
    )
