from datetime import UTC, datetime, timedelta

from viah.features.finance.aggregation import (
    budget_overview,
    build_alerts,
    build_financial_summary,
    recent_expenses,
    spending_by_category,
    spending_forecast,
    spending_trend,
    upcoming_payments,
)
from viah.features.finance.domain import BudgetCategory, Contract, Expense

NOW = datetime(2026, 3, 15, 12, 0, tzinfo=UTC)


def _expense(amount: float, **overrides) -> Expense:
    data = {
        "id": overrides.pop("id", f"exp-{amount}"),
        "wedding_id": "w1",
        "description": "Expense",
        "amount": amount,
    }
    data.update(overrides)
    return Expense(**data)


def _category(category_id: str, allocated: float, slug: str | None = None) -> BudgetCategory:
    return BudgetCategory(
        id=category_id,
        wedding_id="w1",
        slug=slug or category_id,
        display_name=category_id.title(),
        allocated_amount=allocated,
    )


def _contract(milestones, vendor_id: str = "v1") -> Contract:
    return Contract(
        id=f"c-{vendor_id}",
        wedding_id="w1",
        vendor_id=vendor_id,
        total_amount=10000,
        payment_milestones=milestones,
    )


def test_overview_with_zero_budget_reports_zero_percent():
    overview = budget_overview(0, 2500)

    assert overview.percent_used == 0
    assert overview.remaining == -2500
    assert overview.is_over_budget is True


def test_overview_percent_and_remaining():
    overview = budget_overview(20000, 5000)

    assert overview.percent_used == 25
    assert overview.remaining == 15000
    assert overview.is_over_budget is False


def test_spend_equal_to_budget_is_danger():
    alerts = build_alerts(10000, [_expense(10000)], [])

    assert [(a.id, a.type) for a in alerts] == [("over-budget", "danger")]


def test_exactly_ninety_percent_is_warning_only():
    alerts = build_alerts(10000, [_expense(9000)], [])

    assert [(a.id, a.type) for a in alerts] == [("near-budget", "warning")]
    assert not any(a.type == "danger" for a in alerts)


def test_zero_budget_raises_no_overall_alert():
    assert build_alerts(0, [_expense(500)], []) == []


def test_category_alerts_match_by_id_or_slug():
    venue = _category("venue", 1000)
    decor = _category("decor", 1000)
    expenses = [
        _expense(600, id="e1", category_id="venue"),
        _expense(450, id="e2", parent_category="venue"),
        _expense(800, id="e3", category_id="decor"),
    ]

    alerts = build_alerts(100000, expenses, [venue, decor])

    assert [(a.id, a.type, a.category_id) for a in alerts] == [
        ("cat-over-venue", "danger", "venue"),
        ("cat-warn-decor", "warning", "decor"),
    ]


def test_partial_payments_sum_unpaid_remainder():
    expenses = [
        _expense(1000, id="e1", amount_paid=400, payment_status="partial"),
        _expense(500, id="e2", amount_paid=100, payment_status="partial"),
        _expense(300, id="e3", amount_paid=300, payment_status="paid"),
    ]

    alerts = build_alerts(100000, expenses, [])

    assert len(alerts) == 1
    assert alerts[0].id == "partial-payments"
    assert alerts[0].type == "info"
    assert "$1,000" in alerts[0].message
    assert alerts[0].title.startswith("2 ")


def test_spending_by_category_skips_empty_categories():
    result = spending_by_category(
        [_category("venue", 2000), _category("decor", 500)],
        [_expense(500, category_id="venue")],
    )

    assert [(c.category_id, c.spent, c.percent_used) for c in result] == [("venue", 500, 25)]


def test_trend_buckets_by_month_with_cumulative_total():
    expenses = [
        _expense(100, id="e1", expense_date=datetime(2026, 2, 3, tzinfo=UTC)),
        _expense(50, id="e2", created_at=datetime(2026, 1, 20, tzinfo=UTC)),
        _expense(25, id="e3", expense_date=datetime(2026, 2, 28, tzinfo=UTC)),
        _expense(999, id="e4"),
    ]

    trend = spending_trend(expenses)

    assert [(p.month, p.label, p.spending, p.cumulative) for p in trend] == [
        ("2026-01", "Jan", 50, 50),
        ("2026-02", "Feb", 125, 175),
    ]
    cumulative = [p.cumulative for p in trend]
    assert cumulative == sorted(cumulative)


def test_recent_expenses_newest_first_limited_to_five():
    expenses = [
        _expense(i, id=f"e{i}", created_at=NOW - timedelta(days=i)) for i in range(1, 8)
    ]

    recent = recent_expenses(expenses)

    assert [e.id for e in recent] == ["e1", "e2", "e3", "e4", "e5"]


def test_upcoming_payments_filters_sorts_and_flags_urgent():
    contract = _contract(
        [
            {"name": "Final", "amount": 5000, "dueDate": (NOW + timedelta(days=30)).isoformat()},
            {"name": "Deposit", "amount": 1000, "due_date": (NOW + timedelta(days=3)).isoformat()},
            {"name": "Paid", "amount": 500, "dueDate": (NOW + timedelta(days=1)).isoformat(), "status": "paid"},
            {"name": "Past", "amount": 700, "dueDate": (NOW - timedelta(days=1)).isoformat()},
            {"name": "Undated", "amount": 100},
        ]
    )

    payments = upcoming_payments([contract], {"v1": "Royal Caterers"}, NOW)

    assert [(p.milestone_name, p.days_until, p.is_urgent) for p in payments] == [
        ("Deposit", 3, True),
        ("Final", 30, False),
    ]
    assert payments[0].vendor_name == "Royal Caterers"


def test_upcoming_payments_keeps_nearest_five():
    milestones = [
        {"name": f"M{i}", "amount": 100, "dueDate": (NOW + timedelta(days=i)).isoformat()}
        for i in range(10, 0, -1)
    ]

    payments = upcoming_payments([_contract(milestones)], {}, NOW)

    assert [p.milestone_name for p in payments] == ["M1", "M2", "M3", "M4", "M5"]
    assert payments[0].vendor_name == "Vendor"


def test_forecast_projects_paid_spend_to_wedding():
    expenses = [
        _expense(3000, id="e1", amount_paid=2000, created_at=NOW - timedelta(days=60)),
        _expense(1000, id="e2", amount_paid=1000, created_at=NOW - timedelta(days=10)),
    ]

    forecast = spending_forecast(5000, expenses, NOW + timedelta(days=90), NOW)

    assert forecast.total_committed == 4000
    assert forecast.total_paid == 3000
    assert forecast.outstanding == 1000
    assert forecast.avg_monthly_spend == 1500
    assert forecast.months_until_wedding == 3
    assert forecast.projected_total == 7500
    assert forecast.projected_over_budget == 2500
    assert len(forecast.projection) == 4
    assert forecast.projection[0].projected == 3000


def test_forecast_defaults_without_wedding_date_or_expenses():
    forecast = spending_forecast(None, [], None, NOW)

    assert forecast.months_until_wedding == 6
    assert forecast.projected_total == 0
    assert forecast.projected_over_budget == 0


def test_financial_summary_combines_widgets():
    summary = build_financial_summary(
        total_budget=10000,
        wedding_date=None,
        categories=[_category("venue", 5000)],
        expenses=[_expense(9500, category_id="venue", created_at=NOW)],
        contracts=[],
        vendor_names={},
        now=NOW,
    )

    assert summary.overview.total_spent == 9500
    assert {a.id for a in summary.alerts} == {"near-budget", "cat-over-venue"}
    assert summary.upcoming_payments == []
