"""Metrics service — dashboard aggregates.

Every function takes a plain list of sales and recomputes from scratch;
nothing is cached. Values are raw numbers; formatting is up to the caller.
Ratios return 0 when the denominator is 0.
"""

from datetime import datetime, timezone

# Stages drawn in the funnel chart (Lost is not a funnel step).
FUNNEL_STAGES = ["Lead", "Prospecting", "Negotiation", "Closing"]

# (threshold, label) — first match wins
GOAL_BANDS = [
    (100, "achieved"),
    (70, "on_track"),
    (40, "at_risk"),
]


def _ratio_pct(part, whole):
    return (part / whole) * 100 if whole > 0 else 0


def _value(sale):
    return sale.sale_value or 0


def _value_or_initial(sale):
    """Sale value, falling back to the initial value when zero or missing."""
    return sale.sale_value or sale.initial_value or 0


def _date_str(value):
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return value.isoformat()


def _closed(sales):
    return [s for s in sales if s.status == "Closed"]


def _lost(sales):
    return [s for s in sales if s.status == "Lost"]


# ─── Sales panel ─────────────────────────────────────────────────

def dashboard_totals(sales):
    """Cards on top of the sales table."""
    return {
        "total_value": sum(_value(s) for s in sales),
        "unique_customers": len({s.customer_name for s in sales}),
        "lead_count": sum(1 for s in sales if s.stage == "Lead"),
    }


# ─── Strategic KPIs ──────────────────────────────────────────────

def total_revenue(sales):
    return sum(_value(s) for s in _closed(sales))


def lost_revenue(sales):
    return sum(_value(s) for s in _lost(sales))


def pipeline_value(sales):
    """Open potential: Active sales, using initial value when no sale value is set."""
    return sum(_value_or_initial(s) for s in sales if s.status == "Active")


def conversion_rate(sales):
    """Won vs. decided: closed / (closed + lost) * 100."""
    closed = len(_closed(sales))
    lost = len(_lost(sales))
    return _ratio_pct(closed, closed + lost)


def average_ticket(sales):
    closed = _closed(sales)
    if not closed:
        return 0
    return sum(_value(s) for s in closed) / len(closed)


def current_month_revenue(sales, today=None):
    """Closed revenue registered in the current calendar month (UTC)."""
    today = today or datetime.now(timezone.utc).date()
    month_prefix = today.isoformat()[:7]  # YYYY-MM
    return sum(
        _value(s)
        for s in _closed(sales)
        if _date_str(s.registered_on).startswith(month_prefix)
    )


def goal_progress(revenue, monthly_goal):
    """Percent of the monthly goal reached. 0 when no goal is set."""
    if not monthly_goal or monthly_goal <= 0:
        return 0
    return (revenue / monthly_goal) * 100


def goal_band(progress):
    """Colour band for the goal bar: achieved | on_track | at_risk | behind."""
    for threshold, label in GOAL_BANDS:
        if progress >= threshold:
            return label
    return "behind"


def funnel_breakdown(sales):
    """Count and value per forward stage, with bar width relative to the busiest stage."""
    steps = []
    for stage in FUNNEL_STAGES:
        at_stage = [s for s in sales if s.stage == stage]
        steps.append({
            "stage": stage,
            "count": len(at_stage),
            "value": sum(_value_or_initial(s) for s in at_stage),
        })

    max_count = max(step["count"] for step in steps)
    for step in steps:
        step["width_pct"] = _ratio_pct(step["count"], max_count)
    return steps


def _first_seen(values):
    """Distinct values in first-appearance order."""
    return list(dict.fromkeys(values))


def category_ranking(sales):
    """Closed deals per category, busiest first. Rank starts at 1.

    Categories come from every sale in the input (so a category with only
    open deals still appears, with count 0). Ties keep first-seen order.
    """
    closed = _closed(sales)
    rows = [
        {"name": cat, "count": sum(1 for s in closed if s.category == cat)}
        for cat in _first_seen(s.category for s in sales)
    ]
    rows.sort(key=lambda r: r["count"], reverse=True)
    for index, row in enumerate(rows):
        row["rank"] = index + 1
    return rows


def unit_ranking(sales):
    """Closed revenue per unit, highest first, with share of the leader's revenue."""
    closed = _closed(sales)
    rows = [
        {
            "name": unit,
            "revenue": sum(_value(s) for s in closed if s.unit_name == unit),
        }
        for unit in _first_seen(s.unit_name for s in sales)
    ]
    rows.sort(key=lambda r: r["revenue"], reverse=True)

    top = rows[0]["revenue"] if rows else 0
    for index, row in enumerate(rows):
        row["rank"] = index + 1
        row["share_pct"] = _ratio_pct(row["revenue"], top)
    return rows


def strategic_summary(sales, monthly_goal, today=None):
    """Everything the strategic dashboard shows, computed from all sales."""
    month_revenue = current_month_revenue(sales, today=today)
    progress = goal_progress(month_revenue, monthly_goal)
    return {
        "monthly_goal": monthly_goal,
        "current_month_revenue": month_revenue,
        "goal_progress": progress,
        "goal_bar_pct": min(progress, 100),
        "goal_band": goal_band(progress),
        "total_revenue": total_revenue(sales),
        "lost_revenue": lost_revenue(sales),
        "pipeline_value": pipeline_value(sales),
        "conversion_rate": conversion_rate(sales),
        "average_ticket": average_ticket(sales),
        "funnel": funnel_breakdown(sales),
        "categories": category_ranking(sales),
        "units": unit_ranking(sales),
    }


# ─── Performance view ────────────────────────────────────────────

def revenue_timeseries(sales):
    """Bar-chart data: one bucket per registration date, ascending.

    Every date in the input gets a bucket; only Closed sales add to it, so
    a day with nothing closed shows as 0.
    """
    buckets = {}
    for sale in sales:
        day = _date_str(sale.registered_on)
        buckets.setdefault(day, 0)
        if sale.status == "Closed":
            buckets[day] += _value(sale)

    series = [{"date": day, "value": value} for day, value in sorted(buckets.items())]
    max_value = max((b["value"] for b in series), default=0)
    for bucket in series:
        bucket["height_pct"] = _ratio_pct(bucket["value"], max_value)
    return series


def top_products(sales):
    """Closed deals per category, most first."""
    counts = {}
    for sale in _closed(sales):
        counts[sale.category] = counts.get(sale.category, 0) + 1
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [{"name": name, "count": count} for name, count in ranked]


def performance_summary(sales):
    """Seller performance KPIs for an already-filtered list of sales.

    close_rate here is closed deals over *all* deals in the period, unlike
    conversion_rate which ignores deals that are still open.
    """
    closed = _closed(sales)
    closed_value = sum(_value(s) for s in closed)
    return {
        "closed_value": closed_value,
        "closed_count": len(closed),
        "close_rate": _ratio_pct(len(closed), len(sales)),
        "average_ticket": closed_value / len(closed) if closed else 0,
        "timeseries": revenue_timeseries(sales),
        "top_products": top_products(sales),
    }
