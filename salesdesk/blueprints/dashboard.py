"""Dashboard blueprint — /api/*

Read-only views. Everything is recomputed from the store on each request.

Route Map:
  GET  /api/sales                    — Filtered sales table + summary cards
  GET  /api/dashboard/strategic      — Goal, KPIs, funnel, rankings (all sales)
  GET  /api/dashboard/performance    — Seller / period performance
"""

from dataclasses import asdict

from flask import Blueprint, jsonify, request

from salesdesk.services import (
    filter_service,
    goal_service,
    metrics_service,
    sales_service,
    team_service,
)

dashboard_bp = Blueprint("dashboard", __name__, url_prefix="/api")


@dashboard_bp.route("/sales")
def sales_panel():
    """Sales table: filters from the query string, totals over the filtered rows."""
    filters = filter_service.SaleFilters.from_mapping(request.args)
    sales = filter_service.filter_sales(sales_service.list_sales(), filters)
    return jsonify({
        "filters": asdict(filters),
        "totals": metrics_service.dashboard_totals(sales),
        "sales": [s.to_dict() for s in sales],
        # Select options only offer active units / sellers
        "units": [u.to_dict() for u in team_service.list_units(active_only=True)],
        "sellers": [s.to_dict() for s in team_service.list_sellers(active_only=True)],
    })


@dashboard_bp.route("/dashboard/strategic")
def strategic():
    """Strategic dashboard — always computed over every sale, unfiltered."""
    summary = metrics_service.strategic_summary(
        sales_service.list_sales(), goal_service.get_monthly_goal()
    )
    return jsonify(summary)


@dashboard_bp.route("/dashboard/performance")
def performance():
    """Performance view: ?seller=<name>&start=YYYY-MM-DD&end=YYYY-MM-DD, all optional."""
    seller = request.args.get("seller", "").strip()
    start = request.args.get("start", "").strip()
    end = request.args.get("end", "").strip()

    sales = filter_service.filter_by_period(
        sales_service.list_sales(), seller_name=seller, start=start, end=end
    )
    summary = metrics_service.performance_summary(sales)
    summary["sellers"] = [
        s.to_dict() for s in team_service.list_sellers(active_only=True)
    ]
    return jsonify(summary)
