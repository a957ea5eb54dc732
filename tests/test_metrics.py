"""Tests for the metrics service and the dashboard endpoints.

Covers:
- Revenue, lost revenue, pipeline value (initial value fallback)
- Conversion rate and average ticket, including empty inputs
- Monthly goal progress and colour bands
- Funnel, category and unit rankings
- Performance timeseries, top products, close rate
- /api/dashboard/strategic and /api/dashboard/performance
"""

from datetime import date, datetime, timezone

import pytest

from salesdesk.services import metrics_service as m


TODAY = date(2025, 6, 20)


# ─── KPIs ──────────────────────────────────────────────────

class TestRevenueKpis:
    def test_total_and_lost_revenue(self, make_sale):
        sales = [
            make_sale(status="Closed", sale_value=1000.0),
            make_sale(status="Closed", sale_value=500.0),
            make_sale(status="Lost", sale_value=300.0),
            make_sale(status="Active", sale_value=9999.0),
        ]
        assert m.total_revenue(sales) == 1500.0
        assert m.lost_revenue(sales) == 300.0

    def test_pipeline_value_falls_back_to_initial(self, make_sale):
        sales = [
            make_sale(status="Active", sale_value=0.0, initial_value=1200.0),
            make_sale(status="Active", sale_value=800.0, initial_value=100.0),
            make_sale(status="Closed", sale_value=5000.0),
        ]
        assert m.pipeline_value(sales) == 2000.0

    def test_conversion_rate(self, make_sale):
        sales = [
            make_sale(status="Closed"),
            make_sale(status="Closed"),
            make_sale(status="Closed"),
            make_sale(status="Lost"),
            make_sale(status="Active"),
        ]
        assert m.conversion_rate(sales) == 75.0

    def test_conversion_rate_with_nothing_decided(self, make_sale):
        assert m.conversion_rate([]) == 0
        assert m.conversion_rate([make_sale(status="Active")]) == 0

    def test_average_ticket(self, make_sale):
        sales = [
            make_sale(status="Closed", sale_value=1000.0),
            make_sale(status="Closed", sale_value=3000.0),
            make_sale(status="Lost", sale_value=50000.0),
        ]
        assert m.average_ticket(sales) == 2000.0
        assert m.average_ticket([]) == 0

    def test_dashboard_totals(self, make_sale):
        sales = [
            make_sale(customer_name="A", sale_value=10.0, stage="Lead"),
            make_sale(customer_name="A", sale_value=20.0, stage="Closing"),
            make_sale(customer_name="B", sale_value=5.0, stage="Lead"),
        ]
        assert m.dashboard_totals(sales) == {
            "total_value": 35.0,
            "unique_customers": 2,
            "lead_count": 2,
        }


# ─── Goal ──────────────────────────────────────────────────

class TestGoal:
    def test_progress_with_zero_goal(self):
        assert m.goal_progress(5000, 0) == 0

    def test_progress(self):
        assert m.goal_progress(250, 1000) == 25.0

    def test_progress_can_exceed_100(self):
        assert m.goal_progress(3000, 2000) == 150.0

    @pytest.mark.parametrize("progress, band", [
        (120, "achieved"),
        (100, "achieved"),
        (70, "on_track"),
        (69.9, "at_risk"),
        (40, "at_risk"),
        (10, "behind"),
        (0, "behind"),
    ])
    def test_bands(self, progress, band):
        assert m.goal_band(progress) == band

    def test_current_month_revenue_only_counts_this_month(self, make_sale):
        sales = [
            make_sale(status="Closed", sale_value=1000.0, registered_on=date(2025, 6, 2)),
            make_sale(status="Closed", sale_value=400.0, registered_on=date(2025, 5, 31)),
            make_sale(status="Active", sale_value=700.0, registered_on=date(2025, 6, 3)),
        ]
        assert m.current_month_revenue(sales, today=TODAY) == 1000.0

    def test_bar_is_capped(self, make_sale):
        sales = [make_sale(status="Closed", sale_value=3000.0, registered_on=TODAY)]
        summary = m.strategic_summary(sales, 1000.0, today=TODAY)
        assert summary["goal_progress"] == 300.0
        assert summary["goal_bar_pct"] == 100
        assert summary["goal_band"] == "achieved"


# ─── Breakdown and rankings ────────────────────────────────

class TestFunnel:
    def test_counts_values_and_widths(self, make_sale):
        sales = [
            make_sale(stage="Lead", initial_value=100.0),
            make_sale(stage="Lead", sale_value=200.0),
            make_sale(stage="Closing", sale_value=1000.0),
            make_sale(stage="Lost", sale_value=50.0),
        ]
        funnel = {step["stage"]: step for step in m.funnel_breakdown(sales)}

        assert list(funnel) == m.FUNNEL_STAGES
        assert funnel["Lead"]["count"] == 2
        assert funnel["Lead"]["value"] == 300.0
        assert funnel["Lead"]["width_pct"] == 100.0
        assert funnel["Closing"]["width_pct"] == 50.0
        assert funnel["Prospecting"]["width_pct"] == 0

    def test_empty_funnel(self):
        assert all(step["width_pct"] == 0 for step in m.funnel_breakdown([]))


class TestRankings:
    def test_category_ranking(self, make_sale):
        sales = [
            make_sale(category="Product B", status="Active"),
            make_sale(category="Service X", status="Closed"),
            make_sale(category="Service X", status="Closed"),
            make_sale(category="Product A", status="Closed"),
        ]
        ranking = m.category_ranking(sales)
        assert [(r["rank"], r["name"], r["count"]) for r in ranking] == [
            (1, "Service X", 2),
            (2, "Product A", 1),
            (3, "Product B", 0),
        ]

    def test_category_ties_keep_first_seen_order(self, make_sale):
        sales = [
            make_sale(category="Service Y", status="Closed"),
            make_sale(category="Product A", status="Closed"),
        ]
        assert [r["name"] for r in m.category_ranking(sales)] == ["Service Y", "Product A"]

    def test_unit_ranking_share_of_leader(self, make_sale):
        sales = [
            make_sale(unit_name="Curitiba", status="Closed", sale_value=500.0),
            make_sale(unit_name="São Paulo", status="Closed", sale_value=2000.0),
            make_sale(unit_name="Curitiba", status="Lost", sale_value=9000.0),
        ]
        ranking = m.unit_ranking(sales)
        assert ranking[0] == {"name": "São Paulo", "revenue": 2000.0, "rank": 1, "share_pct": 100.0}
        assert ranking[1]["name"] == "Curitiba"
        assert ranking[1]["share_pct"] == 25.0

    def test_unit_ranking_without_revenue(self, make_sale):
        ranking = m.unit_ranking([make_sale(status="Active")])
        assert ranking[0]["share_pct"] == 0
        assert m.unit_ranking([]) == []


# ─── Performance ───────────────────────────────────────────

class TestPerformance:
    def test_timeseries_keeps_days_without_closed_sales(self, make_sale):
        sales = [
            make_sale(registered_on=date(2025, 6, 3), status="Closed", sale_value=400.0),
            make_sale(registered_on=date(2025, 6, 1), status="Active", sale_value=999.0),
            make_sale(registered_on=date(2025, 6, 3), status="Closed", sale_value=400.0),
            make_sale(registered_on=date(2025, 6, 2), status="Closed", sale_value=200.0),
        ]
        series = m.revenue_timeseries(sales)
        assert [(b["date"], b["value"]) for b in series] == [
            ("2025-06-01", 0),
            ("2025-06-02", 200.0),
            ("2025-06-03", 800.0),
        ]
        assert series[2]["height_pct"] == 100.0
        assert series[1]["height_pct"] == 25.0
        assert series[0]["height_pct"] == 0

    def test_top_products(self, make_sale):
        sales = [
            make_sale(category="Product B", status="Closed"),
            make_sale(category="Service X", status="Closed"),
            make_sale(category="Service X", status="Closed"),
            make_sale(category="Product A", status="Lost"),
        ]
        assert m.top_products(sales) == [
            {"name": "Service X", "count": 2},
            {"name": "Product B", "count": 1},
        ]

    def test_summary_close_rate_counts_open_deals(self, make_sale):
        sales = [
            make_sale(status="Closed", sale_value=1000.0),
            make_sale(status="Active"),
            make_sale(status="Active"),
            make_sale(status="Lost"),
        ]
        summary = m.performance_summary(sales)
        assert summary["closed_count"] == 1
        assert summary["closed_value"] == 1000.0
        assert summary["close_rate"] == 25.0
        assert summary["average_ticket"] == 1000.0

    def test_summary_of_nothing(self):
        summary = m.performance_summary([])
        assert summary["close_rate"] == 0
        assert summary["average_ticket"] == 0
        assert summary["timeseries"] == []
        assert summary["top_products"] == []


# ─── Dashboard endpoints ───────────────────────────────────

class TestStrategicEndpoint:
    def test_single_closed_sale_this_month(self, client, add_sale):
        today = datetime.now(timezone.utc).date()
        add_sale(status="Closed", stage="Closing", sale_value=1000.0, registered_on=today)
        client.put("/settings/api/goal", json={"monthly_goal": 2000})

        body = client.get("/api/dashboard/strategic").get_json()
        assert body["total_revenue"] == 1000.0
        assert body["current_month_revenue"] == 1000.0
        assert body["goal_progress"] == 50.0
        assert body["goal_band"] == "at_risk"
        closing = next(step for step in body["funnel"] if step["stage"] == "Closing")
        assert closing["count"] == 1

    def test_default_goal_from_config(self, client, app):
        body = client.get("/api/dashboard/strategic").get_json()
        assert body["monthly_goal"] == app.config["DEFAULT_MONTHLY_GOAL"]
        assert body["goal_progress"] == 0


class TestPerformanceEndpoint:
    def test_filters_by_seller_and_period(self, client, add_sale):
        add_sale(seller_name="Bruno Costa", status="Closed", sale_value=700.0,
                 registered_on=date(2025, 5, 10))
        add_sale(seller_name="Bruno Costa", status="Closed", sale_value=300.0,
                 registered_on=date(2025, 4, 10))
        add_sale(seller_name="Ana Silva", status="Closed", sale_value=5000.0,
                 registered_on=date(2025, 5, 10))

        resp = client.get(
            "/api/dashboard/performance?seller=Bruno Costa&start=2025-05-01&end=2025-05-31"
        )
        body = resp.get_json()
        assert resp.status_code == 200
        assert body["closed_value"] == 700.0
        assert body["closed_count"] == 1
        assert [b["date"] for b in body["timeseries"]] == ["2025-05-10"]

    def test_no_filters_covers_everything(self, client, seed_data):
        body = client.get("/api/dashboard/performance").get_json()
        total = sum(b["value"] for b in body["timeseries"])
        assert total == body["closed_value"]
        assert len(body["sellers"]) == seed_data["seller_count"]
