"""Tests for the filter service.

Covers:
- Empty filters return everything, in order
- Exact match fields (unit, seller, category, source, status, stage)
- Registration date prefix match (year, year-month, day)
- Case-insensitive customer name search
- Building filters from query args
- Performance period filter (seller + inclusive date range)
- /api/sales endpoint wiring
"""

from datetime import date

from salesdesk.models.sale import Sale
from salesdesk.services.filter_service import SaleFilters, filter_by_period, filter_sales


# ─── filter_sales ──────────────────────────────────────────

class TestFilterSales:
    def test_empty_filters_return_all_in_order(self, make_sale):
        sales = [make_sale(customer_name=n) for n in ("C", "A", "B")]
        assert filter_sales(sales, SaleFilters()) == sales
        assert filter_sales(sales) == sales

    def test_empty_filters_return_a_new_list(self, make_sale):
        sales = [make_sale()]
        result = filter_sales(sales, SaleFilters())
        assert result == sales
        assert result is not sales

    def test_category_match_and_mismatch(self, make_sale):
        sale = make_sale(category="Service X")
        assert filter_sales([sale], SaleFilters(category="Service X")) == [sale]
        for other in Sale.CATEGORIES:
            if other != "Service X":
                assert filter_sales([sale], SaleFilters(category=other)) == []

    def test_exact_fields(self, make_sale):
        target = make_sale(
            unit_name="Curitiba", seller_name="Eduardo Lima", source="Referral",
            status="Closed", stage="Closing",
        )
        other = make_sale()
        sales = [other, target]

        assert filter_sales(sales, SaleFilters(unit_name="Curitiba")) == [target]
        assert filter_sales(sales, SaleFilters(seller_name="Eduardo Lima")) == [target]
        assert filter_sales(sales, SaleFilters(source="Referral")) == [target]
        assert filter_sales(sales, SaleFilters(status="Closed")) == [target]
        assert filter_sales(sales, SaleFilters(stage="Closing")) == [target]

    def test_exact_match_is_not_substring(self, make_sale):
        sale = make_sale(unit_name="São Paulo")
        assert filter_sales([sale], SaleFilters(unit_name="São")) == []

    def test_date_prefix_year_and_month(self, make_sale):
        march = make_sale(registered_on=date(2025, 3, 14))
        april = make_sale(registered_on=date(2025, 4, 1))
        last_year = make_sale(registered_on=date(2024, 3, 14))
        sales = [march, april, last_year]

        assert filter_sales(sales, SaleFilters(registered_on="2025")) == [march, april]
        assert filter_sales(sales, SaleFilters(registered_on="2025-03")) == [march]
        assert filter_sales(sales, SaleFilters(registered_on="2025-03-14")) == [march]
        assert filter_sales(sales, SaleFilters(registered_on="2026")) == []

    def test_customer_name_case_insensitive_substring(self, make_sale):
        sale = make_sale(customer_name="Fernanda Souza")
        assert filter_sales([sale], SaleFilters(customer_name="souza")) == [sale]
        assert filter_sales([sale], SaleFilters(customer_name="FERN")) == [sale]
        assert filter_sales([sale], SaleFilters(customer_name="Silva")) == []

    def test_criteria_combine_with_and(self, make_sale):
        a = make_sale(unit_name="Curitiba", status="Closed")
        b = make_sale(unit_name="Curitiba", status="Active")
        c = make_sale(unit_name="São Paulo", status="Closed")
        result = filter_sales([a, b, c], SaleFilters(unit_name="Curitiba", status="Closed"))
        assert result == [a]

    def test_no_dedup(self, make_sale):
        sale = make_sale(status="Closed")
        assert filter_sales([sale, sale], SaleFilters(status="Closed")) == [sale, sale]


# ─── SaleFilters.from_mapping ──────────────────────────────

class TestSaleFiltersFromMapping:
    def test_blank_values_are_wildcards(self):
        filters = SaleFilters.from_mapping({"unit_name": "  ", "status": ""})
        assert filters.is_empty()

    def test_unknown_keys_ignored(self):
        filters = SaleFilters.from_mapping({"status": "Closed", "telefone": "123"})
        assert filters.status == "Closed"
        assert not filters.is_empty()

    def test_values_are_stripped(self):
        filters = SaleFilters.from_mapping({"registered_on": " 2025-03 "})
        assert filters.registered_on == "2025-03"


# ─── filter_by_period ──────────────────────────────────────

class TestFilterByPeriod:
    def test_no_bounds_returns_all(self, make_sale):
        sales = [make_sale(), make_sale()]
        assert filter_by_period(sales) == sales

    def test_range_is_inclusive(self, make_sale):
        first = make_sale(registered_on=date(2025, 5, 1))
        middle = make_sale(registered_on=date(2025, 5, 15))
        last = make_sale(registered_on=date(2025, 5, 31))
        outside = make_sale(registered_on=date(2025, 6, 1))
        result = filter_by_period(
            [first, middle, last, outside], start="2025-05-01", end="2025-05-31"
        )
        assert result == [first, middle, last]

    def test_seller_and_open_ended_range(self, make_sale):
        ana = make_sale(seller_name="Ana Silva", registered_on=date(2025, 6, 1))
        bruno = make_sale(seller_name="Bruno Costa", registered_on=date(2025, 6, 1))
        old_ana = make_sale(seller_name="Ana Silva", registered_on=date(2025, 1, 1))
        result = filter_by_period(
            [ana, bruno, old_ana], seller_name="Ana Silva", start="2025-02-01"
        )
        assert result == [ana]


# ─── /api/sales ────────────────────────────────────────────

class TestSalesPanelEndpoint:
    def test_unfiltered_lists_everything(self, client, seed_data):
        resp = client.get("/api/sales")
        assert resp.status_code == 200
        body = resp.get_json()
        assert len(body["sales"]) == seed_data["sale_count"]
        assert body["sales"][0]["customer_name"] == seed_data["first_customer"]
        assert len(body["units"]) == seed_data["unit_count"]

    def test_filter_by_status_and_totals(self, client, add_sale):
        add_sale(status="Closed", sale_value=100.0, customer_name="A")
        add_sale(status="Closed", sale_value=50.0, customer_name="B")
        add_sale(status="Active", sale_value=999.0, customer_name="A")

        resp = client.get("/api/sales?status=Closed")
        body = resp.get_json()
        assert len(body["sales"]) == 2
        assert body["totals"]["total_value"] == 150.0
        assert body["totals"]["unique_customers"] == 2
        assert body["filters"]["status"] == "Closed"

    def test_inactive_units_hidden_from_options(self, client, seed_data):
        client.post("/settings/api/units/1/toggle")
        body = client.get("/api/sales").get_json()
        assert 1 not in [u["id"] for u in body["units"]]
