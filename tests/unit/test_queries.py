"""
Tests for the report queries, run against the hand-built dataset in conftest.
"""
from datetime import date, datetime
from decimal import Decimal

import pytest
from sqlalchemy import func, select

from sales_reporting.database.models import Customer, SalesOrderDetail, SalesOrderHeader
from sales_reporting.reports import InvalidParameterError, ReportName, ReportService


def rows(result):
    return [tuple(r.values()) for r in result.records()]


class TestSalesOverTime:
    """Yearly and monthly order totals"""

    async def test_orders_in_two_years(self, test_db, report_settings, make_order):
        """Orders of 100 in 2013 and 200 in 2014 yield one row per year, newest first"""
        test_db.add_all([
            make_order(1, datetime(2013, 5, 1), "100"),
            make_order(2, datetime(2014, 6, 1), "200"),
        ])
        await test_db.commit()

        result = await ReportService(test_db, settings=report_settings).run(ReportName.TOTAL_SALES_BY_YEAR)

        assert result.columns == ["sales_year", "total_sales"]
        assert rows(result) == [(2014, 200.0), (2013, 100.0)]

    async def test_yearly_totals_sum_to_grand_total(self, service, retail_db):
        result = await service.run("total-sales-by-year")
        grand_total = await retail_db.scalar(select(func.sum(SalesOrderHeader.total_due)))

        assert rows(result) == [(2014, 340.0), (2013, 100.0)]
        assert sum(r.total_sales for r in result.rows) == pytest.approx(float(grand_total))

    async def test_single_year(self, service):
        result = await service.run("total-sales-by-year", year="2013")

        assert result.parameters.year == 2013
        assert rows(result) == [(2013, 100.0)]

    async def test_monthly_sales_uses_default_year(self, service):
        result = await service.run("monthly-sales")

        assert result.parameters.year == 2014
        assert rows(result) == [(2, 30.0), (6, 310.0)]

    async def test_monthly_sales_for_year(self, service):
        result = await service.run("monthly-sales", year=2013)
        assert rows(result) == [(5, 100.0)]

    async def test_monthly_sales_by_category_counts_order_once_per_category(self, service):
        """Order 3 has two Clothing lines; its total of 50 is counted once"""
        result = await service.run("monthly-sales-by-category", year=2014)

        assert rows(result) == [
            (6, "Bikes", 260.0),
            (6, "Clothing", 250.0),
        ]

    async def test_year_without_orders_is_empty(self, service):
        result = await service.run("monthly-sales", year=2010)

        assert result.row_count == 0
        assert result.rows == []
        assert result.columns == ["month", "total_sales"]


class TestProductHierarchy:
    """Category and subcategory sales"""

    async def test_sales_by_category(self, service):
        result = await service.run("sales-by-category")
        assert rows(result) == [("Bikes", 294.0), ("Clothing", 70.0)]

    async def test_category_without_products_is_absent(self, service):
        result = await service.run("sales-by-category")
        assert "Test" not in [r.category for r in result.rows]

    async def test_product_without_subcategory_is_excluded(self, service):
        """Bearing Ball sold 30 but has no subcategory"""
        result = await service.run("sales-by-subcategory")
        assert rows(result) == [("Road Bikes", 294.0), ("Jerseys", 70.0)]


class TestProducts:
    """Best sellers, discounts, recent sales and inventory"""

    async def test_top_products_breaks_ties_by_product_id(self, service):
        result = await service.run("top-products-by-quantity")

        assert result.parameters.limit == 5
        assert rows(result) == [
            (1, "Road-150", 3),
            (3, "Jersey L", 3),
            (4, "Bearing Ball", 3),
            (2, "Road-250", 1),
            (5, "Jersey M", 1),
        ]

    async def test_top_products_limit(self, service):
        result = await service.run("top-products-by-quantity", limit=2)
        selected = result.rows

        assert [r.product_id for r in selected] == [1, 3]

        # nothing left out sold strictly more than the last returned row
        everything = await service.run("top-products-by-quantity", limit=1000)
        excluded = [r for r in everything.rows if r.product_id not in {s.product_id for s in selected}]
        assert all(r.quantity_sold <= selected[-1].quantity_sold for r in excluded)
        assert [r.quantity_sold for r in selected] == sorted((r.quantity_sold for r in selected), reverse=True)

    async def test_product_discount_performance(self, service):
        result = await service.run("product-discount-performance")

        assert [r.product_name for r in result.rows] == [
            "Road-150", "Jersey L", "Road-250", "Bearing Ball", "Jersey M",
        ]
        by_name = {r.product_name: r for r in result.rows}
        assert by_name["Road-250"].avg_discount == pytest.approx(0.10)
        assert by_name["Road-250"].total_sales == pytest.approx(54.0)
        assert by_name["Road-150"].avg_discount == pytest.approx(0.0)

    async def test_inventory_across_locations_is_summed_once(self, service):
        """Road-150 is stocked 5 + 7 in two locations and sold 240"""
        result = await service.run("product-sales-vs-inventory")

        assert rows(result) == [
            ("Road-150", 240.0, 12),
            ("Jersey L", 60.0, 20),
            ("Road-250", 54.0, 3),
            ("Bearing Ball", 30.0, 100),
        ]

    async def test_yearly_inventory_report(self, service):
        result = await service.run("yearly-product-sales-vs-inventory", year=2014)

        assert rows(result) == [
            ("Road-150", 160.0, 12),
            ("Jersey L", 60.0, 20),
            ("Road-250", 54.0, 3),
            ("Bearing Ball", 30.0, 100),
        ]

        earlier = await service.run("yearly-product-sales-vs-inventory", year=2013)
        assert rows(earlier) == [("Road-150", 80.0, 12)]

    async def test_recent_product_sales_default_window(self, service):
        result = await service.run("recent-product-sales")

        assert result.parameters.reference_date == date(2014, 6, 30)
        assert result.parameters.window_days == 30
        assert rows(result) == [
            ("Road-150", 160.0),
            ("Jersey L", 60.0),
            ("Road-250", 54.0),
            ("Jersey M", 10.0),
        ]

    async def test_recent_window_is_narrowed(self, service):
        result = await service.run("recent-product-sales", window_days=10)
        assert rows(result) == [("Road-250", 54.0)]

    async def test_recent_window_includes_whole_reference_date(self, service):
        """Order 2 was placed at 15:30 on the reference date"""
        result = await service.run("recent-product-sales", reference_date="2014-06-01", window_days=1)
        assert rows(result) == [("Road-150", 160.0), ("Jersey L", 20.0)]

    async def test_recent_window_defaults_to_today(self, retail_db, report_settings):
        settings = report_settings.model_copy(update={"reference_date": None, "window_days": 1})
        service = ReportService(retail_db, settings=settings, today=date(2014, 6, 16))

        result = await service.run("recent-product-sales")

        assert result.parameters.reference_date == date(2014, 6, 16)
        assert rows(result) == [("Jersey L", 40.0), ("Jersey M", 10.0)]

    @pytest.mark.parametrize(
        "report,overrides",
        [
            ("monthly-sales", {"year": "9999"}),
            ("yearly-product-sales-vs-inventory", {"year": 9999}),
            ("recent-product-sales", {"reference_date": "9999-12-31"}),
        ],
    )
    async def test_dates_past_the_calendar_end_are_invalid(self, service, report, overrides):
        with pytest.raises(InvalidParameterError):
            await service.run(report, **overrides)


class TestGeographyAndCustomers:
    """Region, territory and customer reports"""

    async def test_sales_by_region_uses_stored_ytd(self, service):
        result = await service.run("sales-by-region")
        assert rows(result) == [("United States", 1500.0), ("Canada", 800.0)]

    async def test_order_without_territory_is_excluded(self, service):
        result = await service.run("sales-by-territory")
        assert rows(result) == [("Canada", 200.0), ("Northwest", 150.0), ("Southwest", 60.0)]

    async def test_top_customers(self, service):
        result = await service.run("top-customers-by-spend")

        assert result.parameters.limit == 10
        assert rows(result) == [(2, 200.0), (1, 150.0), (3, 30.0)]

    async def test_top_customers_ties_go_to_lower_id(self, test_db, report_settings, make_order):
        test_db.add_all([Customer(customer_id=i) for i in (4, 7, 9)])
        test_db.add_all([
            make_order(1, datetime(2014, 1, 1), "75", customer_id=9),
            make_order(2, datetime(2014, 1, 2), "75", customer_id=4),
            make_order(3, datetime(2014, 1, 3), "75", customer_id=7),
        ])
        await test_db.commit()

        result = await ReportService(test_db, settings=report_settings).run("top-customers-by-spend", limit=2)
        assert rows(result) == [(4, 75.0), (7, 75.0)]

    async def test_customer_sales_by_territory(self, service):
        result = await service.run("customer-sales-by-territory")
        assert rows(result) == [("Canada", 2, 200.0), ("Northwest", 1, 150.0)]


class TestRunAll:
    async def test_run_all_covers_catalogue(self, service):
        results = await service.run_all(year=2014, limit=3)

        assert [r.name for r in results] == [n.value for n in ReportName]
        by_name = {r.name: r for r in results}
        assert by_name["top-products-by-quantity"].row_count == 3
        assert by_name["monthly-sales"].parameters.year == 2014
        # year is only applied where a report accepts it
        assert by_name["sales-by-category"].parameters.as_dict() == {}

    @pytest.mark.parametrize("name", list(ReportName))
    async def test_rerun_is_identical(self, service, name):
        first = await service.run(name)
        second = await service.run(name)

        first_payload, second_payload = first.to_payload(), second.to_payload()
        first_payload.pop("generated_at")
        second_payload.pop("generated_at")
        assert first_payload == second_payload

    async def test_line_total_is_materialized(self, retail_db):
        line = await retail_db.get(SalesOrderDetail, 7)
        assert Decimal(line.line_total) == Decimal("54")
