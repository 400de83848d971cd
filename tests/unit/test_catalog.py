"""
Unit Tests - Report Catalogue
"""
from datetime import date

import pytest
from sqlalchemy.dialects import postgresql, sqlite

from sales_reporting.reports import ReportName, UnknownReportError, get_report, list_reports
from sales_reporting.reports.parameters import PARAMETER_NAMES, ReportParameters


class TestCatalogue:
    """Tests for report lookup"""

    def test_catalogue_order(self):
        reports = list_reports()

        assert [r.number for r in reports] == list(range(1, 15))
        assert [r.name for r in reports] == list(ReportName)

    def test_get_report_by_string_or_enum(self):
        assert get_report("monthly-sales") is get_report(ReportName.MONTHLY_SALES)

    def test_unknown_report(self):
        with pytest.raises(UnknownReportError) as exc:
            get_report("sales-by-planet")

        assert exc.value.name == "sales-by-planet"
        assert "monthly-sales" in exc.value.available
        assert isinstance(exc.value, LookupError)

    def test_declared_parameters_are_known(self):
        for definition in list_reports():
            assert set(definition.parameters) <= set(PARAMETER_NAMES)
            assert set(definition.required) <= set(definition.parameters)

    @pytest.mark.parametrize("name,parameters", [
        ("total-sales-by-year", ["year"]),
        ("monthly-sales", ["year"]),
        ("monthly-sales-by-category", ["year"]),
        ("yearly-product-sales-vs-inventory", ["year"]),
        ("recent-product-sales", ["reference_date", "window_days"]),
        ("top-products-by-quantity", ["limit"]),
        ("top-customers-by-spend", ["limit"]),
        ("sales-by-region", []),
    ])
    def test_report_parameters(self, name, parameters):
        assert get_report(name).describe()["parameters"] == parameters

    def test_columns_follow_row_model(self):
        assert get_report("product-sales-vs-inventory").columns == [
            "product_name", "total_sales", "inventory_level",
        ]
        assert get_report("customer-sales-by-territory").columns == [
            "territory", "customer_id", "total_sales",
        ]

    def test_describe(self):
        entry = get_report("top-products-by-quantity").describe()

        assert entry["number"] == 4
        assert entry["title"] == "Top Best-Selling Products"
        assert entry["required_parameters"] == ["limit"]
        assert entry["columns"] == ["product_id", "product_name", "quantity_sold"]


class TestQueryCompilation:
    """Every report compiles to one SELECT on both supported backends"""

    @pytest.fixture
    def params(self):
        return ReportParameters(year=2014, reference_date=date(2014, 6, 30), window_days=30, limit=5)

    @pytest.mark.parametrize("dialect", [postgresql.dialect(), sqlite.dialect()], ids=["postgresql", "sqlite"])
    def test_compiles(self, params, dialect):
        for definition in list_reports():
            sql = str(definition.build_query(params).compile(dialect=dialect))
            assert sql.lstrip().upper().startswith("SELECT")

    def test_inventory_is_aggregated_before_join(self, params):
        sql = str(get_report("product-sales-vs-inventory").build_query(params).compile(dialect=postgresql.dialect()))
        assert "product_stock" in sql
        assert "sum(product_inventory.quantity)" in sql
