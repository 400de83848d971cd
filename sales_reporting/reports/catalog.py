"""
Report Catalogue

The fixed set of sales performance reports. Each entry ties a catalogue name
to its query builder, its typed row model and the parameters it accepts.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple, Type

from sqlalchemy import Select

from sales_reporting.reports import queries, schemas
from sales_reporting.reports.exceptions import UnknownReportError
from sales_reporting.reports.parameters import ReportParameters


class ReportName(str, Enum):
    """Catalogue names, in catalogue order"""
    TOTAL_SALES_BY_YEAR = "total-sales-by-year"
    SALES_BY_CATEGORY = "sales-by-category"
    SALES_BY_SUBCATEGORY = "sales-by-subcategory"
    TOP_PRODUCTS_BY_QUANTITY = "top-products-by-quantity"
    SALES_BY_REGION = "sales-by-region"
    SALES_BY_TERRITORY = "sales-by-territory"
    MONTHLY_SALES = "monthly-sales"
    TOP_CUSTOMERS_BY_SPEND = "top-customers-by-spend"
    PRODUCT_DISCOUNT_PERFORMANCE = "product-discount-performance"
    PRODUCT_SALES_VS_INVENTORY = "product-sales-vs-inventory"
    RECENT_PRODUCT_SALES = "recent-product-sales"
    MONTHLY_SALES_BY_CATEGORY = "monthly-sales-by-category"
    CUSTOMER_SALES_BY_TERRITORY = "customer-sales-by-territory"
    YEARLY_PRODUCT_SALES_VS_INVENTORY = "yearly-product-sales-vs-inventory"


@dataclass(frozen=True)
class ReportDefinition:
    """Static description of one report"""
    number: int
    name: ReportName
    title: str
    description: str
    row_model: Type[schemas.ReportRow]
    build_query: Callable[[ReportParameters], Select]
    parameters: Tuple[str, ...] = ()
    required: Tuple[str, ...] = ()
    limit_setting: Optional[str] = None
    notes: List[str] = field(default_factory=list)

    @property
    def columns(self) -> List[str]:
        return self.row_model.column_names()

    def describe(self) -> dict:
        """Catalogue entry as served by the API and CLI"""
        return {
            "number": self.number,
            "name": self.name.value,
            "title": self.title,
            "description": self.description,
            "parameters": list(self.parameters),
            "required_parameters": list(self.required),
            "columns": self.columns,
            "notes": list(self.notes),
        }


_DEFINITIONS: Tuple[ReportDefinition, ...] = (
    ReportDefinition(
        number=1,
        name=ReportName.TOTAL_SALES_BY_YEAR,
        title="Total Sales by Year",
        description="Sum of order totals per calendar year of the order date, newest year first.",
        row_model=schemas.YearlySales,
        build_query=queries.total_sales_by_year,
        parameters=("year",),
        notes=["Calendar year, not fiscal year. All years unless 'year' is given."],
    ),
    ReportDefinition(
        number=2,
        name=ReportName.SALES_BY_CATEGORY,
        title="Sales by Product Category",
        description="Sum of order line totals per product category.",
        row_model=schemas.CategorySales,
        build_query=queries.sales_by_category,
        notes=["Products without a subcategory and categories without sales are omitted."],
    ),
    ReportDefinition(
        number=3,
        name=ReportName.SALES_BY_SUBCATEGORY,
        title="Sales by Product Subcategory",
        description="Sum of order line totals per product subcategory.",
        row_model=schemas.SubcategorySales,
        build_query=queries.sales_by_subcategory,
    ),
    ReportDefinition(
        number=4,
        name=ReportName.TOP_PRODUCTS_BY_QUANTITY,
        title="Top Best-Selling Products",
        description="Products with the most units sold.",
        row_model=schemas.ProductQuantity,
        build_query=queries.top_products_by_quantity,
        parameters=("limit",),
        required=("limit",),
        limit_setting="top_products_limit",
        notes=["Equal quantities are ordered by product id, lowest first."],
    ),
    ReportDefinition(
        number=5,
        name=ReportName.SALES_BY_REGION,
        title="Sales by Region",
        description="Stored territory year-to-date sales summed per country/region.",
        row_model=schemas.RegionSales,
        build_query=queries.sales_by_region,
        notes=["Uses the territory YTD figure, not totals recomputed from orders."],
    ),
    ReportDefinition(
        number=6,
        name=ReportName.SALES_BY_TERRITORY,
        title="Sales by Territory",
        description="Sum of order totals per sales territory.",
        row_model=schemas.TerritorySales,
        build_query=queries.sales_by_territory,
        notes=["Orders without a territory are omitted."],
    ),
    ReportDefinition(
        number=7,
        name=ReportName.MONTHLY_SALES,
        title="Monthly Sales",
        description="Sum of order totals per month of the target year.",
        row_model=schemas.MonthlySales,
        build_query=queries.monthly_sales,
        parameters=("year",),
        required=("year",),
    ),
    ReportDefinition(
        number=8,
        name=ReportName.TOP_CUSTOMERS_BY_SPEND,
        title="Top Customers by Total Spend",
        description="Customers with the highest sum of order totals.",
        row_model=schemas.CustomerSpend,
        build_query=queries.top_customers_by_spend,
        parameters=("limit",),
        required=("limit",),
        limit_setting="top_customers_limit",
        notes=["Equal spend is ordered by customer id, lowest first."],
    ),
    ReportDefinition(
        number=9,
        name=ReportName.PRODUCT_DISCOUNT_PERFORMANCE,
        title="Product Performance by Discount",
        description="Average unit price discount and total sales per product.",
        row_model=schemas.ProductDiscountPerformance,
        build_query=queries.product_discount_performance,
        notes=["The average is taken over order lines, not weighted by quantity."],
    ),
    ReportDefinition(
        number=10,
        name=ReportName.PRODUCT_SALES_VS_INVENTORY,
        title="Product Sales with Inventory Levels",
        description="Total sales per product next to its on-hand quantity summed across locations.",
        row_model=schemas.ProductInventorySales,
        build_query=queries.product_sales_vs_inventory,
        notes=["Products without inventory rows are omitted."],
    ),
    ReportDefinition(
        number=11,
        name=ReportName.RECENT_PRODUCT_SALES,
        title="Recent Sales by Product",
        description="Sum of order line totals per product for orders placed in the recent window.",
        row_model=schemas.ProductSales,
        build_query=queries.recent_product_sales,
        parameters=("reference_date", "window_days"),
        required=("reference_date", "window_days"),
        notes=["Window covers window_days days before reference_date plus reference_date itself."],
    ),
    ReportDefinition(
        number=12,
        name=ReportName.MONTHLY_SALES_BY_CATEGORY,
        title="Monthly Sales by Product Category",
        description="Sum of order totals per month and product category of the target year.",
        row_model=schemas.MonthlyCategorySales,
        build_query=queries.monthly_sales_by_category,
        parameters=("year",),
        required=("year",),
        notes=["An order's total counts once for each category it contains."],
    ),
    ReportDefinition(
        number=13,
        name=ReportName.CUSTOMER_SALES_BY_TERRITORY,
        title="Customer Sales by Territory",
        description="Sum of order totals per customer within each sales territory.",
        row_model=schemas.TerritoryCustomerSales,
        build_query=queries.customer_sales_by_territory,
    ),
    ReportDefinition(
        number=14,
        name=ReportName.YEARLY_PRODUCT_SALES_VS_INVENTORY,
        title="Yearly Product Sales and Inventory",
        description="Sales of the target year per product next to its on-hand quantity summed across locations.",
        row_model=schemas.ProductInventorySales,
        build_query=queries.yearly_product_sales_vs_inventory,
        parameters=("year",),
        required=("year",),
    ),
)

REPORTS: Dict[ReportName, ReportDefinition] = {d.name: d for d in _DEFINITIONS}


def list_reports() -> List[ReportDefinition]:
    """All report definitions in catalogue order"""
    return list(_DEFINITIONS)


def get_report(name) -> ReportDefinition:
    """
    Look up a report by catalogue name.

    Args:
        name: ReportName or its string value

    Raises:
        UnknownReportError: No such report
    """
    try:
        return REPORTS[ReportName(name)]
    except ValueError:
        raise UnknownReportError(str(name), [n.value for n in ReportName]) from None
