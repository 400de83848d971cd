"""
Report Query Builders

Each builder turns resolved ReportParameters into a single SELECT statement.
Statements are built with SQLAlchemy Core so they run unchanged on PostgreSQL
and SQLite.

Join semantics:
- Inner joins throughout. Orphaned rows (a product without a subcategory, an
  order without a territory or customer) drop out of that report's grouping.
- Product inventory holds one row per stocking location. It is summed per
  product in a subquery before being joined so sales are never multiplied by
  the number of locations.

Ordering always ends on a unique, stable key so repeated runs over the same
data return rows in the same order, including at the top-N cut-off.
"""

from sqlalchemy import Integer, Select, cast, extract, func, select
from sqlalchemy.sql.expression import ColumnElement, Subquery

from sales_reporting.database.models import (
    CountryRegion,
    Customer,
    Product,
    ProductCategory,
    ProductInventory,
    ProductSubcategory,
    SalesOrderDetail,
    SalesOrderHeader,
    SalesTerritory,
)
from sales_reporting.reports.parameters import ReportParameters


def _calendar_year(column) -> ColumnElement:
    return cast(extract("year", column), Integer)


def _calendar_month(column) -> ColumnElement:
    return cast(extract("month", column), Integer)


def _in_year(params: ReportParameters):
    start, end = params.year_bounds()
    return (
        SalesOrderHeader.order_date >= start,
        SalesOrderHeader.order_date < end,
    )


# =============================================================================
# SALES OVER TIME
# =============================================================================

def total_sales_by_year(params: ReportParameters) -> Select:
    """Sum of order totals per calendar year, newest first."""
    sales_year = _calendar_year(SalesOrderHeader.order_date)
    total_sales = func.sum(SalesOrderHeader.total_due).label("total_sales")

    stmt = (
        select(sales_year.label("sales_year"), total_sales)
        .group_by(sales_year)
        .order_by(sales_year.desc())
    )
    if params.year is not None:
        stmt = stmt.where(*_in_year(params))
    return stmt


def monthly_sales(params: ReportParameters) -> Select:
    """Sum of order totals per month of the target year."""
    month = _calendar_month(SalesOrderHeader.order_date)
    total_sales = func.sum(SalesOrderHeader.total_due).label("total_sales")

    return (
        select(month.label("month"), total_sales)
        .where(*_in_year(params))
        .group_by(month)
        .order_by(month)
    )


def monthly_sales_by_category(params: ReportParameters) -> Select:
    """
    Sum of order totals per month and product category of the target year.

    An order counts once for every category it has at least one line in, so
    orders with several lines in the same category are not summed repeatedly.
    """
    order_categories = (
        select(
            SalesOrderHeader.sales_order_id,
            SalesOrderHeader.order_date,
            SalesOrderHeader.total_due,
            ProductCategory.product_category_id,
            ProductCategory.name.label("category"),
        )
        .select_from(SalesOrderHeader)
        .join(SalesOrderDetail, SalesOrderDetail.sales_order_id == SalesOrderHeader.sales_order_id)
        .join(Product, Product.product_id == SalesOrderDetail.product_id)
        .join(ProductSubcategory, ProductSubcategory.product_subcategory_id == Product.product_subcategory_id)
        .join(ProductCategory, ProductCategory.product_category_id == ProductSubcategory.product_category_id)
        .where(*_in_year(params))
        .distinct()
        .subquery("order_categories")
    )

    month = _calendar_month(order_categories.c.order_date)
    total_sales = func.sum(order_categories.c.total_due).label("total_sales")

    return (
        select(month.label("month"), order_categories.c.category, total_sales)
        .group_by(month, order_categories.c.category)
        .order_by(month, total_sales.desc(), order_categories.c.category)
    )


# =============================================================================
# PRODUCT HIERARCHY
# =============================================================================

def sales_by_category(params: ReportParameters) -> Select:
    """Sum of line totals per product category."""
    total_sales = func.sum(SalesOrderDetail.line_total).label("total_sales")

    return (
        select(ProductCategory.name.label("category"), total_sales)
        .select_from(SalesOrderDetail)
        .join(Product, Product.product_id == SalesOrderDetail.product_id)
        .join(ProductSubcategory, ProductSubcategory.product_subcategory_id == Product.product_subcategory_id)
        .join(ProductCategory, ProductCategory.product_category_id == ProductSubcategory.product_category_id)
        .group_by(ProductCategory.name)
        .order_by(total_sales.desc(), ProductCategory.name)
    )


def sales_by_subcategory(params: ReportParameters) -> Select:
    """Sum of line totals per product subcategory."""
    total_sales = func.sum(SalesOrderDetail.line_total).label("total_sales")

    return (
        select(ProductSubcategory.name.label("subcategory"), total_sales)
        .select_from(SalesOrderDetail)
        .join(Product, Product.product_id == SalesOrderDetail.product_id)
        .join(ProductSubcategory, ProductSubcategory.product_subcategory_id == Product.product_subcategory_id)
        .group_by(ProductSubcategory.name)
        .order_by(total_sales.desc(), ProductSubcategory.name)
    )


# =============================================================================
# PRODUCTS
# =============================================================================

def top_products_by_quantity(params: ReportParameters) -> Select:
    """Best sellers by units sold. Ties at the cut-off go to the lower product id."""
    quantity_sold = func.sum(SalesOrderDetail.order_qty).label("quantity_sold")

    return (
        select(Product.product_id, Product.name.label("product_name"), quantity_sold)
        .select_from(SalesOrderDetail)
        .join(Product, Product.product_id == SalesOrderDetail.product_id)
        .group_by(Product.product_id, Product.name)
        .order_by(quantity_sold.desc(), Product.product_id)
        .limit(params.limit)
    )


def product_discount_performance(params: ReportParameters) -> Select:
    """Unweighted average discount over order lines and total sales per product."""
    avg_discount = func.avg(SalesOrderDetail.unit_price_discount).label("avg_discount")
    total_sales = func.sum(SalesOrderDetail.line_total).label("total_sales")

    return (
        select(Product.name.label("product_name"), avg_discount, total_sales)
        .select_from(SalesOrderDetail)
        .join(Product, Product.product_id == SalesOrderDetail.product_id)
        .group_by(Product.name)
        .order_by(total_sales.desc(), Product.name)
    )


def recent_product_sales(params: ReportParameters) -> Select:
    """Sum of line totals per product for orders inside the recent window."""
    start, end = params.window_bounds()
    total_sales = func.sum(SalesOrderDetail.line_total).label("total_sales")

    return (
        select(Product.name.label("product_name"), total_sales)
        .select_from(SalesOrderHeader)
        .join(SalesOrderDetail, SalesOrderDetail.sales_order_id == SalesOrderHeader.sales_order_id)
        .join(Product, Product.product_id == SalesOrderDetail.product_id)
        .where(
            SalesOrderHeader.order_date >= start,
            SalesOrderHeader.order_date < end,
        )
        .group_by(Product.name)
        .order_by(total_sales.desc(), Product.name)
    )


def _inventory_per_product() -> Subquery:
    """On-hand quantity summed across every stocking location"""
    return (
        select(
            ProductInventory.product_id,
            func.sum(ProductInventory.quantity).label("inventory_level"),
        )
        .group_by(ProductInventory.product_id)
        .subquery("product_stock")
    )


def _sales_against_inventory(product_sales: Subquery) -> Select:
    stock = _inventory_per_product()

    return (
        select(
            Product.name.label("product_name"),
            product_sales.c.total_sales,
            stock.c.inventory_level,
        )
        .select_from(Product)
        .join(product_sales, product_sales.c.product_id == Product.product_id)
        .join(stock, stock.c.product_id == Product.product_id)
        .order_by(product_sales.c.total_sales.desc(), Product.name)
    )


def product_sales_vs_inventory(params: ReportParameters) -> Select:
    """All-time sales per product next to its total on-hand inventory."""
    product_sales = (
        select(
            SalesOrderDetail.product_id,
            func.sum(SalesOrderDetail.line_total).label("total_sales"),
        )
        .group_by(SalesOrderDetail.product_id)
        .subquery("product_sales")
    )
    return _sales_against_inventory(product_sales)


def yearly_product_sales_vs_inventory(params: ReportParameters) -> Select:
    """Sales of the target year per product next to its total on-hand inventory."""
    product_sales = (
        select(
            SalesOrderDetail.product_id,
            func.sum(SalesOrderDetail.line_total).label("total_sales"),
        )
        .join(SalesOrderHeader, SalesOrderHeader.sales_order_id == SalesOrderDetail.sales_order_id)
        .where(*_in_year(params))
        .group_by(SalesOrderDetail.product_id)
        .subquery("product_sales")
    )
    return _sales_against_inventory(product_sales)


# =============================================================================
# GEOGRAPHY AND CUSTOMERS
# =============================================================================

def sales_by_region(params: ReportParameters) -> Select:
    """Stored territory YTD sales summed per country/region."""
    total_sales = func.sum(SalesTerritory.sales_ytd).label("total_sales")

    return (
        select(CountryRegion.name.label("region"), total_sales)
        .select_from(SalesTerritory)
        .join(CountryRegion, CountryRegion.country_region_code == SalesTerritory.country_region_code)
        .group_by(CountryRegion.name)
        .order_by(total_sales.desc(), CountryRegion.name)
    )


def sales_by_territory(params: ReportParameters) -> Select:
    """Sum of order totals per sales territory."""
    total_sales = func.sum(SalesOrderHeader.total_due).label("total_sales")

    return (
        select(SalesTerritory.name.label("territory"), total_sales)
        .select_from(SalesOrderHeader)
        .join(SalesTerritory, SalesTerritory.territory_id == SalesOrderHeader.territory_id)
        .group_by(SalesTerritory.name)
        .order_by(total_sales.desc(), SalesTerritory.name)
    )


def top_customers_by_spend(params: ReportParameters) -> Select:
    """Customers with the highest order totals. Ties go to the lower customer id."""
    total_sales = func.sum(SalesOrderHeader.total_due).label("total_sales")

    return (
        select(Customer.customer_id, total_sales)
        .select_from(SalesOrderHeader)
        .join(Customer, Customer.customer_id == SalesOrderHeader.customer_id)
        .group_by(Customer.customer_id)
        .order_by(total_sales.desc(), Customer.customer_id)
        .limit(params.limit)
    )


def customer_sales_by_territory(params: ReportParameters) -> Select:
    """Sum of order totals per customer within each territory of the order."""
    total_sales = func.sum(SalesOrderHeader.total_due).label("total_sales")

    return (
        select(
            SalesTerritory.name.label("territory"),
            Customer.customer_id,
            total_sales,
        )
        .select_from(SalesOrderHeader)
        .join(Customer, Customer.customer_id == SalesOrderHeader.customer_id)
        .join(SalesTerritory, SalesTerritory.territory_id == SalesOrderHeader.territory_id)
        .group_by(SalesTerritory.name, Customer.customer_id)
        .order_by(total_sales.desc(), SalesTerritory.name, Customer.customer_id)
    )
