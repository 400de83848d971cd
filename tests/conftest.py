"""
Test Suite Configuration

The `retail_db` fixture loads a small hand-built dataset. Expected report
values used across the tests:

    Orders (order_date, customer, territory, total_due)
      1  2013-05-01  cust 1  Northwest   100   Road-150 x1 @80
      2  2014-06-01  cust 2  Canada      200   Road-150 x2 @80, Jersey L x1 @20
      3  2014-06-15  cust 1  Northwest    50   Jersey L x2 @20, Jersey M x1 @10
      4  2014-02-10  cust 3  (none)       30   Bearing Ball x3 @10 (no subcategory)
      5  2014-06-25  (none)  Southwest    60   Road-250 x1 @60, 10% discount

    Inventory: Road-150 5 + 7 over two locations, Road-250 3, Jersey L 20,
    Bearing Ball 100, Jersey M none.
"""
from datetime import date, datetime
from decimal import Decimal
from typing import AsyncGenerator, List

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from sales_reporting.config import Settings
from sales_reporting.config.settings import ReportSettings
from sales_reporting.database.connection import create_engine_for_url, create_schema
from sales_reporting.database.models import (
    Base,
    CountryRegion,
    Customer,
    Product,
    ProductCategory,
    ProductInventory,
    ProductSubcategory,
    SalesOrderDetail,
    SalesOrderHeader,
    SalesTerritory,
    compute_line_total,
)
from sales_reporting.reports import ReportService


@pytest.fixture
def test_settings() -> Settings:
    """Create test settings"""
    return Settings(
        app_env="testing",
        debug=True,
    )


@pytest.fixture
def report_settings() -> ReportSettings:
    """Report defaults pinned to the fixture data"""
    return ReportSettings(
        default_year=2014,
        reference_date=date(2014, 6, 30),
        window_days=30,
        top_products_limit=5,
        top_customers_limit=10,
    )


@pytest.fixture
async def test_engine():
    """Create test database engine"""
    engine = create_engine_for_url("sqlite+aiosqlite:///:memory:")
    await create_schema(engine)

    yield engine

    await engine.dispose()


@pytest.fixture
async def test_db(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create test database session"""
    session_factory = async_sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with session_factory() as session:
        yield session


def order_line(detail_id: int, order_id: int, product_id: int, qty: int, price: str, discount: str = "0") -> SalesOrderDetail:
    return SalesOrderDetail(
        sales_order_detail_id=detail_id,
        sales_order_id=order_id,
        product_id=product_id,
        order_qty=qty,
        unit_price=Decimal(price),
        unit_price_discount=Decimal(discount),
        line_total=compute_line_total(qty, Decimal(price), Decimal(discount)),
    )


def order(order_id: int, order_date: datetime, total_due: str, customer_id=None, territory_id=None) -> SalesOrderHeader:
    return SalesOrderHeader(
        sales_order_id=order_id,
        order_date=order_date,
        customer_id=customer_id,
        territory_id=territory_id,
        subtotal=Decimal(total_due),
        total_due=Decimal(total_due),
    )


def build_retail_rows() -> List[Base]:
    """Rows of the hand-built dataset described in the module docstring"""
    return [
        CountryRegion(country_region_code="US", name="United States"),
        CountryRegion(country_region_code="CA", name="Canada"),
        SalesTerritory(territory_id=1, name="Northwest", country_region_code="US",
                       group_name="North America", sales_ytd=Decimal("1000")),
        SalesTerritory(territory_id=2, name="Southwest", country_region_code="US",
                       group_name="North America", sales_ytd=Decimal("500")),
        SalesTerritory(territory_id=3, name="Canada", country_region_code="CA",
                       group_name="North America", sales_ytd=Decimal("800")),

        ProductCategory(product_category_id=1, name="Bikes"),
        ProductCategory(product_category_id=2, name="Clothing"),
        ProductCategory(product_category_id=3, name="Test"),
        ProductSubcategory(product_subcategory_id=1, product_category_id=1, name="Road Bikes"),
        ProductSubcategory(product_subcategory_id=2, product_category_id=2, name="Jerseys"),

        Product(product_id=1, name="Road-150", product_subcategory_id=1, list_price=Decimal("80")),
        Product(product_id=2, name="Road-250", product_subcategory_id=1, list_price=Decimal("60")),
        Product(product_id=3, name="Jersey L", product_subcategory_id=2, list_price=Decimal("20")),
        Product(product_id=4, name="Bearing Ball", product_subcategory_id=None, list_price=Decimal("10")),
        Product(product_id=5, name="Jersey M", product_subcategory_id=2, list_price=Decimal("10")),

        ProductInventory(product_id=1, location_id=1, quantity=5),
        ProductInventory(product_id=1, location_id=6, quantity=7),
        ProductInventory(product_id=2, location_id=1, quantity=3),
        ProductInventory(product_id=3, location_id=7, quantity=20),
        ProductInventory(product_id=4, location_id=1, quantity=100),

        Customer(customer_id=1, territory_id=1, account_number="AW00000001"),
        Customer(customer_id=2, territory_id=3, account_number="AW00000002"),
        Customer(customer_id=3, territory_id=2, account_number="AW00000003"),

        order(1, datetime(2013, 5, 1, 10, 0), "100", customer_id=1, territory_id=1),
        order(2, datetime(2014, 6, 1, 15, 30), "200", customer_id=2, territory_id=3),
        order(3, datetime(2014, 6, 15, 9, 0), "50", customer_id=1, territory_id=1),
        order(4, datetime(2014, 2, 10, 12, 0), "30", customer_id=3),
        order(5, datetime(2014, 6, 25, 18, 45), "60", territory_id=2),

        order_line(1, 1, 1, 1, "80"),
        order_line(2, 2, 1, 2, "80"),
        order_line(3, 2, 3, 1, "20"),
        order_line(4, 3, 3, 2, "20"),
        order_line(5, 3, 5, 1, "10"),
        order_line(6, 4, 4, 3, "10"),
        order_line(7, 5, 2, 1, "60", discount="0.10"),
    ]


@pytest.fixture
async def retail_db(test_db) -> AsyncSession:
    """Session over the hand-built dataset"""
    test_db.add_all(build_retail_rows())
    await test_db.commit()
    return test_db


@pytest.fixture
def service(retail_db, report_settings) -> ReportService:
    return ReportService(retail_db, settings=report_settings)


@pytest.fixture
def make_order():
    """Factory for order headers without lines"""
    return order
