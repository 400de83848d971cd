"""
Database Models - Retail Sample Schema

This module maps the normalized retail sample database the reports read from.
The reporting layer never writes to these tables; they are created here so the
sample dataset can be seeded and tests can run against an in-memory database.

Sales:
- SalesOrderHeader: Order headers with the total amount due
- SalesOrderDetail: Order lines with a materialized line total
- Customer: Customer accounts
- SalesTerritory: Territories with their stored year-to-date sales

Production:
- Product: Product catalog
- ProductSubcategory / ProductCategory: Two-level product hierarchy
- ProductInventory: On-hand quantity per product and stocking location

Person:
- CountryRegion: Countries and regions referenced by territories
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional, List

from sqlalchemy import (
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all database models"""
    pass


# Money columns share the precision of the source schema
MONEY = Numeric(19, 4)


# =============================================================================
# PERSON
# =============================================================================

class CountryRegion(Base):
    """
    Country/Region Table

    ISO country or region codes with display names.
    """
    __tablename__ = "country_region"

    country_region_code: Mapped[str] = mapped_column(String(3), primary_key=True)
    name: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)

    territories: Mapped[List["SalesTerritory"]] = relationship(back_populates="country_region")


# =============================================================================
# PRODUCTION
# =============================================================================

class ProductCategory(Base):
    """Top level of the product hierarchy"""
    __tablename__ = "product_category"

    product_category_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)

    subcategories: Mapped[List["ProductSubcategory"]] = relationship(back_populates="category")


class ProductSubcategory(Base):
    """Second level of the product hierarchy"""
    __tablename__ = "product_subcategory"

    product_subcategory_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    product_category_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("product_category.product_category_id"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)

    category: Mapped["ProductCategory"] = relationship(back_populates="subcategories")
    products: Mapped[List["Product"]] = relationship(back_populates="subcategory")

    __table_args__ = (
        Index("ix_product_subcategory_category", "product_category_id"),
    )


class Product(Base):
    """
    Product Table

    Products sold through order lines. Components and raw materials carry no
    subcategory and so drop out of the category reports.
    """
    __tablename__ = "product"

    product_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    product_number: Mapped[Optional[str]] = mapped_column(String(25), unique=True)
    product_subcategory_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("product_subcategory.product_subcategory_id")
    )
    list_price: Mapped[Decimal] = mapped_column(MONEY, default=0)
    standard_cost: Mapped[Decimal] = mapped_column(MONEY, default=0)

    subcategory: Mapped[Optional["ProductSubcategory"]] = relationship(back_populates="products")
    inventory: Mapped[List["ProductInventory"]] = relationship(back_populates="product")
    order_lines: Mapped[List["SalesOrderDetail"]] = relationship(back_populates="product")

    __table_args__ = (
        Index("ix_product_subcategory", "product_subcategory_id"),
    )


class ProductInventory(Base):
    """
    Product Inventory Table

    Grain: one row per product per stocking location. A product stocked in
    several locations has several rows.
    """
    __tablename__ = "product_inventory"

    product_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("product.product_id"), primary_key=True
    )
    location_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    shelf: Mapped[str] = mapped_column(String(10), default="A")
    bin: Mapped[int] = mapped_column(Integer, default=0)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    product: Mapped["Product"] = relationship(back_populates="inventory")


# =============================================================================
# SALES
# =============================================================================

class SalesTerritory(Base):
    """
    Sales Territory Table

    sales_ytd is maintained independently of the order tables.
    """
    __tablename__ = "sales_territory"

    territory_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    country_region_code: Mapped[str] = mapped_column(
        String(3), ForeignKey("country_region.country_region_code"), nullable=False
    )
    group_name: Mapped[str] = mapped_column(String(50), nullable=False)
    sales_ytd: Mapped[Decimal] = mapped_column(MONEY, default=0)
    sales_last_year: Mapped[Decimal] = mapped_column(MONEY, default=0)

    country_region: Mapped["CountryRegion"] = relationship(back_populates="territories")
    orders: Mapped[List["SalesOrderHeader"]] = relationship(back_populates="territory")

    __table_args__ = (
        Index("ix_sales_territory_country", "country_region_code"),
    )


class Customer(Base):
    """
    Customer Table

    A customer is either an individual (person_id) or a store (store_id).
    """
    __tablename__ = "customer"

    customer_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    person_id: Mapped[Optional[int]] = mapped_column(Integer)
    store_id: Mapped[Optional[int]] = mapped_column(Integer)
    territory_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("sales_territory.territory_id")
    )
    account_number: Mapped[Optional[str]] = mapped_column(String(10), unique=True)

    orders: Mapped[List["SalesOrderHeader"]] = relationship(back_populates="customer")


class SalesOrderHeader(Base):
    """
    Sales Order Header Table

    Grain: one row per order. total_due = subtotal + tax_amt + freight.
    """
    __tablename__ = "sales_order_header"

    sales_order_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    order_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    customer_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("customer.customer_id")
    )
    territory_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("sales_territory.territory_id")
    )
    subtotal: Mapped[Decimal] = mapped_column(MONEY, default=0)
    tax_amt: Mapped[Decimal] = mapped_column(MONEY, default=0)
    freight: Mapped[Decimal] = mapped_column(MONEY, default=0)
    total_due: Mapped[Decimal] = mapped_column(MONEY, nullable=False)

    modified_date: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.now()
    )

    customer: Mapped[Optional["Customer"]] = relationship(back_populates="orders")
    territory: Mapped[Optional["SalesTerritory"]] = relationship(back_populates="orders")
    lines: Mapped[List["SalesOrderDetail"]] = relationship(back_populates="order")

    __table_args__ = (
        Index("ix_sales_order_header_date", "order_date"),
        Index("ix_sales_order_header_customer", "customer_id"),
        Index("ix_sales_order_header_territory", "territory_id"),
    )


class SalesOrderDetail(Base):
    """
    Sales Order Detail Table

    Grain: one row per order line.
    line_total = order_qty * unit_price * (1 - unit_price_discount).
    """
    __tablename__ = "sales_order_detail"

    sales_order_detail_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    sales_order_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("sales_order_header.sales_order_id"), nullable=False
    )
    product_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("product.product_id"), nullable=False
    )
    order_qty: Mapped[int] = mapped_column(Integer, nullable=False)
    unit_price: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    unit_price_discount: Mapped[Decimal] = mapped_column(MONEY, default=0)
    line_total: Mapped[Decimal] = mapped_column(Numeric(38, 6), nullable=False)

    order: Mapped["SalesOrderHeader"] = relationship(back_populates="lines")
    product: Mapped["Product"] = relationship(back_populates="order_lines")

    __table_args__ = (
        Index("ix_sales_order_detail_order", "sales_order_id"),
        Index("ix_sales_order_detail_product", "product_id"),
    )


def compute_line_total(order_qty: int, unit_price: Decimal, unit_price_discount: Decimal) -> Decimal:
    """Materialized value of SalesOrderDetail.line_total"""
    return Decimal(order_qty) * Decimal(unit_price) * (Decimal(1) - Decimal(unit_price_discount))
