"""
Report Row Schemas

One pydantic model per report shape. Field order is the column order of the
report output.
"""

from datetime import datetime
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field

from sales_reporting.reports.parameters import ReportParameters


class ReportRow(BaseModel):
    """Base class for report rows"""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    @classmethod
    def column_names(cls) -> List[str]:
        return list(cls.model_fields.keys())


class YearlySales(ReportRow):
    """Report 1 - total sales by year"""
    sales_year: int
    total_sales: float


class CategorySales(ReportRow):
    """Report 2 - sales by product category"""
    category: str
    total_sales: float


class SubcategorySales(ReportRow):
    """Report 3 - sales by product subcategory"""
    subcategory: str
    total_sales: float


class ProductQuantity(ReportRow):
    """Report 4 - best sellers by quantity"""
    product_id: int
    product_name: str
    quantity_sold: int


class RegionSales(ReportRow):
    """Report 5 - stored territory YTD sales per country/region"""
    region: str
    total_sales: float


class TerritorySales(ReportRow):
    """Report 6 - order sales by territory"""
    territory: str
    total_sales: float


class MonthlySales(ReportRow):
    """Report 7 - order sales by month of a year"""
    month: int = Field(ge=1, le=12)
    total_sales: float


class CustomerSpend(ReportRow):
    """Report 8 - top customers by spend"""
    customer_id: int
    total_sales: float


class ProductDiscountPerformance(ReportRow):
    """Report 9 - average discount and sales per product"""
    product_name: str
    avg_discount: float
    total_sales: float


class ProductInventorySales(ReportRow):
    """Reports 10 and 14 - product sales against total on-hand inventory"""
    product_name: str
    total_sales: float
    inventory_level: int


class ProductSales(ReportRow):
    """Report 11 - product sales inside the recent window"""
    product_name: str
    total_sales: float


class MonthlyCategorySales(ReportRow):
    """Report 12 - order sales by month and category"""
    month: int = Field(ge=1, le=12)
    category: str
    total_sales: float


class TerritoryCustomerSales(ReportRow):
    """Report 13 - order sales per customer within each territory"""
    territory: str
    customer_id: int
    total_sales: float


class ReportResult(BaseModel):
    """Outcome of running one report"""

    name: str
    title: str
    parameters: ReportParameters
    columns: List[str]
    rows: List[ReportRow]
    generated_at: datetime

    @property
    def row_count(self) -> int:
        return len(self.rows)

    def records(self) -> List[Dict[str, Any]]:
        """Rows as plain dicts, in column order"""
        return [row.model_dump() for row in self.rows]

    def to_payload(self) -> Dict[str, Any]:
        """JSON-ready representation used by the API and CLI"""
        return {
            "name": self.name,
            "title": self.title,
            "parameters": self.parameters.as_dict(),
            "columns": self.columns,
            "row_count": self.row_count,
            "rows": self.records(),
            "generated_at": self.generated_at.isoformat(),
        }
