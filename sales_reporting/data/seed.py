"""
Sample Database Seeding

Loads a generated dataset into the reporting schema in foreign-key order.
"""

from decimal import Decimal
from typing import Any, Dict, List, Type

import polars as pl
import structlog
from sqlalchemy import Numeric, func, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

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
)

logger = structlog.get_logger(__name__)

LOAD_ORDER: List[Type[Base]] = [
    CountryRegion,
    SalesTerritory,
    ProductCategory,
    ProductSubcategory,
    Product,
    ProductInventory,
    Customer,
    SalesOrderHeader,
    SalesOrderDetail,
]

CHUNK_SIZE = 1000


def _to_records(model: Type[Base], df: pl.DataFrame) -> List[Dict[str, Any]]:
    """DataFrame rows as insert parameters, money columns as Decimal"""
    numeric_columns = {
        column.name
        for column in model.__table__.columns
        if isinstance(column.type, Numeric) and column.name in df.columns
    }
    records = df.to_dicts()
    for record in records:
        for name in numeric_columns:
            if record[name] is not None:
                record[name] = Decimal(str(record[name]))
    return records


async def execute_batch_insert(session: AsyncSession, model: Type[Base], records: List[Dict[str, Any]]) -> int:
    """Insert records in chunks using Core insert"""
    if not records:
        return 0

    for i in range(0, len(records), CHUNK_SIZE):
        chunk = records[i:i + CHUNK_SIZE]
        await session.execute(insert(model), chunk)

    logger.debug("Inserted records", table=model.__tablename__, rows=len(records))
    return len(records)


async def is_seeded(session: AsyncSession) -> bool:
    """Check whether order data is already present"""
    count = await session.scalar(select(func.count()).select_from(SalesOrderHeader))
    return bool(count)


async def seed_database(session: AsyncSession, data: Dict[str, pl.DataFrame]) -> Dict[str, int]:
    """
    Load a dataset produced by SampleDataGenerator.

    Tables missing from data are skipped. The caller owns the transaction.

    Returns:
        Rows inserted per table
    """
    counts = {}
    for model in LOAD_ORDER:
        df = data.get(model.__tablename__)
        if df is None:
            continue
        counts[model.__tablename__] = await execute_batch_insert(session, model, _to_records(model, df))

    logger.info("Database seeded", **counts)
    return counts
