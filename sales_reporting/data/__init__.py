"""
Sample Data Module
"""
from .generators import (
    SampleDataGenerator,
    GeographyGenerator,
    ProductGenerator,
    CustomerGenerator,
    OrderGenerator,
)
from .seed import seed_database, is_seeded

__all__ = [
    "SampleDataGenerator",
    "GeographyGenerator",
    "ProductGenerator",
    "CustomerGenerator",
    "OrderGenerator",
    "seed_database",
    "is_seeded",
]
