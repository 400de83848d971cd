"""
Synthetic Sample Data Generator

Generates a deterministic retail dataset shaped like the reporting schema.
Includes:
- Countries/regions and sales territories with stored YTD figures
- A category > subcategory > product hierarchy, plus unsold raw materials
- Multi-location product inventory
- Customers (individuals and stores) attached to territories
- Orders with materialized line totals and header totals
"""

from datetime import datetime, timedelta
from typing import Dict, List, Optional, Tuple

import numpy as np
import polars as pl
import structlog
from faker import Faker

logger = structlog.get_logger(__name__)


# =============================================================================
# CONFIGURATION
# =============================================================================

COUNTRY_REGIONS = [
    ("US", "United States"),
    ("CA", "Canada"),
    ("FR", "France"),
    ("DE", "Germany"),
    ("AU", "Australia"),
    ("GB", "United Kingdom"),
]

TERRITORIES = [
    # (name, country code, group)
    ("Northwest", "US", "North America"),
    ("Northeast", "US", "North America"),
    ("Central", "US", "North America"),
    ("Southwest", "US", "North America"),
    ("Southeast", "US", "North America"),
    ("Canada", "CA", "North America"),
    ("France", "FR", "Europe"),
    ("Germany", "DE", "Europe"),
    ("Australia", "AU", "Pacific"),
    ("United Kingdom", "GB", "Europe"),
]

CATEGORIES = [
    ("Bikes", ["Mountain Bikes", "Road Bikes", "Touring Bikes"]),
    ("Components", ["Handlebars", "Brakes", "Chains", "Wheels"]),
    ("Clothing", ["Jerseys", "Shorts", "Gloves", "Caps"]),
    ("Accessories", ["Helmets", "Bottles and Cages", "Tires and Tubes"]),
]

PRICE_RANGES = {
    "Bikes": (500.0, 3500.0),
    "Components": (20.0, 450.0),
    "Clothing": (8.0, 90.0),
    "Accessories": (4.0, 60.0),
}

RAW_MATERIALS = ["Adjustable Race", "Bearing Ball", "Chainring Bolts", "Headset Ball Bearings", "Lock Ring"]

# (location_id, name)
LOCATIONS = [
    (1, "Tool Crib"),
    (6, "Miscellaneous Storage"),
    (7, "Finished Goods Storage"),
    (50, "Subassembly"),
    (60, "Final Assembly"),
]

DISCOUNTS = [0.0, 0.0, 0.0, 0.0, 0.02, 0.05, 0.10, 0.15]
TAX_RATE = 0.08
FREIGHT_RATE = 0.025

DEFAULT_START = datetime(2011, 5, 31)
DEFAULT_END = datetime(2014, 6, 30)


# =============================================================================
# GENERATORS
# =============================================================================

class GeographyGenerator:
    """Generate countries/regions and sales territories"""

    def __init__(self, rng: np.random.RandomState):
        self.rng = rng

    def generate(self) -> Tuple[pl.DataFrame, pl.DataFrame]:
        countries = pl.DataFrame(
            {
                "country_region_code": [c[0] for c in COUNTRY_REGIONS],
                "name": [c[1] for c in COUNTRY_REGIONS],
            }
        )

        territories = []
        for territory_id, (name, code, group) in enumerate(TERRITORIES, start=1):
            sales_ytd = round(float(self.rng.uniform(2_000_000, 10_000_000)), 4)
            territories.append({
                "territory_id": territory_id,
                "name": name,
                "country_region_code": code,
                "group_name": group,
                "sales_ytd": sales_ytd,
                "sales_last_year": round(sales_ytd * float(self.rng.uniform(0.7, 1.3)), 4),
            })

        return countries, pl.DataFrame(territories)


class ProductGenerator:
    """Generate the product hierarchy, products and inventory"""

    def __init__(self, fake: Faker, rng: np.random.RandomState):
        self.fake = fake
        self.rng = rng

    def generate(self, products_per_subcategory: int = 4) -> Dict[str, pl.DataFrame]:
        categories = []
        subcategories = []
        products = []

        subcategory_id = 0
        product_id = 0
        for category_id, (category, names) in enumerate(CATEGORIES, start=1):
            categories.append({"product_category_id": category_id, "name": category})
            low, high = PRICE_RANGES[category]

            for subcategory in names:
                subcategory_id += 1
                subcategories.append({
                    "product_subcategory_id": subcategory_id,
                    "product_category_id": category_id,
                    "name": subcategory,
                })

                for variant in range(1, products_per_subcategory + 1):
                    product_id += 1
                    list_price = round(float(self.rng.uniform(low, high)), 2)
                    color = self.fake.color_name()
                    products.append({
                        "product_id": product_id,
                        "name": f"{subcategory.rstrip('s')} {color} {variant:02d}",
                        "product_number": f"{category[:2].upper()}-{product_id:05d}",
                        "product_subcategory_id": subcategory_id,
                        "list_price": list_price,
                        "standard_cost": round(list_price * float(self.rng.uniform(0.4, 0.7)), 2),
                    })

        # Raw materials carry no subcategory and are never sold
        for material in RAW_MATERIALS:
            product_id += 1
            products.append({
                "product_id": product_id,
                "name": material,
                "product_number": f"RM-{product_id:05d}",
                "product_subcategory_id": None,
                "list_price": 0.0,
                "standard_cost": 0.0,
            })

        products_df = pl.DataFrame(products, schema_overrides={"product_subcategory_id": pl.Int64})

        return {
            "product_category": pl.DataFrame(categories),
            "product_subcategory": pl.DataFrame(subcategories),
            "product": products_df,
            "product_inventory": self._inventory(products_df["product_id"].to_list()),
        }

    def _inventory(self, product_ids: List[int]) -> pl.DataFrame:
        rows = []
        location_ids = [loc[0] for loc in LOCATIONS]
        for product_id in product_ids:
            # Most products are stocked in more than one location
            n_locations = int(self.rng.choice([1, 2, 3], p=[0.3, 0.5, 0.2]))
            for location_id in sorted(self.rng.choice(location_ids, size=n_locations, replace=False)):
                rows.append({
                    "product_id": product_id,
                    "location_id": int(location_id),
                    "shelf": "ABCDEFG"[int(self.rng.randint(0, 7))],
                    "bin": int(self.rng.randint(1, 60)),
                    "quantity": int(self.rng.randint(0, 800)),
                })
        return pl.DataFrame(rows)


class CustomerGenerator:
    """Generate customers attached to territories"""

    def __init__(self, rng: np.random.RandomState):
        self.rng = rng

    def generate(self, n: int, territory_ids: List[int]) -> pl.DataFrame:
        customers = []
        for customer_id in range(1, n + 1):
            is_store = self.rng.random_sample() < 0.3
            customers.append({
                "customer_id": customer_id,
                "person_id": None if is_store else 10_000 + customer_id,
                "store_id": 200 + customer_id if is_store else None,
                "territory_id": int(self.rng.choice(territory_ids)),
                "account_number": f"AW{customer_id:08d}",
            })
        return pl.DataFrame(
            customers,
            schema_overrides={"person_id": pl.Int64, "store_id": pl.Int64},
        )


class OrderGenerator:
    """Generate order headers and lines"""

    def __init__(
        self,
        customers_df: pl.DataFrame,
        products_df: pl.DataFrame,
        rng: np.random.RandomState,
    ):
        self.customers = (
            customers_df.select(["customer_id", "territory_id"]).to_dicts() if customers_df.height else []
        )
        # Only finished goods are sold
        self.products = (
            products_df
            .filter(pl.col("product_subcategory_id").is_not_null())
            .select(["product_id", "list_price"])
            .to_dicts()
        )
        self.rng = rng

    def generate(
        self,
        n: int = 2000,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> Tuple[pl.DataFrame, pl.DataFrame]:
        """Generate n orders with lines"""
        if n > 0 and not self.customers:
            raise ValueError("Cannot generate orders without customers")
        if n > 0 and not self.products:
            raise ValueError("Cannot generate orders without sellable products")

        start_date = start_date or DEFAULT_START
        end_date = end_date or DEFAULT_END
        total_days = max((end_date - start_date).days, 0)

        orders = []
        lines = []
        detail_id = 0

        for order_id in range(1, n + 1):
            customer = self.customers[int(self.rng.randint(0, len(self.customers)))]
            order_date = start_date + timedelta(days=int(self.rng.randint(0, total_days + 1)))

            num_lines = int(self.rng.choice([1, 2, 3, 4, 5], p=[0.40, 0.30, 0.15, 0.10, 0.05]))
            subtotal = 0.0

            for _ in range(num_lines):
                detail_id += 1
                product = self.products[int(self.rng.randint(0, len(self.products)))]
                order_qty = int(self.rng.choice([1, 2, 3, 4, 6], p=[0.55, 0.25, 0.10, 0.06, 0.04]))
                unit_price = product["list_price"]
                discount = float(self.rng.choice(DISCOUNTS))
                line_total = round(order_qty * unit_price * (1 - discount), 6)

                lines.append({
                    "sales_order_detail_id": detail_id,
                    "sales_order_id": order_id,
                    "product_id": product["product_id"],
                    "order_qty": order_qty,
                    "unit_price": unit_price,
                    "unit_price_discount": discount,
                    "line_total": line_total,
                })
                subtotal += line_total

            subtotal = round(subtotal, 4)
            tax_amt = round(subtotal * TAX_RATE, 4)
            freight = round(subtotal * FREIGHT_RATE, 4)

            orders.append({
                "sales_order_id": order_id,
                "order_date": order_date,
                "customer_id": customer["customer_id"],
                "territory_id": customer["territory_id"],
                "subtotal": subtotal,
                "tax_amt": tax_amt,
                "freight": freight,
                "total_due": round(subtotal + tax_amt + freight, 4),
            })

        return pl.DataFrame(orders), pl.DataFrame(lines)


# =============================================================================
# MAIN GENERATOR
# =============================================================================

class SampleDataGenerator:
    """
    Build the full sample dataset.

    The same seed always yields the same dataset.

    Example:
        data = SampleDataGenerator(seed=42).generate_all(n_orders=500)
        data["sales_order_header"].height
    """

    def __init__(self, seed: int = 42):
        self.seed = seed
        self.rng = np.random.RandomState(seed)
        self.fake = Faker()
        self.fake.seed_instance(seed)

    def generate_all(
        self,
        n_customers: int = 300,
        n_orders: int = 2000,
        products_per_subcategory: int = 4,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> Dict[str, pl.DataFrame]:
        """Generate every table, keyed by table name, in load order"""
        countries, territories = GeographyGenerator(self.rng).generate()
        product_tables = ProductGenerator(self.fake, self.rng).generate(products_per_subcategory)
        customers = CustomerGenerator(self.rng).generate(
            n_customers, territories["territory_id"].to_list()
        )
        orders, lines = OrderGenerator(customers, product_tables["product"], self.rng).generate(
            n_orders, start_date=start_date, end_date=end_date
        )

        data = {
            "country_region": countries,
            "sales_territory": territories,
            "product_category": product_tables["product_category"],
            "product_subcategory": product_tables["product_subcategory"],
            "product": product_tables["product"],
            "product_inventory": product_tables["product_inventory"],
            "customer": customers,
            "sales_order_header": orders,
            "sales_order_detail": lines,
        }

        logger.info(
            "Sample data generated",
            seed=self.seed,
            **{name: df.height for name, df in data.items()},
        )
        return data
