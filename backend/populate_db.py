import os
import random
import sys
from decimal import Decimal

import pandas as pd

# Add 'backend' folder to Python path
sys.path.append(os.path.abspath(os.path.dirname(__file__)))

from database import SessionLocal, init_db
from repositories.order import OrderRepository
from repositories.product import ProductRepository
from schemas.order import OrderCreate, OrderLineIn
from schemas.product import ProductCreate
from services.order import OrderService
from services.product import ProductService

# Configuration
DATA_DIR = os.path.join(os.path.dirname(__file__), "data_source")
PRODUCTS_FILE = os.path.join(DATA_DIR, "products.csv")
SAMPLE_ORDERS = 5
MAX_LINES_PER_ORDER = 3
# End Configuration


def load_products(service: ProductService) -> list:
    """Loads the catalog CSV and creates every product whose SKU is not taken yet."""
    try:
        products_df = pd.read_csv(PRODUCTS_FILE, dtype={"sku": str})
    except FileNotFoundError:
        print(f"Error: products file not found at {PRODUCTS_FILE}.")
        return []

    # Clean data
    products_df.dropna(subset=["sku", "name", "category", "price"], inplace=True)
    products_df["description"] = products_df["description"].fillna("")
    products_df["stock_quantity"] = products_df["stock_quantity"].fillna(0).astype(int)
    products_df["is_active"] = products_df["is_active"].fillna(True).astype(bool)

    created = []
    print(f"Inserting {len(products_df)} products...")
    for _, row in products_df.iterrows():
        dto = ProductCreate(
            name=row["name"],
            description=row["description"],
            sku=row["sku"],
            category=row["category"],
            price=Decimal(str(row["price"])),
            stock_quantity=row["stock_quantity"],
            is_active=row["is_active"],
        )
        result = service.create(dto)
        if result.success:
            created.append(result.data)
        else:
            print(f"Skipped {row['sku']}: {'; '.join(result.errors)}")
    return created


def create_sample_orders(service: OrderService, products: list) -> int:
    """Creates a handful of orders over random active products."""
    candidates = [p for p in products if p.is_active]
    if not candidates:
        print("No active products, skipping orders.")
        return 0

    created = 0
    for n in range(1, SAMPLE_ORDERS + 1):
        picked = random.sample(candidates, k=min(len(candidates), random.randint(1, MAX_LINES_PER_ORDER)))
        dto = OrderCreate(
            number=f"SEED-{n:04d}",
            description=f"Sample order number {n} generated by the seeder",
            products=[OrderLineIn(product_id=p.id, quantity=random.randint(1, 5)) for p in picked],
        )
        result = service.create(dto)
        if not result.success:
            print(f"Skipped order {dto.number}: {'; '.join(result.errors)}")
            continue
        created += 1

        # Move some orders along the workflow
        if n % 3 == 0:
            service.approve_order(result.data.id)
        elif n % 4 == 0:
            service.cancel_order(result.data.id)
    return created


def populate_database():
    """Main execution function to populate database."""
    init_db()
    session = SessionLocal()
    try:
        products = ProductRepository(session)
        product_service = ProductService(products)
        order_service = OrderService(OrderRepository(session), products)

        created_products = load_products(product_service)
        print(f"Products inserted: {len(created_products)}. Creating orders...")

        created_orders = create_sample_orders(order_service, created_products)
        print(f"Orders inserted: {created_orders}.")
    finally:
        session.close()


if __name__ == "__main__":
    populate_database()
