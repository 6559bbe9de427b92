"""Seed script to populate the database with a product catalogue and sample readings."""

from datetime import datetime, timedelta, timezone

from sqlalchemy.orm import Session

from amper_tracker.core.database import Base, SessionLocal, engine
from amper_tracker.models.product import Product
from amper_tracker.models.reading import AmperReading
from amper_tracker.services.products import create_product

SAMPLE_PRODUCTS = {
    "Smart Plug": ["Main"],
    "Washing Machine Monitor": ["Motor", "Heater", "Pump"],
    "Workshop Panel": ["Circuit A", "Circuit B", "Compressor"],
}

SAMPLE_USERS = ["alice", "bob", "carol"]


def seed_database(db: Session) -> None:
    """Seed the database with sample data."""
    # Check if data already exists
    if db.query(Product).first():
        print("Database already has products. Skipping seed.")
        return

    print("Seeding database...")

    products = [create_product(db, name, sensors) for name, sensors in SAMPLE_PRODUCTS.items()]
    for product in products:
        print(f"Created product: {product.name} (ID: {product.id}, sensors: {product.sensors})")

    # One reading every 30 minutes over the past 2 days, per user and product
    now = datetime.now(timezone.utc)
    count = 0
    for step in range(96):
        created_at = now - timedelta(minutes=30 * step)
        for user_index, username in enumerate(SAMPLE_USERS):
            for product in products:
                sensor = product.sensors[(step + user_index) % len(product.sensors)]
                # Cycles through 0, 0.25, ..., 2.25 so every band gets samples
                amper = ((step + user_index) % 10) * 0.25
                db.add(
                    AmperReading(
                        username=username,
                        amper=amper,
                        product_id=product.id,
                        sensor=sensor,
                        created_at=created_at,
                    )
                )
                count += 1

    db.commit()

    print(f"Created {count} readings for users: {', '.join(SAMPLE_USERS)}")
    print("\nSeed data created successfully!")


if __name__ == "__main__":
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        seed_database(session)
    finally:
        session.close()
