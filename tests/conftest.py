"""Shared fixtures: an in-memory database wired into the app."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ENVIRONMENT", "test")

from datetime import datetime, timedelta, timezone  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from amper_tracker.core.database import Base, get_db  # noqa: E402
from amper_tracker.main import app  # noqa: E402
from amper_tracker.models.product import Product  # noqa: E402
from amper_tracker.models.reading import AmperReading  # noqa: E402
from amper_tracker.services.products import create_product  # noqa: E402


@pytest.fixture
def test_db():
    """Create an in-memory test database."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = testing_session_local()
    try:
        yield db
    finally:
        db.close()
        engine.dispose()


@pytest.fixture
def client(test_db):
    """Create a test client with database override."""

    def override_get_db():
        try:
            yield test_db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def product(test_db) -> Product:
    """A product with three sensor channels."""
    return create_product(test_db, "Washing Machine Monitor", ["Motor", "Heater", "Circuit A"])


@pytest.fixture
def now() -> datetime:
    return datetime.now(timezone.utc)


@pytest.fixture
def add_reading(test_db, now):
    """Factory inserting a reading ``minutes_ago`` minutes in the past."""

    def _add(
        product: Product,
        username: str,
        amper: float,
        sensor: str | None = None,
        minutes_ago: float = 1,
    ) -> AmperReading:
        reading = AmperReading(
            username=username,
            amper=amper,
            product_id=product.id,
            sensor=sensor,
            created_at=now - timedelta(minutes=minutes_ago),
        )
        test_db.add(reading)
        test_db.commit()
        test_db.refresh(reading)
        return reading

    return _add
