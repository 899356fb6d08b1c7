"""Test fixtures and configuration."""

import os

# Keep the module-level engine off the filesystem
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_JSON", "false")

from datetime import datetime
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from stayrules.database import Base, get_db
from stayrules.main import app
from stayrules.models import RuleAction, RuleType
from stayrules.services.rule_evaluator import PropertyTerms
from stayrules.services.rule_matcher import RuleSnapshot

TENANT = "tenant-a"


@pytest.fixture
def db_session():
    """Fresh in-memory database per test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def client(db_session):
    """Test client bound to the in-memory database."""
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app, headers={"X-Tenant-ID": TENANT})
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def terms():
    """Property with base price 200 and 1..30 night stays."""
    return PropertyTerms(
        property_id="prop-1",
        base_price=Decimal("200"),
        min_nights=1,
        max_nights=30,
        currency="BRL",
    )


@pytest.fixture
def make_rule():
    """Build a RuleSnapshot for prop-1 with sensible defaults."""
    counter = {"n": 0}

    def _make(**overrides) -> RuleSnapshot:
        counter["n"] += 1
        fields = dict(
            id=f"rule-{counter['n']:02d}",
            property_id="prop-1",
            type=RuleType.WEEKLY,
            action=RuleAction.BLOCK,
            day_indexes=(),
            action_value=None,
            valid_from=None,
            valid_until=None,
            priority=5,
            is_active=True,
            updated_at=datetime(2026, 1, 1, 12, 0, 0),
        )
        fields.update(overrides)
        return RuleSnapshot(**fields)

    return _make
