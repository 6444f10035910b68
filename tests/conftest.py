import os
import sys
from datetime import datetime, timedelta
from pathlib import Path
import pytest

# Ensure project root is on sys.path so tests can import 'shopfloor' package
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Tests always run against a local sqlite file, never the configured MySQL
os.environ["DATABASE_URL"] = "sqlite:///./test_shopfloor.db"

# Ensure tests run against a clean DB schema for each test to avoid stale sqlite schema issues
from shopfloor.database import Base, SessionLocal, engine
from shopfloor import crud, schemas
from shopfloor.core import Actor, MemoryNotificationSink, WorkflowOrchestrator
from shopfloor.models.enums import UserRole


@pytest.fixture(autouse=True)
def reset_db():
    # Drop all and re-create so the test DB matches the current models exactly
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def sink():
    return MemoryNotificationSink()


@pytest.fixture
def workflow(db, sink):
    return WorkflowOrchestrator(db, notifier=sink)


@pytest.fixture
def make_location(db):
    def _make(name, used_order, **kwargs):
        return crud.create_location(db, schemas.LocationCreate(name=name, used_order=used_order, **kwargs))
    return _make


@pytest.fixture
def make_order(workflow):
    counter = {"n": 0}

    def _make(total_quantity=10, location_ids=None, actor=None, **kwargs):
        counter["n"] += 1
        data = schemas.OrderCreate(
            order_number=kwargs.pop("order_number", f"SO-{counter['n']:04d}"),
            reference_number=kwargs.pop("reference_number", f"REF-{counter['n']}"),
            client=kwargs.pop("client", "ACME"),
            due_date=kwargs.pop("due_date", datetime.utcnow() + timedelta(days=7)),
            total_quantity=total_quantity,
            location_ids=location_ids,
            **kwargs,
        )
        return workflow.create_order(data, actor)
    return _make


@pytest.fixture
def manager(db):
    user = crud.create_user(db, "manager1", "pw-manager", full_name="Line Manager", role=UserRole.manager)
    return Actor(user_id=user.id, role=UserRole.manager)


@pytest.fixture
def operator(db):
    user = crud.create_user(db, "op1", "pw-op", full_name="Operator", role=UserRole.shop)
    return Actor(user_id=user.id, role=UserRole.shop)
