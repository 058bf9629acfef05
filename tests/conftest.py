import os

# Settings are read at import time; configure before importing the app
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

from datetime import date
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from solidaria.core.enums import KermesseStatus
from solidaria.core.hashing import hash_password
from solidaria.core.jwt import create_access_token
from solidaria.database import Base, get_db
from solidaria.main import app
from solidaria.models import Dish, Ingredient, Kermesse, User

PASSWORD = "secret123"


@pytest.fixture(scope="session")
def password_hash():
    return hash_password(PASSWORD)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


# ---------------- FACTORIES ----------------

@pytest.fixture
def make_user(db, password_hash):
    def _make(username: str, full_name: str | None = None, phone: str = "60000000") -> User:
        user = User(
            username=username,
            email=f"{username}@example.com",
            password_hash=password_hash,
            full_name=full_name or username.title(),
            phone=phone,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def make_kermesse(db):
    def _make(
        organizer: User,
        name: str = "Kermesse Solidaria",
        financial_goal=None,
        status: KermesseStatus = KermesseStatus.ACTIVE,
    ) -> Kermesse:
        kermesse = Kermesse(
            name=name,
            slug=f"{name.lower().replace(' ', '-')}-{organizer.id}",
            description="Fundraiser",
            event_date=date(2026, 11, 14),
            organizer_id=organizer.id,
            beneficiary_name="Maria",
            beneficiary_reason="Surgery",
            financial_goal=Decimal(financial_goal) if financial_goal is not None else None,
            status=status.value,
        )
        db.add(kermesse)
        db.commit()
        db.refresh(kermesse)
        return kermesse

    return _make


@pytest.fixture
def make_dish(db):
    def _make(kermesse: Kermesse, price: str, name: str = "Dish", quantity_available: int = 100) -> Dish:
        dish = Dish(
            kermesse_id=kermesse.id,
            name=name,
            description="",
            price=Decimal(price),
            quantity_available=quantity_available,
        )
        db.add(dish)
        db.commit()
        db.refresh(dish)
        return dish

    return _make


@pytest.fixture
def make_ingredient(db):
    def _make(kermesse: Kermesse, needed: str, name: str = "Rice", unit: str = "kg") -> Ingredient:
        ingredient = Ingredient(
            kermesse_id=kermesse.id,
            name=name,
            quantity_needed=Decimal(needed),
            unit=unit,
        )
        db.add(ingredient)
        db.commit()
        db.refresh(ingredient)
        return ingredient

    return _make


@pytest.fixture
def organizer(make_user):
    return make_user("organizer", full_name="Olga Organizer")


@pytest.fixture
def buyer(make_user):
    return make_user("buyer", full_name="Bruno Buyer")


@pytest.fixture
def kermesse(make_kermesse, organizer):
    return make_kermesse(organizer, financial_goal="1000.00")


def auth_headers(user: User) -> dict:
    token = create_access_token(user.id, user.username)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def headers_for():
    return auth_headers
