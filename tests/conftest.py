"""
Test Configuration and Fixtures
Provides shared test setup for all test cases
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("FRONTEND_ORIGIN", "http://localhost:3000")

import sys
import uuid
from datetime import datetime, timedelta, timezone
from unittest.mock import patch, AsyncMock
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool
from app.main import app
from app.database.connection import Base
from app.models import Amenity, Category, SubCategory, Property, User
from app.models.enums import CategoryType, PropertyPurpose, RentFrequency
from app.utils.security import get_password_hash

# Test database URL (use in-memory SQLite for testing)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

TEST_PASSWORD = "StrongPass123"

SERVICE_MODULES = [
    'app.services.auth_service',
    'app.services.property_service',
    'app.services.amenity_service',
]


class TestSessionContext:
    """Hands the shared test session to `async with AsyncSessionLocal()` callers"""
    def __init__(self, session):
        self.session = session

    async def __aenter__(self):
        return self.session

    async def __aexit__(self, *args):
        pass


@pytest_asyncio.fixture(scope="function")
async def db_session():
    """Create a fresh in-memory database and session for each test"""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture(scope="function")
def mailer():
    """Capture outgoing email instead of talking to SMTP"""
    with patch("app.services.mailer_service.send_html", new_callable=AsyncMock) as mock_send:
        yield mock_send


@pytest_asyncio.fixture(scope="function")
async def client(db_session, mailer):
    """Create test HTTP client"""
    patches = []
    for module_name in SERVICE_MODULES:
        module = sys.modules.get(module_name)
        if module is not None and hasattr(module, 'AsyncSessionLocal'):
            patches.append(patch.object(module, 'AsyncSessionLocal', lambda: TestSessionContext(db_session)))

    for p in patches:
        p.start()

    try:
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac
    finally:
        for p in patches:
            p.stop()
        app.dependency_overrides.clear()


async def persist(db_session, *objects):
    """Insert rows and detach them so services load fresh copies"""
    db_session.add_all(objects)
    await db_session.commit()
    db_session.expunge_all()


@pytest_asyncio.fixture(scope="function")
async def catalog(db_session):
    """Seed residential/commercial categories with a couple of subcategories and amenities"""
    residential = Category(id="cat_residential", name="Residential", type=CategoryType.RESIDENTIAL, sort_order=1)
    commercial = Category(id="cat_commercial", name="Commercial", type=CategoryType.COMMERCIAL, sort_order=2)
    apartment = SubCategory(id="sub_apartment", name="Apartment", sort_order=1, category_id=residential.id)
    villa = SubCategory(id="sub_villa", name="Villa", sort_order=2, category_id=residential.id)
    office = SubCategory(id="sub_office", name="Office", sort_order=1, category_id=commercial.id)
    balcony = Amenity(id=str(uuid.uuid4()), name="Balcony")
    gym = Amenity(id=str(uuid.uuid4()), name="Shared Gym")

    await persist(db_session, residential, commercial, apartment, villa, office, balcony, gym)

    return {
        "residential": "cat_residential",
        "commercial": "cat_commercial",
        "apartment": "sub_apartment",
        "villa": "sub_villa",
        "office": "sub_office",
    }


@pytest.fixture(scope="function")
def make_property(db_session, catalog):
    """Factory inserting listings; later calls get later created_at values"""
    base_time = datetime(2026, 1, 1, tzinfo=timezone.utc)
    counter = {"n": 0}

    async def _make(**overrides):
        counter["n"] += 1
        values = {
            "id": str(uuid.uuid4()),
            "title": f"Listing {counter['n']}",
            "description": "Bright apartment close to the metro",
            "purpose": PropertyPurpose.SALE,
            "category_id": catalog["residential"],
            "sub_category_id": catalog["apartment"],
            "price": 1_000_000,
            "bedrooms": 2,
            "bathrooms": 2,
            "area_sqft": 1200,
            "city": "Dubai",
            "community": "Dubai Marina",
            "cover_image_url": "https://img.example.com/cover.jpg",
            "image_urls": [],
            "created_at": base_time + timedelta(minutes=counter["n"]),
        }
        values.update(overrides)
        if values["purpose"] == PropertyPurpose.RENT and "rent_frequency" not in overrides:
            values["rent_frequency"] = RentFrequency.YEARLY
        prop = Property(**values)
        await persist(db_session, prop)
        return values["id"]

    return _make


@pytest_asyncio.fixture(scope="function")
async def verified_user(db_session):
    """A user that already completed email verification"""
    user = User(
        id=str(uuid.uuid4()),
        email=f"user_{uuid.uuid4().hex[:10]}@example.com",
        hashed_password=get_password_hash(TEST_PASSWORD),
        name="Test Owner",
        phone="+971501234567",
        is_email_verified=True,
    )
    user_info = {"id": user.id, "email": user.email, "name": user.name, "phone": user.phone}
    await persist(db_session, user)
    return user_info


@pytest_asyncio.fixture(scope="function")
async def authenticated_client(client: AsyncClient, verified_user):
    """Log the verified user in and attach the bearer token to the client"""
    resp = await client.post("/auth/login", json={
        "email": verified_user["email"],
        "password": TEST_PASSWORD,
    })
    assert resp.status_code == 200, resp.text
    token = resp.json()["accessToken"]
    client.headers.update({"Authorization": f"Bearer {token}"})
    return client, verified_user
