"""
Wanderlust Backend — Test Configuration (conftest.py)
======================================================

What:  Shared pytest fixtures for the entire test suite.
Why:   Services and routes are tested against a real (in-memory SQLite)
       database, so relationship behaviour such as the cascading delete is
       exercised for real rather than mocked.

Fixture Hierarchy (all function-scoped, fresh per test):
    db_engine        in-memory SQLite engine with all tables created
    ├── session_factory
    │   ├── db_session   one AsyncSession for service-level tests
    │   └── test_client  HTTPX AsyncClient against create_app(), with
    │                    get_db_session overridden to use this engine
    └── listing_fields / review_fields: valid payload fields
"""

import os

# Override settings for testing BEFORE any application imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["LOG_LEVEL"] = "WARNING"

from typing import Any, Dict
from uuid import UUID

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import wanderlust.models  # noqa: F401
from wanderlust.database import Base, get_db_session
from wanderlust.main import create_app
from wanderlust.models.listing import Listing
from wanderlust.models.review import Review
from wanderlust.schemas.listing import ListingIn
from wanderlust.schemas.review import ReviewIn
from wanderlust.services.listing_service import listing_service
from wanderlust.services.review_service import review_service


# ══════════════════════════════════════════════════════════════════════════
# Database Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine():
    """
    In-memory SQLite engine with the schema created.

    StaticPool: every session shares the one connection, otherwise each new
    connection would see its own empty in-memory database.
    """
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def test_client(session_factory):
    """
    HTTPX AsyncClient wired to a fresh app instance.

    get_db_session is replaced by a dependency with the same commit/rollback
    behaviour, bound to the test engine. Redirects are not followed, so
    tests can assert on 302 responses.
    """
    app = create_app()

    async def override_get_db_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_get_db_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


# ══════════════════════════════════════════════════════════════════════════
# Payload Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def listing_fields() -> Dict[str, Any]:
    return {
        "title": "Cozy Beachfront Cottage",
        "description": "Escape to this charming beachfront cottage.",
        "image": "https://images.example.com/cottage.jpg",
        "price": 1500,
        "location": "Malibu",
        "country": "United States",
    }


@pytest.fixture
def review_fields() -> Dict[str, Any]:
    return {"comment": "Great stay, would come back!", "rating": 5}


# ══════════════════════════════════════════════════════════════════════════
# Helpers
# ══════════════════════════════════════════════════════════════════════════

async def seed_listing(session_factory, fields: Dict[str, Any], reviews: int = 0) -> UUID:
    """Create a listing (and `reviews` reviews) in its own committed session."""
    async with session_factory() as session:
        listing = await listing_service.create_listing(session, ListingIn(**fields))
        for i in range(reviews):
            await review_service.add_to_listing(
                session, listing.id, ReviewIn(comment=f"Review number {i}", rating=4)
            )
        await session.commit()
        return listing.id


async def fetch_listing(session_factory, listing_id: UUID):
    """Read a listing back in a fresh session (None if it does not exist)."""
    async with session_factory() as session:
        return await session.get(Listing, listing_id)


async def count_reviews(session_factory, listing_id: UUID) -> int:
    async with session_factory() as session:
        result = await session.execute(
            select(func.count()).select_from(Review).where(Review.listing_id == listing_id)
        )
        return result.scalar_one()
