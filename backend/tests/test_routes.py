"""
Wanderlust Backend — HTTP Route Tests
=======================================

What:  End-to-end tests through create_app(): routing, validation, method
       override, redirects, rendered pages and the error handler.
How:   HTTPX AsyncClient over ASGITransport; the database is the in-memory
       SQLite engine from conftest.py. Redirects are asserted, not followed.

What we test:
    ✅ POST /listings → 302 /listings, and the listing shows up in the index
    ✅ Invalid payloads → 400 with the joined messages, nothing persisted
    ✅ /listings/new is not mistaken for a listing ID
    ✅ Unknown / malformed IDs → 404 error page; unknown routes → 404
    ✅ Form PUT/DELETE through the `_method` override
    ✅ Review add/delete round trip and cascading delete through HTTP
    ✅ A failed commit or an unexpected error renders a 500 page with a request ID
"""

import logging
from html import escape
from uuid import uuid4

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from wanderlust.exceptions import DEFAULT_ERROR_MESSAGE
from wanderlust.models.listing import Listing
from wanderlust.models.review import Review
from wanderlust.services.listing_service import ListingService

from conftest import count_reviews, fetch_listing, seed_listing


def listing_form(fields, **extra):
    """Encode listing fields the way the HTML form posts them."""
    data = {f"listing[{key}]": str(value) for key, value in fields.items()}
    data.update(extra)
    return data


class TestRootAndHealth:

    @pytest.mark.asyncio
    async def test_root(self, test_client):
        response = await test_client.get("/")

        assert response.status_code == 200
        assert response.text == "Hi, I am root"

    @pytest.mark.asyncio
    async def test_health(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"

    @pytest.mark.asyncio
    async def test_request_id_header(self, test_client):
        generated = await test_client.get("/")
        echoed = await test_client.get("/", headers={"X-Request-ID": "trace-42"})

        assert len(generated.headers["X-Request-ID"]) == 8
        assert echoed.headers["X-Request-ID"] == "trace-42"


class TestListingRoutes:

    @pytest.mark.asyncio
    async def test_create_redirects_and_appears_in_index(self, test_client):
        response = await test_client.post(
            "/listings",
            json={"listing": {"title": "Cabin", "price": 100, "location": "X", "country": "Y"}},
        )

        assert response.status_code == 302
        assert response.headers["location"] == "/listings"

        index = await test_client.get("/listings")
        assert index.status_code == 200
        assert "Cabin" in index.text

    @pytest.mark.asyncio
    async def test_create_from_html_form(self, test_client, listing_fields):
        response = await test_client.post("/listings", data=listing_form(listing_fields))

        assert response.status_code == 302
        index = await test_client.get("/listings")
        assert "Cozy Beachfront Cottage" in index.text

    @pytest.mark.asyncio
    @pytest.mark.parametrize("missing", ["title", "price", "location", "country"])
    async def test_create_missing_required_field_is_rejected(
        self, test_client, listing_fields, missing
    ):
        del listing_fields[missing]

        response = await test_client.post("/listings", json={"listing": listing_fields})

        assert response.status_code == 400
        assert escape(f'"listing.{missing}" is required') in response.text
        index = await test_client.get("/listings")
        assert "Cozy Beachfront Cottage" not in index.text

    @pytest.mark.asyncio
    async def test_create_reports_every_violation(self, test_client):
        response = await test_client.post("/listings", json={"listing": {"price": -1}})

        assert response.status_code == 400
        expected = (
            '"listing.title" is required,'
            '"listing.price" must be greater than or equal to 0,'
            '"listing.location" is required,'
            '"listing.country" is required'
        )
        assert escape(expected) in response.text

    @pytest.mark.asyncio
    async def test_create_with_malformed_json(self, test_client):
        response = await test_client.post(
            "/listings", content=b"{not json", headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 400
        assert "Request body is not valid JSON" in response.text

    @pytest.mark.asyncio
    async def test_new_form_is_not_treated_as_an_id(self, test_client):
        response = await test_client.get("/listings/new")

        assert response.status_code == 200
        assert "Create a New Listing" in response.text
        assert 'name="listing[title]"' in response.text

    @pytest.mark.asyncio
    async def test_show_listing(self, test_client, session_factory, listing_fields):
        listing_id = await seed_listing(session_factory, listing_fields, reviews=2)

        response = await test_client.get(f"/listings/{listing_id}")

        assert response.status_code == 200
        assert "Cozy Beachfront Cottage" in response.text
        assert "Review number 0" in response.text
        assert "Review number 1" in response.text

    @pytest.mark.asyncio
    async def test_show_unknown_listing_is_404(self, test_client):
        response = await test_client.get(f"/listings/{uuid4()}")

        assert response.status_code == 404
        assert "Listing not found!" in response.text

    @pytest.mark.asyncio
    async def test_show_malformed_id_is_404(self, test_client):
        response = await test_client.get("/listings/not-a-real-id")

        assert response.status_code == 404
        assert "Listing not found!" in response.text

    @pytest.mark.asyncio
    async def test_edit_form_prefilled(self, test_client, session_factory, listing_fields):
        listing_id = await seed_listing(session_factory, listing_fields)

        response = await test_client.get(f"/listings/{listing_id}/edit")

        assert response.status_code == 200
        assert 'value="Cozy Beachfront Cottage"' in response.text
        assert 'name="_method" value="PUT"' in response.text

    @pytest.mark.asyncio
    async def test_edit_form_unknown_listing_is_404(self, test_client):
        response = await test_client.get(f"/listings/{uuid4()}/edit")

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_update_via_method_override_keeps_image(
        self, test_client, session_factory, listing_fields
    ):
        listing_id = await seed_listing(session_factory, listing_fields)
        changes = dict(listing_fields, title="Renamed", image="")

        response = await test_client.post(
            f"/listings/{listing_id}", data=listing_form(changes, _method="PUT")
        )

        assert response.status_code == 302
        assert response.headers["location"] == f"/listings/{listing_id}"
        listing = await fetch_listing(session_factory, listing_id)
        assert listing.title == "Renamed"
        assert listing.image_url == listing_fields["image"]

    @pytest.mark.asyncio
    async def test_update_with_new_image(self, test_client, session_factory, listing_fields):
        listing_id = await seed_listing(session_factory, listing_fields)
        changes = dict(listing_fields, image="https://images.example.com/new.jpg")

        response = await test_client.put(f"/listings/{listing_id}", json={"listing": changes})

        assert response.status_code == 302
        listing = await fetch_listing(session_factory, listing_id)
        assert listing.image == {"url": "https://images.example.com/new.jpg", "filename": "listingimage"}

    @pytest.mark.asyncio
    async def test_update_invalid_payload_is_400(self, test_client, session_factory, listing_fields):
        listing_id = await seed_listing(session_factory, listing_fields)

        response = await test_client.put(
            f"/listings/{listing_id}", json={"listing": dict(listing_fields, price=-10)}
        )

        assert response.status_code == 400
        listing = await fetch_listing(session_factory, listing_id)
        assert listing.price == 1500.0

    @pytest.mark.asyncio
    async def test_update_unknown_listing_is_404(self, test_client, listing_fields):
        response = await test_client.put(f"/listings/{uuid4()}", json={"listing": listing_fields})

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_via_method_override_cascades(
        self, test_client, session_factory, listing_fields
    ):
        listing_id = await seed_listing(session_factory, listing_fields, reviews=3)
        assert await count_reviews(session_factory, listing_id) == 3

        response = await test_client.post(f"/listings/{listing_id}", data={"_method": "DELETE"})

        assert response.status_code == 302
        assert response.headers["location"] == "/listings"
        assert await fetch_listing(session_factory, listing_id) is None
        assert await count_reviews(session_factory, listing_id) == 0

    @pytest.mark.asyncio
    async def test_delete_unknown_listing_is_404(self, test_client):
        response = await test_client.delete(f"/listings/{uuid4()}")

        assert response.status_code == 404


class TestReviewRoutes:

    @pytest.mark.asyncio
    async def test_add_review_from_form(self, test_client, session_factory, listing_fields):
        listing_id = await seed_listing(session_factory, listing_fields)

        response = await test_client.post(
            f"/listings/{listing_id}/reviews",
            data={"review[comment]": "Loved the sunsets", "review[rating]": "4"},
        )

        assert response.status_code == 302
        assert response.headers["location"] == f"/listings/{listing_id}"
        page = await test_client.get(f"/listings/{listing_id}")
        assert "Loved the sunsets" in page.text
        assert await count_reviews(session_factory, listing_id) == 1

    @pytest.mark.asyncio
    async def test_add_review_without_comment_is_400(
        self, test_client, session_factory, listing_fields
    ):
        listing_id = await seed_listing(session_factory, listing_fields)

        response = await test_client.post(
            f"/listings/{listing_id}/reviews", data={"review[rating]": "3"}
        )

        assert response.status_code == 400
        assert escape('"review.comment" is required') in response.text
        assert await count_reviews(session_factory, listing_id) == 0

    @pytest.mark.asyncio
    async def test_add_review_to_unknown_listing_is_404(self, test_client, review_fields):
        response = await test_client.post(
            f"/listings/{uuid4()}/reviews", json={"review": review_fields}
        )

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_review_via_query_override(
        self, test_client, session_factory, listing_fields, review_fields
    ):
        listing_id = await seed_listing(session_factory, listing_fields)
        await test_client.post(f"/listings/{listing_id}/reviews", json={"review": review_fields})
        async with session_factory() as session:
            review_id = (
                await session.execute(select(Review.id).where(Review.listing_id == listing_id))
            ).scalar_one()

        response = await test_client.post(
            f"/listings/{listing_id}/reviews/{review_id}?_method=DELETE"
        )

        assert response.status_code == 302
        assert response.headers["location"] == f"/listings/{listing_id}"
        assert await count_reviews(session_factory, listing_id) == 0
        page = await test_client.get(f"/listings/{listing_id}")
        assert review_fields["comment"] not in page.text

    @pytest.mark.asyncio
    async def test_delete_unknown_review_is_404(self, test_client, session_factory, listing_fields):
        listing_id = await seed_listing(session_factory, listing_fields)

        response = await test_client.delete(f"/listings/{listing_id}/reviews/{uuid4()}")

        assert response.status_code == 404
        assert "Review not found!" in response.text


class TestUnmatchedRoutes:

    @pytest.mark.asyncio
    async def test_unknown_path_is_404(self, test_client):
        response = await test_client.get("/nowhere/at/all")

        assert response.status_code == 404
        assert "Page not found!" in response.text

    @pytest.mark.asyncio
    async def test_unsupported_method_is_404(self, test_client):
        response = await test_client.patch("/listings")

        assert response.status_code == 404
        assert "Page not found!" in response.text

    @pytest.mark.asyncio
    async def test_unsupported_override_value_is_ignored(self, test_client, listing_fields):
        response = await test_client.post(
            "/listings", data=listing_form(listing_fields, _method="TRACE")
        )

        # Still a plain POST → create
        assert response.status_code == 302
        assert response.headers["location"] == "/listings"


class TestServerErrors:

    @pytest.mark.asyncio
    async def test_failed_commit_is_500_not_redirect(
        self, test_client, session_factory, listing_fields, monkeypatch
    ):
        async def failing_commit(self):
            raise SQLAlchemyError("disk full")

        monkeypatch.setattr(AsyncSession, "commit", failing_commit)

        response = await test_client.post("/listings", json={"listing": listing_fields})

        assert response.status_code == 500
        assert "location" not in response.headers
        async with session_factory() as session:
            stored = (await session.execute(select(func.count()).select_from(Listing))).scalar_one()
        assert stored == 0

    @pytest.mark.asyncio
    async def test_listing_visible_as_soon_as_redirect_arrives(self, test_client, session_factory):
        response = await test_client.post(
            "/listings",
            json={"listing": {"title": "Cabin", "price": 100, "location": "X", "country": "Y"}},
        )

        assert response.status_code == 302
        async with session_factory() as session:
            titles = (await session.execute(select(Listing.title))).scalars().all()
        assert titles == ["Cabin"]

    @pytest.mark.asyncio
    async def test_unexpected_error_renders_generic_page(self, test_client, monkeypatch, caplog):
        async def broken(self, db):
            raise RuntimeError("connection reset")

        monkeypatch.setattr(ListingService, "list_listings", broken)

        with caplog.at_level(logging.INFO, logger="wanderlust"):
            response = await test_client.get("/listings", headers={"X-Request-ID": "rid-500"})

        assert response.status_code == 500
        assert DEFAULT_ERROR_MESSAGE in response.text
        assert "connection reset" not in response.text
        assert response.headers["X-Request-ID"] == "rid-500"
        assert any(
            record.name == "wanderlust.access" and " 500 " in record.getMessage()
            for record in caplog.records
        )
