"""
Wanderlust Backend — Listing Service (Listing Repository)
==========================================================

What:  CRUD operations over Listing rows, including the cascading delete of
       a listing's reviews.
Why:   Keeps every query and write about listings out of the route handlers.
How:   Stateless service; each call receives the request's AsyncSession.
       Writes only flush. get_db_session commits once the handler returns,
       so every multi-step write here is a single transaction.
Who:   Called by the listing and review route handlers, and by ReviewService.

Cascading delete:
    delete_listing() runs two statements in the request transaction:
        1. DELETE FROM reviews  WHERE listing_id = :id
        2. DELETE FROM listings WHERE id = :id
    If either fails the transaction rolls back and both tables are left as
    they were; the caller sees a 500 and can retry the same request.
"""

import logging
from typing import Any, Dict, List
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from wanderlust.config import settings
from wanderlust.exceptions import DatabaseError, NotFoundError
from wanderlust.models.listing import Listing
from wanderlust.models.review import Review
from wanderlust.schemas.listing import ListingIn

logger = logging.getLogger(__name__)


class ListingService:
    """
    Repository for listings.

    Responsibilities:
        - list_listings(): every listing, oldest first
        - get_listing(): one listing with its reviews loaded
        - create_listing() / update_listing(): persist validated fields
        - delete_listing(): remove a listing and all of its reviews

    Error Handling Strategy:
        A missing listing raises NotFoundError. SQLAlchemy failures are
        logged and wrapped in DatabaseError so no SQL detail reaches a page.
    """

    async def list_listings(self, db: AsyncSession) -> List[Listing]:
        try:
            result = await db.execute(select(Listing).order_by(Listing.created_at, Listing.id))
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing listings: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve listings. Please try again.",
                context={"error_type": type(e).__name__},
            )

    async def get_listing(self, db: AsyncSession, listing_id: UUID) -> Listing:
        """
        Retrieve a single listing with its reviews resolved.

        populate_existing: a listing already in the session's identity map
        gets its review collection reloaded, so reviews added or deleted
        earlier in the same session are reflected.

        Raises:
            NotFoundError: no listing with this ID (→ 404)
            DatabaseError: query execution failed (→ 500)
        """
        try:
            result = await db.execute(
                select(Listing)
                .where(Listing.id == listing_id)
                .options(selectinload(Listing.reviews))
                .execution_options(populate_existing=True)
            )
            listing = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching listing %s: %s", listing_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the listing. Please try again.",
                context={"listing_id": str(listing_id)},
            )

        if listing is None:
            raise NotFoundError(resource="Listing", resource_id=str(listing_id))
        return listing

    async def create_listing(self, db: AsyncSession, data: ListingIn) -> Listing:
        """
        Persist a new listing from validated fields.

        The image is stored as a {url, filename} pair; the filename is the
        configured placeholder, never derived from the URL.
        """
        listing = Listing(
            title=data.title,
            description=data.description,
            price=data.price,
            location=data.location,
            country=data.country,
            image_url=data.image,
            image_filename=settings.listing_image_filename,
        )
        try:
            db.add(listing)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error creating listing: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not save the listing. Please try again.",
                context={"error_type": type(e).__name__},
            )

        logger.info("Listing created: %s (%s)", listing.id, listing.title)
        return listing

    async def update_listing(
        self, db: AsyncSession, listing_id: UUID, data: ListingIn
    ) -> Listing:
        """
        Merge validated fields into an existing listing.

        Image rule:
            - no image URL submitted → existing url and filename are kept
            - image URL submitted    → url and filename are both replaced
        """
        listing = await self.get_listing(db, listing_id)

        # exclude_unset: an omitted optional field (description) keeps its value
        changes: Dict[str, Any] = data.model_dump(exclude={"image"}, exclude_unset=True)
        for name, value in changes.items():
            setattr(listing, name, value)

        if data.image:
            listing.image_url = data.image
            listing.image_filename = settings.listing_image_filename

        try:
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error updating listing %s: %s", listing_id, str(e))
            raise DatabaseError(
                message="Could not update the listing. Please try again.",
                context={"listing_id": str(listing_id)},
            )

        logger.info("Listing updated: %s", listing_id)
        return listing

    async def delete_listing(self, db: AsyncSession, listing_id: UUID) -> int:
        """
        Delete a listing and every review it references.

        Returns:
            Number of reviews deleted with the listing.

        Raises:
            NotFoundError: no listing with this ID
            DatabaseError: either delete failed (the transaction rolls back)
        """
        await self.get_listing(db, listing_id)

        try:
            # ── Step 1: reviews first, so no review ever points at nothing ──
            reviews_result = await db.execute(
                delete(Review).where(Review.listing_id == listing_id)
            )
            # ── Step 2: the listing itself ──────────────────────────────────
            await db.execute(delete(Listing).where(Listing.id == listing_id))
            await db.flush()
        except SQLAlchemyError as e:
            logger.error(
                "Cascading delete of listing %s failed: %s", listing_id, str(e), exc_info=True
            )
            raise DatabaseError(
                message="Could not delete the listing. Please try again.",
                context={"listing_id": str(listing_id)},
            )

        removed = reviews_result.rowcount or 0
        logger.info("Listing deleted: %s (with %d reviews)", listing_id, removed)
        return removed


listing_service = ListingService()
