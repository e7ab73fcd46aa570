"""
Wanderlust Backend — Review Service (Review Repository)
========================================================

What:  Adds reviews to a listing and removes them again.
Why:   A review never exists on its own; every operation is scoped to the
       parent listing, which is looked up first.
How:   The listing's review collection is the forward reference; the
       review's listing_id is the back-reference. Appending to the collection
       and inserting the review row are flushed together, as are detaching
       and deleting it, inside the request transaction.
"""

import logging
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.attributes import set_committed_value

from wanderlust.exceptions import DatabaseError, NotFoundError
from wanderlust.models.review import Review
from wanderlust.schemas.review import ReviewIn
from wanderlust.services.listing_service import ListingService, listing_service

logger = logging.getLogger(__name__)


class ReviewService:
    """Repository for reviews, always scoped to a parent listing."""

    def __init__(self, listings: ListingService = listing_service):
        self.listings = listings

    async def add_to_listing(
        self, db: AsyncSession, listing_id: UUID, data: ReviewIn
    ) -> Review:
        """
        Create a review and append it to the listing's review list.

        Raises:
            NotFoundError: the listing does not exist
            DatabaseError: the insert failed
        """
        listing = await self.listings.get_listing(db, listing_id)

        review = Review(comment=data.comment, rating=data.rating)
        listing.reviews.append(review)
        try:
            db.add(review)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error adding review to %s: %s", listing_id, str(e))
            raise DatabaseError(
                message="Could not save the review. Please try again.",
                context={"listing_id": str(listing_id)},
            )

        logger.info("Review %s added to listing %s", review.id, listing_id)
        return review

    async def remove_from_listing(
        self, db: AsyncSession, listing_id: UUID, review_id: UUID
    ) -> None:
        """
        Remove a review from the listing's list and delete the review record.

        Raises:
            NotFoundError: the listing does not exist, or the review is not
                           one of that listing's reviews
            DatabaseError: the delete failed
        """
        listing = await self.listings.get_listing(db, listing_id)

        review = next((r for r in listing.reviews if r.id == review_id), None)
        if review is None:
            raise NotFoundError(resource="Review", resource_id=str(review_id))

        try:
            await db.delete(review)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error deleting review %s: %s", review_id, str(e))
            raise DatabaseError(
                message="Could not delete the review. Please try again.",
                context={"listing_id": str(listing_id), "review_id": str(review_id)},
            )

        # The row is gone; drop it from the loaded collection without
        # recording a collection change for the next flush.
        set_committed_value(
            listing, "reviews", [r for r in listing.reviews if r is not review]
        )
        logger.info("Review %s removed from listing %s", review_id, listing_id)


review_service = ReviewService()
