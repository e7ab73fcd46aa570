"""
Wanderlust Backend — Review SQLAlchemy Model
==============================================

What:  ORM model representing the `reviews` table.
Why:   A review belongs to exactly one listing through `listing_id`; the
       listing reaches its reviews through `Listing.reviews`.

Index on listing_id:
    Every read of a listing loads its reviews (WHERE listing_id = :id), and
    deleting a listing deletes by the same predicate.
"""

import uuid
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Optional

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Integer, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from wanderlust.database import Base

if TYPE_CHECKING:
    from wanderlust.models.listing import Listing


class Review(Base):
    """Free-text feedback with an optional 1-5 rating, attached to one listing."""

    __tablename__ = "reviews"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    listing_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("listings.id"),
        nullable=False,
    )

    comment: Mapped[str] = mapped_column(Text, nullable=False)
    rating: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    listing: Mapped["Listing"] = relationship(back_populates="reviews")

    __table_args__ = (
        CheckConstraint(
            "rating IS NULL OR (rating >= 1 AND rating <= 5)",
            name="ck_reviews_rating_range",
        ),
        Index("idx_reviews_listing_id", "listing_id"),
    )

    def __repr__(self) -> str:
        return f"<Review(id={self.id}, listing_id={self.listing_id}, rating={self.rating})>"
