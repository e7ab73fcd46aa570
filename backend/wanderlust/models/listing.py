"""
Wanderlust Backend — Listing SQLAlchemy Model
===============================================

What:  ORM model representing the `listings` table.
Why:   Maps Python objects to database rows for type-safe database operations.
Who:   Used by ListingService / ReviewService and by Alembic for schema management.

Table Design Rationale:
    - UUID primary key: non-sequential, safe to expose in URLs
    - image_url + image_filename: the image is a {url, filename} pair; the
      filename is a configured placeholder because images are only linked
    - price CHECK (price >= 0): last line of defence behind payload validation
    - reviews: forward collection of the listing's reviews, oldest first.
      passive_deletes=True keeps SQLAlchemy from loading the collection on
      delete; ListingService.delete_listing removes reviews explicitly.
"""

import uuid
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Dict, List, Optional

from sqlalchemy import CheckConstraint, DateTime, Float, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from wanderlust.database import Base

if TYPE_CHECKING:
    from wanderlust.models.review import Review


class Listing(Base):
    """
    A property listing.

    Lifecycle:
        1. Created by POST /listings (image filename set to the placeholder)
        2. Updated by PUT /listings/{id} (image kept unless a new URL is sent)
        3. Deleted by DELETE /listings/{id}, together with all of its reviews
    """

    __tablename__ = "listings"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    price: Mapped[float] = mapped_column(Float, nullable=False)
    location: Mapped[str] = mapped_column(String(200), nullable=False)
    country: Mapped[str] = mapped_column(String(100), nullable=False)

    # ── Image ─────────────────────────────────────────────────────────────
    image_url: Mapped[Optional[str]] = mapped_column(String(2048), nullable=True)
    image_filename: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    # ── Reviews ───────────────────────────────────────────────────────────
    reviews: Mapped[List["Review"]] = relationship(
        back_populates="listing",
        # id breaks ties between reviews written in the same instant
        order_by="[Review.created_at, Review.id]",
        passive_deletes=True,
    )

    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_listings_price_non_negative"),
        Index("idx_listings_created_at", "created_at"),
    )

    @property
    def image(self) -> Dict[str, Optional[str]]:
        """The image as the {url, filename} pair the views work with."""
        return {"url": self.image_url, "filename": self.image_filename}

    @property
    def review_ids(self) -> List[uuid.UUID]:
        """Identifiers of the listing's reviews (requires reviews to be loaded)."""
        return [review.id for review in self.reviews]

    def __repr__(self) -> str:
        return f"<Listing(id={self.id}, title='{self.title}')>"
