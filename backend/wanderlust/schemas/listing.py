"""
Wanderlust Backend — Listing Payload Schemas
==============================================

What:  Pydantic models describing a submitted listing.
Why:   One declaration of the field rules; wanderlust.validation turns
       violations into user-facing messages.
How:   Submitted bodies look like {"listing": {...}} whether they arrive as
       JSON or as an HTML form with `listing[title]`-style keys.

Field rules:
    title, location, country   required, non-blank
    price                      required, number >= 0
    description                optional
    image                      optional URL; blank means "no image"
"""

from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator


class ListingIn(BaseModel):
    """Normalized listing fields, as accepted by create and update."""

    title: str = Field(min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=5000)
    image: Optional[str] = Field(default=None, max_length=2048, description="Image URL")
    price: float = Field(ge=0, allow_inf_nan=False)
    location: str = Field(min_length=1, max_length=200)
    country: str = Field(min_length=1, max_length=100)

    model_config = {"str_strip_whitespace": True}

    @field_validator("image", mode="before")
    @classmethod
    def blank_image_is_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v


class ListingPayload(BaseModel):
    """The full submitted body: the listing fields nested under `listing`."""

    listing: ListingIn
