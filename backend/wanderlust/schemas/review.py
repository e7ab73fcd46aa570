"""
Wanderlust Backend — Review Payload Schemas
=============================================

What:  Pydantic models describing a submitted review: {"review": {...}}.
Rules: comment is required and non-blank; rating is optional, 1 to 5.
       The rating <select> posts "" when left untouched, which means absent.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator


class ReviewIn(BaseModel):
    comment: str = Field(min_length=1, max_length=5000)
    rating: Optional[int] = Field(default=None, ge=1, le=5)

    model_config = {"str_strip_whitespace": True}

    @field_validator("rating", mode="before")
    @classmethod
    def blank_rating_is_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v


class ReviewPayload(BaseModel):
    review: ReviewIn
