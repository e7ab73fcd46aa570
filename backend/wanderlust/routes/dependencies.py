"""
Wanderlust Backend — Route Dependencies
=========================================

What:  Per-route validation ("validation middleware"), identifier parsing
       and the commit that precedes every redirect.
Why:   Create/update and add-review must reject invalid payloads with a 400
       before the handler runs; handlers then receive normalized input only.
How:   FastAPI dependencies. A failed ValidationResult becomes a
       ValidationError whose message is every violation joined by a comma.
"""

import logging
from uuid import UUID

from fastapi import Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from wanderlust.exceptions import DatabaseError, NotFoundError, ValidationError
from wanderlust.forms import read_payload
from wanderlust.schemas.listing import ListingIn
from wanderlust.schemas.review import ReviewIn
from wanderlust.validation import ValidationResult, validate_listing, validate_review

logger = logging.getLogger(__name__)


def parse_identifier(raw: str, resource: str) -> UUID:
    """
    Convert a path segment into a UUID.

    A segment that is not a UUID cannot name any stored entity, so it is
    reported the same way as an unknown one: NotFoundError (404).
    """
    try:
        return UUID(raw)
    except ValueError:
        raise NotFoundError(resource=resource, resource_id=raw)


def _require_valid(result: ValidationResult, what: str):
    if not result.ok:
        logger.warning("Invalid %s payload: %s", what, result.message)
        raise ValidationError(message=result.message, errors=result.errors)
    return result.value


async def listing_payload(request: Request) -> ListingIn:
    """Validated `listing` object of the request body."""
    return _require_valid(validate_listing(await read_payload(request)), "listing")


async def review_payload(request: Request) -> ReviewIn:
    """Validated `review` object of the request body."""
    return _require_valid(validate_review(await read_payload(request)), "review")


async def commit(db: AsyncSession) -> None:
    """
    Commit the request's writes before the redirect is built.

    A failed commit must surface as a 500 page, not as a 302 for a write
    that never landed. get_db_session's own commit then has nothing to do.

    Raises:
        DatabaseError: the commit failed (the session is rolled back)
    """
    try:
        await db.commit()
    except SQLAlchemyError as e:
        logger.error("Commit failed: %s", str(e), exc_info=True)
        await db.rollback()
        raise DatabaseError(context={"error_type": type(e).__name__})
