"""
Wanderlust Backend — Review Route Handlers
============================================

Route Inventory:
    POST   /listings/{id}/reviews              add review    → 302 /listings/{id}
    DELETE /listings/{id}/reviews/{reviewId}   delete review → 302 /listings/{id}
"""

from fastapi import APIRouter, Depends
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from wanderlust.database import get_db_session
from wanderlust.routes.dependencies import commit, parse_identifier, review_payload
from wanderlust.schemas.review import ReviewIn
from wanderlust.services.review_service import review_service


router = APIRouter(prefix="/listings/{listing_id}/reviews", tags=["Reviews"])


@router.post("", summary="Add a review to a listing")
async def create_review(
    listing_id: str,
    data: ReviewIn = Depends(review_payload),
    db: AsyncSession = Depends(get_db_session),
) -> RedirectResponse:
    lid = parse_identifier(listing_id, "Listing")
    await review_service.add_to_listing(db, lid, data)
    await commit(db)
    return RedirectResponse(url=f"/listings/{lid}", status_code=302)


@router.delete("/{review_id}", summary="Delete a review")
async def delete_review(
    listing_id: str,
    review_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> RedirectResponse:
    lid = parse_identifier(listing_id, "Listing")
    await review_service.remove_from_listing(db, lid, parse_identifier(review_id, "Review"))
    await commit(db)
    return RedirectResponse(url=f"/listings/{lid}", status_code=302)
