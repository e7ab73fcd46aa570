"""
Wanderlust Backend — Listing Route Handlers
=============================================

What:  Listing pages and listing mutations.
How:   Handlers validate through dependencies, delegate to ListingService and
       either render a view or commit and redirect. Anything raised goes to the error
       handlers registered in main.py.

Route Inventory:
    GET    /listings              index of all listings
    GET    /listings/new          create form
    POST   /listings              create      → 302 /listings
    GET    /listings/{id}         show
    GET    /listings/{id}/edit    edit form
    PUT    /listings/{id}         update      → 302 /listings/{id}
    DELETE /listings/{id}         delete      → 302 /listings

Route precedence:
    FastAPI matches routes in registration order. `/new` is registered
    before `/{listing_id}`, otherwise "new" would be taken for an ID.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from wanderlust.database import get_db_session
from wanderlust.routes.dependencies import commit, listing_payload, parse_identifier
from wanderlust.schemas.listing import ListingIn
from wanderlust.services.listing_service import listing_service
from wanderlust.views import render


router = APIRouter(prefix="/listings", tags=["Listings"])


@router.get("", response_class=HTMLResponse, summary="All listings")
async def index(db: AsyncSession = Depends(get_db_session)) -> HTMLResponse:
    all_listings = await listing_service.list_listings(db)
    return render("listings/index", {"all_listings": all_listings})


# Must stay ABOVE "/{listing_id}"
@router.get("/new", response_class=HTMLResponse, summary="New listing form")
async def new_form() -> HTMLResponse:
    return render("listings/new")


@router.post("", summary="Create a listing")
async def create(
    data: ListingIn = Depends(listing_payload),
    db: AsyncSession = Depends(get_db_session),
) -> RedirectResponse:
    await listing_service.create_listing(db, data)
    await commit(db)
    return RedirectResponse(url="/listings", status_code=302)


@router.get("/{listing_id}", response_class=HTMLResponse, summary="Show a listing")
async def show(listing_id: str, db: AsyncSession = Depends(get_db_session)) -> HTMLResponse:
    listing = await listing_service.get_listing(db, parse_identifier(listing_id, "Listing"))
    return render("listings/show", {"listing": listing})


@router.get("/{listing_id}/edit", response_class=HTMLResponse, summary="Edit form")
async def edit_form(
    listing_id: str, db: AsyncSession = Depends(get_db_session)
) -> HTMLResponse:
    listing = await listing_service.get_listing(db, parse_identifier(listing_id, "Listing"))
    return render("listings/edit", {"listing": listing})


@router.put("/{listing_id}", summary="Update a listing")
async def update(
    listing_id: str,
    data: ListingIn = Depends(listing_payload),
    db: AsyncSession = Depends(get_db_session),
) -> RedirectResponse:
    """Merge the submitted fields; an empty image link keeps the current image."""
    lid = parse_identifier(listing_id, "Listing")
    await listing_service.update_listing(db, lid, data)
    await commit(db)
    return RedirectResponse(url=f"/listings/{lid}", status_code=302)


@router.delete("/{listing_id}", summary="Delete a listing and its reviews")
async def destroy(listing_id: str, db: AsyncSession = Depends(get_db_session)) -> RedirectResponse:
    await listing_service.delete_listing(db, parse_identifier(listing_id, "Listing"))
    await commit(db)
    return RedirectResponse(url="/listings", status_code=302)
