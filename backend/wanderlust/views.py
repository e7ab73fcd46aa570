"""
Wanderlust Backend — HTML Views
=================================

What:  Server-rendered pages for listings, reviews and errors.
Why:   Route handlers only choose a view and hand it data; how a page looks
       is decided here, in one place.
How:   render(view, data, status_code) looks the view up in VIEWS and wraps
       the page body in the shared layout. Every interpolated value goes
       through html.escape, including URLs placed in attributes.

View Inventory:
    listings/index   all listings (data: all_listings)
    listings/new     empty create form
    listings/show    one listing with its reviews and the review form (data: listing)
    listings/edit    pre-filled edit form (data: listing)
    error            error page (data: status_code, message); see error_page()

HTML forms submit POST; edit/delete forms carry the real verb in a hidden
method-override field (see wanderlust.middleware.method_override).
"""

from html import escape
from typing import Any, Callable, Dict, Mapping, Optional

from fastapi.responses import HTMLResponse

from wanderlust.config import settings
from wanderlust.exceptions import DEFAULT_ERROR_MESSAGE
from wanderlust.models.listing import Listing


def _e(value: Any) -> str:
    """Escape a value for HTML text or a quoted attribute; None renders empty."""
    return "" if value is None else escape(str(value), quote=True)


def _method_field(method: str) -> str:
    return f'<input type="hidden" name="{_e(settings.method_override_field)}" value="{method}">'


def format_price(price: Optional[float]) -> str:
    if price is None:
        return ""
    return f"&#8377; {price:,.2f}"


def layout(title: str, body: str) -> str:
    """Shared page skeleton: head, navbar and the page body."""
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1">
    <title>{_e(title)} | {_e(settings.app_name)}</title>
</head>
<body>
    <nav>
        <a href="/listings">{_e(settings.app_name)}</a>
        <a href="/listings">All Listings</a>
        <a href="/listings/new">Add New Listing</a>
    </nav>
    <main>
{body}
    </main>
</body>
</html>"""


# ══════════════════════════════════════════════════════════════════════════
# Listing Views
# ══════════════════════════════════════════════════════════════════════════

def render_index(data: Mapping[str, Any]) -> str:
    listings = data.get("all_listings") or []
    cards = []
    for listing in listings:
        image = listing.image
        img = f'<img src="{_e(image["url"])}" alt="listing image">' if image["url"] else ""
        cards.append(
            f"""        <a class="listing-card" href="/listings/{_e(listing.id)}">
            {img}
            <p><b>{_e(listing.title)}</b><br>{format_price(listing.price)} / night</p>
        </a>"""
        )
    if not cards:
        cards.append("        <p>No listings yet.</p>")
    return layout("All Listings", "        <h3>All Listings</h3>\n" + "\n".join(cards))


def _listing_form(action: str, listing: Optional[Listing], submit: str, method: str = "") -> str:
    def value(field: str) -> str:
        return _e(getattr(listing, field, None)) if listing is not None else ""

    override = _method_field(method) if method else ""
    return f"""        <form method="POST" action="{_e(action)}">
            {override}
            <label>Title <input name="listing[title]" value="{value('title')}" required></label>
            <label>Description <textarea name="listing[description]">{value('description')}</textarea></label>
            <label>Image Link <input name="listing[image]" value="{value('image_url')}" placeholder="enter image URL/link"></label>
            <label>Price <input name="listing[price]" type="number" min="0" step="any" value="{value('price')}" required></label>
            <label>Country <input name="listing[country]" value="{value('country')}" required></label>
            <label>Location <input name="listing[location]" value="{value('location')}" required></label>
            <button>{_e(submit)}</button>
        </form>"""


def render_new(data: Mapping[str, Any]) -> str:
    body = "        <h3>Create a New Listing</h3>\n" + _listing_form("/listings", None, "Add")
    return layout("New Listing", body)


def render_edit(data: Mapping[str, Any]) -> str:
    listing: Listing = data["listing"]
    body = (
        "        <h3>Edit your Listing</h3>\n"
        + _listing_form(f"/listings/{listing.id}", listing, "Edit", method="PUT")
    )
    return layout(f"Edit {listing.title}", body)


def render_show(data: Mapping[str, Any]) -> str:
    listing: Listing = data["listing"]
    image = listing.image
    img = f'<img src="{_e(image["url"])}" alt="listing image">' if image["url"] else ""

    reviews = []
    for review in listing.reviews:
        stars = f"<p>{_e(review.rating)} stars</p>" if review.rating is not None else ""
        reviews.append(
            f"""            <li class="review">
                <p>{_e(review.comment)}</p>
                {stars}
                <form method="POST" action="/listings/{_e(listing.id)}/reviews/{_e(review.id)}">
                    {_method_field("DELETE")}
                    <button>Delete</button>
                </form>
            </li>"""
        )

    body = f"""        <h3>{_e(listing.title)}</h3>
        {img}
        <p>{_e(listing.description)}</p>
        <p>{format_price(listing.price)}</p>
        <p>{_e(listing.location)}</p>
        <p>{_e(listing.country)}</p>
        <a href="/listings/{_e(listing.id)}/edit">Edit</a>
        <form method="POST" action="/listings/{_e(listing.id)}">
            {_method_field("DELETE")}
            <button>Delete</button>
        </form>
        <hr>
        <h4>Leave a Review</h4>
        <form method="POST" action="/listings/{_e(listing.id)}/reviews">
            <label>Rating
                <select name="review[rating]">
                    <option value="">-</option>
                    <option>1</option><option>2</option><option>3</option><option>4</option><option>5</option>
                </select>
            </label>
            <label>Comments <textarea name="review[comment]" required></textarea></label>
            <button>Submit</button>
        </form>
        <h4>All Reviews</h4>
        <ul>
{chr(10).join(reviews) if reviews else "            <li>No reviews yet.</li>"}
        </ul>"""
    return layout(listing.title, body)


# ══════════════════════════════════════════════════════════════════════════
# Error View
# ══════════════════════════════════════════════════════════════════════════

def render_error(data: Mapping[str, Any]) -> str:
    body = f"""        <div class="alert">
            <h4>Error {_e(data.get("status_code"))}</h4>
            <p>{_e(data.get("message"))}</p>
            <a href="/listings">Back to all listings</a>
        </div>"""
    return layout("Error", body)


VIEWS: Dict[str, Callable[[Mapping[str, Any]], str]] = {
    "listings/index": render_index,
    "listings/new": render_new,
    "listings/show": render_show,
    "listings/edit": render_edit,
    "error": render_error,
}


def render(
    view: str, data: Optional[Mapping[str, Any]] = None, status_code: int = 200
) -> HTMLResponse:
    """
    Render a named view to an HTML response.

    Raises:
        KeyError: unknown view name (a programming error, surfaces as 500)
    """
    page = VIEWS[view](data or {})
    return HTMLResponse(content=page, status_code=status_code)


def error_page(status_code: Optional[int] = None, message: Optional[str] = None) -> HTMLResponse:
    """
    The single terminal stage for failures: render the error view.

    Missing status defaults to 500, missing message to the generic one.
    """
    status_code = status_code or 500
    message = message or DEFAULT_ERROR_MESSAGE
    return render("error", {"status_code": status_code, "message": message}, status_code)
