# Services package init
"""
Wanderlust Backend — Services Layer
=====================================

What:  Business logic between routes (HTTP) and the database (persistence).

Service Inventory:
    - ListingService: listing CRUD and cascading delete of a listing's reviews
    - ReviewService:  adding/removing reviews, always scoped to one listing

Services receive the request's AsyncSession on every call and hold no
per-request state, so a single module-level instance of each is shared.
"""
