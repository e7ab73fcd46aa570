# Middleware package init
"""
Wanderlust Backend — Middleware Package
========================================

Middleware Chain (order matters!):
    Request → [Method Override] → [Request ID] → [Logging] → Route Handler

    1. Method Override FIRST: the router and the access log must see the
       effective verb (PUT/DELETE), not the POST the browser sent
    2. Request ID: correlation ID for every log line of the request
    3. Logging: one access line with status and duration

    Responses travel back through the chain in reverse order.
"""
