# Routes package init
"""
Wanderlust Backend — Routes Package
=====================================

Route Inventory:
    - listings.py:  /listings pages and listing create/update/delete
    - reviews.py:   /listings/{id}/reviews add/delete
    - health.py:    GET / and GET /health

Routes are thin: decode and validate input (dependencies.py), call a
service, then render a view or redirect. Business rules live in services.
"""
