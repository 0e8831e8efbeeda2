# Routes package init
"""
HerbScape Backend — Routes Package
====================================

What:  HTTP route handlers that accept requests and return responses.
How:   Each route module handles one surface of the catalog.

Route Inventory:
    - pages.py:   GET  /                    (catalog page)
                  POST /scan, /scan/clear, /scan/close, /remedies
    - api.py:     GET  /api/herbs           (filtered catalog as JSON)
                  POST /api/identify        (plant photo identification)
                  POST /api/remedies        (remedies assistant)
    - auth.py:    POST /auth/session, /auth/sign-out
                  GET|POST /api/auth/session, POST /api/auth/sign-out
    - health.py:  GET  /health              (service health check)
    - deps.py:    client cookie → CatalogPage dependency

Routes stay thin: they resolve the caller's CatalogPage, apply one action,
and render or serialize the resulting state.
"""
