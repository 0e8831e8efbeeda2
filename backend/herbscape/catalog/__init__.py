# Catalog components package init
"""
HerbScape Backend — Catalog Components
========================================

What:  Server-side state and behaviour of the catalog page.
How:   Each component owns its own state and talks to services; the page
       controller wires them together and owns the shared state.

Component Inventory:
    - filtering.py:     substring + category filter, category options
    - notifications.py: toast queue drained by every render
    - scanner.py:       search box + photo identification dialog
    - remedy_widget.py: floating remedies dialog backed by the webhook
    - page.py:          CatalogPage, the page controller
    - registry.py:      one CatalogPage per browser client
"""
