# Middleware package init
"""
HerbScape Backend — Middleware Package
========================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain:
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    1. Request ID: correlation ID for logs and error bodies
    2. Logging: one access line with status and duration
    3. GZip / CORS: Starlette's stock middleware

    Responses unwind in reverse, so the logging middleware sees the final
    status and the request ID header is added last.
"""
