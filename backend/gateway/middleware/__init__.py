"""
Notes Gateway — Middleware Package
===================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (outermost first):
    Request → [Rate Limit] → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    1. Rate Limit: rejects over-limit callers before any backend call
    2. Request ID: correlation ID for logs and the response body
    3. Logging:    one access line per request with status and duration

    Responses travel back through the same chain in reverse. A 429 from
    the rate limiter never reaches the inner layers, so it carries no
    X-Request-ID and is not access-logged.
"""
