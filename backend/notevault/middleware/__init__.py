"""
NoteVault Backend — Middleware Package
========================================

What:  Cross-cutting concerns applied to requests.

Middleware Chain:
    Request → [Request ID] → [Logging] → [CORS] → Route Handler

    1. Request ID: generate or accept a correlation ID for logs and errors
    2. Logging: log method, path, status and duration with that ID
    3. CORS: FastAPI's CORSMiddleware (handles preflight)

The auth gate (auth.py) is not ASGI middleware but a route dependency:
it only runs on routers that declare it, and its errors flow through the
same global exception handlers as every other application error.
"""
