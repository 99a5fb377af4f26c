"""
StuntCheck Gateway — Middleware Package
========================================

Cross-cutting concerns applied to every request.

Middleware chain (outermost first):
    Request → [Request ID] → [Logging] → [Authentication] → [CORS] → Route

    - Request ID:     correlation ID for logs and error bodies
    - Logging:        one access line per request (skips /health)
    - Authentication: resolves the bearer token into request.state.principal;
                      never rejects, protected routes enforce via dependencies
    - CORS:           FastAPI's CORSMiddleware
"""
