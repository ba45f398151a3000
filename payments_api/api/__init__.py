"""API Layer — FastAPI routes, error handlers and request logging.

Invariants:
    - Routers are registered explicitly in main.create_app
    - Failure bodies are rendered by error_handlers only
"""
