"""
API module - FastAPI routers and endpoint definitions.

Usage:
    from jobportal.api.routes import api_router
    app.include_router(api_router)
"""
