"""
Schemas module - Request/Response schemas for API endpoints.

Request schemas validate what the client sends; their model_dump() output
is what gets stored. Response schemas define what the API returns.
"""
