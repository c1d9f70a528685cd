"""
Routers module - API endpoint handlers.

- assistant: natural language requests, session and stats endpoints
"""
