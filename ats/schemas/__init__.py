"""
Schemas module - Request/Response schemas for API endpoints.

All API payloads use camelCase field names (see CamelModel); Python code
uses the snake_case attribute names.
"""
