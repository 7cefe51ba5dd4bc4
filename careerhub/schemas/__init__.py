"""
Schemas module - Request/Response schemas for API endpoints.

Wire names are camelCase, matching the documents stored in MongoDB.
"""
