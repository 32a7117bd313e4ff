"""
Pydantic models shared across the application.

- domain/: enums, analytics results and AI extraction schemas
- io/: API request and response schemas
"""
