"""Pydantic Schemas — request/response validation for API endpoints.

Invariants:
    - Schemas validate at the system boundary (user input, API responses)
    - No response schema has a password_hash field
"""
