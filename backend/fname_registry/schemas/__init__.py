"""Pydantic Schemas - request/response validation for API endpoints.

Invariants:
    - Schemas validate at system boundary (request bodies, API responses)
    - Hex shape is checked here; fname policy is left to the transfer service

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
"""
