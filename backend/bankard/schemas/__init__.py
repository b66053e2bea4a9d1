"""Pydantic Schemas — wire-format models for backend requests and responses.

Invariants:
    - Schemas validate at system boundary (backend responses, request DTOs)
    - Domain types from core/ used for enum and identity fields
    - Response models are frozen: updates replace the object, never mutate it

Design Decisions:
    - Wire names (camelCase, legacy names like `account`/`cardId`) bound through
      Field aliases; Python attributes use domain names
"""
