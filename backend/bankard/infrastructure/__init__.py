"""Infrastructure Layer — transport, fixtures, persistence and cross-cutting concerns.

Invariants:
    - All external calls wrapped with timeout and error mapping into core/errors.py
    - No business rules here beyond reproducing the backend's own filtering in fixtures

Design Decisions:
    - Thin wrappers over raw clients (httpx, SQLAlchemy) for single responsibility
"""
