"""ORM Models — SQLAlchemy declarative models for durable client state.

Invariants:
    - All models inherit from Base (db/base.py)
    - Only the session credential and the last selection are persisted

Design Decisions:
    - All models imported here so Base.metadata knows every table before create_all
"""

from bankard.models.client_state import ClientState  # noqa: F401
