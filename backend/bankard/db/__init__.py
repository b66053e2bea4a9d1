"""Database Infrastructure — declarative Base for the client-state store.

Invariants:
    - All sessions are async (AsyncSession)

Design Decisions:
    - aiosqlite driver by default: the store is local to the client process
"""
