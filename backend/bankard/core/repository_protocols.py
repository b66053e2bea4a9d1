"""Boundary Protocols — contracts between core/services and the IO shell.

Invariants:
    - Services depend on these Protocols, never on concrete gateway or store classes
    - Gateway.call raises only BankardError members

Design Decisions:
    - Protocol over ABC: structural subtyping, so test fakes need no inheritance
    - Async in Protocol: implementations do IO; the pure transitions in core that
      consume the results are never async themselves
"""

from typing import Any, Protocol

from bankard.core.domain_types import HolderDocument, InstrumentId, Operation


class Gateway(Protocol):
    """Contract for the Data Source Gateway — one seam for fixtures and network."""
    async def call(self, operation: Operation, **params: Any) -> Any: ...


class CredentialStore(Protocol):
    """Durable home for the session credential — medium chosen by the shell."""
    async def get_token(self) -> str | None: ...
    async def set_token(self, token: str) -> None: ...
    async def clear_token(self) -> None: ...


class SelectionStore(Protocol):
    """Durable home for the last holder document and selected instrument."""
    async def get_selection(
        self,
    ) -> tuple[HolderDocument | None, InstrumentId | None]: ...
    async def set_selection(
        self,
        holder_document: HolderDocument | None,
        instrument_id: InstrumentId | None,
    ) -> None: ...
    async def clear_selection(self) -> None: ...
