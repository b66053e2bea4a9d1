"""Instrument Directory — loads a holder's instruments and owns the selection.

Invariants:
    - state is always a DirectoryState produced by core/directory_state.py transitions,
      so selected_account_id can never diverge from the selected instrument
    - Every state change is one assignment followed by one listener notification
    - Gateway failures become ERROR state; load_for_holder never raises them
    - Only the latest load applies: a load started later, or clear(), makes earlier
      in-flight results stale (generation compared at apply-time)

Design Decisions:
    - Explicit load/refresh entry points instead of re-render driven refetch
    - Observer list over a global store: presentation subscribes to snapshots
"""

import logging
from collections.abc import Callable

from bankard.core import directory_state
from bankard.core.directory_state import DirectoryState
from bankard.core.domain_types import HolderDocument, InstrumentId, Operation
from bankard.core.errors import BankardError
from bankard.core.repository_protocols import Gateway

logger = logging.getLogger(__name__)

DirectoryListener = Callable[[DirectoryState], None]


class InstrumentDirectory:
    """Holds the active instruments of one holder and the single selection."""

    def __init__(self, gateway: Gateway):
        self.gateway = gateway
        self._state = DirectoryState()
        self._listeners: list[DirectoryListener] = []

    @property
    def state(self) -> DirectoryState:
        return self._state

    def subscribe(self, listener: DirectoryListener) -> Callable[[], None]:
        """Register a listener; returns the unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def load_for_holder(self, document: HolderDocument) -> DirectoryState:
        """Fetch the holder's instruments and reconcile the selection.

        Returns the state after this load settles (unchanged by it if superseded).
        """
        self._commit(directory_state.begin_load(self._state, document))
        generation = self._state.generation
        logger.info(
            "Loading instruments",
            extra={"holder": _mask(document), "generation": generation},
        )
        try:
            instruments = await self.gateway.call(
                Operation.LIST_INSTRUMENTS_BY_HOLDER, document=document,
            )
        except BankardError as e:
            self._apply(directory_state.apply_failed(self._state, generation, e), generation)
            return self._state
        self._apply(
            directory_state.apply_loaded(self._state, generation, instruments),
            generation,
        )
        return self._state

    async def refresh(self) -> DirectoryState:
        """Reload for the current holder. No-op while no holder is known."""
        if self._state.holder_document is None:
            return self._state
        return await self.load_for_holder(self._state.holder_document)

    def select(self, instrument_id: InstrumentId) -> bool:
        """Select a member of the current set. Returns False for unknown ids."""
        new_state = directory_state.select(self._state, instrument_id)
        if new_state is self._state:
            return self._state.find(instrument_id) is not None
        self._commit(new_state)
        logger.info(
            "Instrument selected",
            extra={
                "instrument_id": instrument_id,
                "account_id": new_state.selected_account_id,
            },
        )
        return True

    def clear(self) -> None:
        """Reset to IDLE (logout, holder change). In-flight loads become stale."""
        self._commit(directory_state.cleared(self._state))

    def _apply(self, new_state: DirectoryState, generation: int) -> None:
        if new_state is self._state and generation != self._state.generation:
            logger.info(
                "Discarding superseded instrument load",
                extra={"generation": generation},
            )
            return
        self._commit(new_state)

    def _commit(self, new_state: DirectoryState) -> None:
        self._state = new_state
        for listener in list(self._listeners):
            listener(new_state)


def _mask(document: str) -> str:
    return f"***{document[-4:]}" if len(document) > 4 else "***"
