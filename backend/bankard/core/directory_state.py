"""Directory State — immutable instrument set + selection, with pure transitions.

Invariants:
    - selected_account_id == selected_instrument.account_id in every reachable state:
      the account is derived from the Selection, never stored beside it
    - Only NORMAL instruments ever enter the instrument set
    - The selected instrument is always a member of the current instrument set
    - A successful load replaces the set wholesale (no merging with the previous set)
    - A failed load keeps the previous instruments and selection (stale-but-present)
    - Transitions tagged with a superseded generation return the state unchanged

Design Decisions:
    - Frozen dataclasses swapped in one assignment: readers can never observe a
      half-applied update, even between awaits
    - Auto-select picks the first element of the returned, filtered sequence; the
      backend does not document a stable order, so this is the only rule applied
"""

from dataclasses import dataclass, replace

from bankard.core.domain_types import (
    AccountId,
    HolderDocument,
    InstrumentId,
    LoadState,
)
from bankard.core.errors import BankardError
from bankard.schemas.instrument import Instrument, filter_active


@dataclass(frozen=True)
class Selection:
    """The selected instrument. Its account is a derived read-only view."""
    instrument: Instrument

    @property
    def instrument_id(self) -> InstrumentId:
        return self.instrument.instrument_id

    @property
    def account_id(self) -> AccountId:
        return self.instrument.account_id


@dataclass(frozen=True)
class DirectoryState:
    """Snapshot of the Instrument Directory — pure dataclass, no IO."""

    load_state: LoadState = LoadState.IDLE
    holder_document: HolderDocument | None = None
    instruments: tuple[Instrument, ...] = ()
    selection: Selection | None = None
    error: BankardError | None = None

    # Monotonic load counter; results carrying an older value are discarded
    generation: int = 0

    @property
    def selected_instrument(self) -> Instrument | None:
        return self.selection.instrument if self.selection else None

    @property
    def selected_account_id(self) -> AccountId | None:
        return self.selection.account_id if self.selection else None

    @property
    def is_loading(self) -> bool:
        return self.load_state is LoadState.LOADING

    def find(self, instrument_id: InstrumentId) -> Instrument | None:
        for instrument in self.instruments:
            if instrument.instrument_id == instrument_id:
                return instrument
        return None


def begin_load(state: DirectoryState, document: HolderDocument) -> DirectoryState:
    """Enter LOADING under a new generation. A different holder drops the old data."""
    if document != state.holder_document:
        return DirectoryState(
            load_state=LoadState.LOADING,
            holder_document=document,
            generation=state.generation + 1,
        )
    return replace(
        state,
        load_state=LoadState.LOADING,
        error=None,
        generation=state.generation + 1,
    )


def _reconcile_selection(
    current: Selection | None, instruments: tuple[Instrument, ...],
) -> Selection | None:
    if current is not None:
        for instrument in instruments:
            if instrument.instrument_id == current.instrument_id:
                # same card, fresh object from the new set
                return Selection(instrument)
    if instruments:
        return Selection(instruments[0])
    return None


def apply_loaded(
    state: DirectoryState, generation: int, instruments: list[Instrument],
) -> DirectoryState:
    """Replace the set with the active instruments and reconcile the selection."""
    if generation != state.generation:
        return state
    active = tuple(filter_active(instruments))
    return replace(
        state,
        load_state=LoadState.LOADED,
        instruments=active,
        selection=_reconcile_selection(state.selection, active),
        error=None,
    )


def apply_failed(
    state: DirectoryState, generation: int, error: BankardError,
) -> DirectoryState:
    """Record the error; previously loaded instruments and selection stay in place."""
    if generation != state.generation:
        return state
    return replace(state, load_state=LoadState.ERROR, error=error)


def select(state: DirectoryState, instrument_id: InstrumentId) -> DirectoryState:
    """Select a member of the current set. Unknown ids leave the state unchanged."""
    instrument = state.find(instrument_id)
    if instrument is None:
        return state
    if state.selection is not None and state.selection.instrument == instrument:
        return state
    return replace(state, selection=Selection(instrument))


def cleared(state: DirectoryState) -> DirectoryState:
    """Back to IDLE with nothing loaded; in-flight loads become stale."""
    return DirectoryState(generation=state.generation + 1)
