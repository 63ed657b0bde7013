"""
Bill store for Splitt
Owns the bill state and applies the operations the interface performs on it.

Each operation is a small dataclass whose apply() maps a BillState to a new
BillState and leaves its input untouched. Unknown ids make an operation a
no-op, so no operation raises for well-typed input. The store is the single
writer: it swaps in the new state and recomputes the allocation after every
dispatch.
"""

import logging
from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Callable, List, Union

from bill_splitter import allocate_state, bill_subtotal, total_after_extras
from constants import DEFAULT_ITEM_NAME, DEFAULT_PERSON_NAME, ZERO
from data_models import Allocation, BillState, ImportedReceipt, Item, Participant, SplitMode
from utils import to_cost, to_money

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AddParticipant:
    name: str = DEFAULT_PERSON_NAME

    def apply(self, state: BillState) -> BillState:
        new_state = state.copy()
        new_state.participants.append(Participant(id=state.next_participant_id, name=self.name))
        new_state.next_participant_id = state.next_participant_id + 1
        return new_state


@dataclass(frozen=True)
class RenameParticipant:
    participant_id: int
    name: str

    def apply(self, state: BillState) -> BillState:
        new_state = state.copy()
        participant = new_state.find_participant(self.participant_id)
        if participant is not None:
            participant.name = self.name
        return new_state


@dataclass(frozen=True)
class RemoveParticipant:
    """Drop a participant; items keep the stale id and stop counting it"""
    participant_id: int

    def apply(self, state: BillState) -> BillState:
        new_state = state.copy()
        new_state.participants = [p for p in new_state.participants if p.id != self.participant_id]
        return new_state


@dataclass(frozen=True)
class AddItem:
    name: str = DEFAULT_ITEM_NAME

    def apply(self, state: BillState) -> BillState:
        new_state = state.copy()
        new_state.items.append(Item(id=state.next_item_id, name=self.name))
        new_state.next_item_id = state.next_item_id + 1
        return new_state


@dataclass(frozen=True)
class RenameItem:
    item_id: int
    name: str

    def apply(self, state: BillState) -> BillState:
        new_state = state.copy()
        item = new_state.find_item(self.item_id)
        if item is not None:
            item.name = self.name
        return new_state


@dataclass(frozen=True)
class SetItemCost:
    item_id: int
    cost: Decimal

    def apply(self, state: BillState) -> BillState:
        new_state = state.copy()
        item = new_state.find_item(self.item_id)
        if item is not None:
            item.cost = to_cost(self.cost)
        return new_state


@dataclass(frozen=True)
class RemoveItem:
    item_id: int

    def apply(self, state: BillState) -> BillState:
        new_state = state.copy()
        new_state.items = [item for item in new_state.items if item.id != self.item_id]
        return new_state


@dataclass(frozen=True)
class ToggleParticipantOnItem:
    item_id: int
    participant_id: int

    def apply(self, state: BillState) -> BillState:
        new_state = state.copy()
        item = new_state.find_item(self.item_id)
        if item is None:
            return new_state
        if self.participant_id in item.participant_ids:
            item.participant_ids.discard(self.participant_id)
        elif new_state.find_participant(self.participant_id) is not None:
            item.participant_ids.add(self.participant_id)
        return new_state


@dataclass(frozen=True)
class SetTax:
    value: Decimal

    def apply(self, state: BillState) -> BillState:
        return replace(state.copy(), tax=to_money(self.value))


@dataclass(frozen=True)
class SetTip:
    value: Decimal

    def apply(self, state: BillState) -> BillState:
        return replace(state.copy(), tip=to_money(self.value))


@dataclass(frozen=True)
class SetTaxMode:
    mode: SplitMode

    def apply(self, state: BillState) -> BillState:
        return replace(state.copy(), tax_mode=self.mode)


@dataclass(frozen=True)
class SetTipMode:
    mode: SplitMode

    def apply(self, state: BillState) -> BillState:
        return replace(state.copy(), tip_mode=self.mode)


@dataclass(frozen=True)
class ClearAll:
    """Empty the bill; id counters keep advancing so ids are never reused"""

    def apply(self, state: BillState) -> BillState:
        return BillState(
            tax_mode=state.tax_mode,
            tip_mode=state.tip_mode,
            next_participant_id=state.next_participant_id,
            next_item_id=state.next_item_id,
        )


@dataclass(frozen=True)
class ReplaceItems:
    """Swap in the items of an imported receipt, then set its tax and tip"""
    receipt: ImportedReceipt

    def apply(self, state: BillState) -> BillState:
        new_state = state.copy()
        next_id = state.next_item_id
        items = []
        for imported in self.receipt.items:
            items.append(Item(id=next_id, name=imported.name, cost=to_cost(imported.price)))
            next_id += 1
        new_state.items = items
        new_state.next_item_id = next_id
        new_state = SetTax(self.receipt.tax).apply(new_state)
        return SetTip(self.receipt.tip).apply(new_state)


Operation = Union[
    AddParticipant,
    RenameParticipant,
    RemoveParticipant,
    AddItem,
    RenameItem,
    SetItemCost,
    RemoveItem,
    ToggleParticipantOnItem,
    SetTax,
    SetTip,
    SetTaxMode,
    SetTipMode,
    ClearAll,
    ReplaceItems,
]


class BillStore:
    """Single writer for the bill state"""

    def __init__(self, state: BillState = None):
        self._state = state.copy() if state is not None else BillState()
        self._allocation = allocate_state(self._state)
        self.listeners: List[Callable[[BillState], None]] = []

    @property
    def state(self) -> BillState:
        """Snapshot of the current state"""
        return self._state.copy()

    @property
    def allocation(self) -> Allocation:
        return dict(self._allocation)

    @property
    def subtotal(self) -> Decimal:
        return bill_subtotal(self._state.items)

    @property
    def total_after_extras(self) -> Decimal:
        return total_after_extras(self._state.items, self._state.tax, self._state.tip)

    def dispatch(self, operation: Operation) -> Allocation:
        """Apply one operation, swap in the result and recompute"""
        new_state = operation.apply(self._state)
        allocation = allocate_state(new_state)
        self._state = new_state
        self._allocation = allocation
        logger.debug("Applied %s", type(operation).__name__)

        for listener in self.listeners:
            listener(self.state)
        return self.allocation

    def import_receipt(self, client, image_path: str) -> ImportedReceipt:
        """Replace the items with a parsed receipt.

        The state is only touched once the service answered with a complete,
        valid receipt; ReceiptImportError leaves it as it was.
        """
        receipt = client.parse_receipt(image_path)
        self.dispatch(ReplaceItems(receipt))
        logger.info("Imported %d items from %s", len(receipt.items), image_path)
        return receipt

    # Named shortcuts used by the CLI

    def add_participant(self, name: str = DEFAULT_PERSON_NAME) -> int:
        new_id = self._state.next_participant_id
        self.dispatch(AddParticipant(name))
        return new_id

    def rename_participant(self, participant_id: int, name: str):
        self.dispatch(RenameParticipant(participant_id, name))

    def remove_participant(self, participant_id: int):
        self.dispatch(RemoveParticipant(participant_id))

    def add_item(self, name: str = DEFAULT_ITEM_NAME, cost=ZERO) -> int:
        new_id = self._state.next_item_id
        self.dispatch(AddItem(name))
        if cost:
            self.dispatch(SetItemCost(new_id, cost))
        return new_id

    def rename_item(self, item_id: int, name: str):
        self.dispatch(RenameItem(item_id, name))

    def set_item_cost(self, item_id: int, cost):
        self.dispatch(SetItemCost(item_id, cost))

    def remove_item(self, item_id: int):
        self.dispatch(RemoveItem(item_id))

    def toggle_participant_on_item(self, item_id: int, participant_id: int):
        self.dispatch(ToggleParticipantOnItem(item_id, participant_id))

    def set_tax(self, value):
        self.dispatch(SetTax(value))

    def set_tip(self, value):
        self.dispatch(SetTip(value))

    def set_tax_mode(self, mode: SplitMode):
        self.dispatch(SetTaxMode(mode))

    def set_tip_mode(self, mode: SplitMode):
        self.dispatch(SetTipMode(mode))

    def clear_all(self):
        self.dispatch(ClearAll())
