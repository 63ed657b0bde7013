"""
Data models for Splitt - Participants, items and bill state
"""

from dataclasses import dataclass, field, replace
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Set

from constants import ZERO


class SplitMode(Enum):
    """How tax or tip is divided between participants"""
    EVEN = "even"
    PROPORTIONAL = "proportional"

    @classmethod
    def parse(cls, value, default: "SplitMode" = None) -> "SplitMode":
        """Accept an enum, its value or its name; fall back to default"""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            for mode in cls:
                if value.strip().lower() in (mode.value, mode.name.lower()):
                    return mode
        if default is None:
            raise ValueError(f"Unknown split mode: {value!r}")
        return default


@dataclass
class Participant:
    """A person sharing the bill"""
    id: int
    name: str = ""


@dataclass
class Item:
    """A single priced line on the bill"""
    id: int
    name: str
    cost: Decimal = ZERO
    participant_ids: Set[int] = field(default_factory=set)

    def copy(self) -> "Item":
        return replace(self, participant_ids=set(self.participant_ids))


@dataclass
class BillState:
    """The whole bill, including the id allocators for new entries"""
    participants: List[Participant] = field(default_factory=list)
    items: List[Item] = field(default_factory=list)
    tax: Decimal = ZERO
    tip: Decimal = ZERO
    tax_mode: SplitMode = SplitMode.PROPORTIONAL
    tip_mode: SplitMode = SplitMode.PROPORTIONAL
    next_participant_id: int = 1
    next_item_id: int = 1

    def copy(self) -> "BillState":
        """Independent snapshot; items and participants are copied too"""
        return replace(
            self,
            participants=[replace(p) for p in self.participants],
            items=[item.copy() for item in self.items],
        )

    def participant_ids(self) -> List[int]:
        return [p.id for p in self.participants]

    def find_item(self, item_id: int):
        for item in self.items:
            if item.id == item_id:
                return item
        return None

    def find_participant(self, participant_id: int):
        for participant in self.participants:
            if participant.id == participant_id:
                return participant
        return None


@dataclass(frozen=True)
class ParticipantShare:
    """What one participant owes, in full precision"""
    subtotal_share: Decimal = ZERO
    tax_share: Decimal = ZERO
    tip_share: Decimal = ZERO

    @property
    def total(self) -> Decimal:
        return self.subtotal_share + self.tax_share + self.tip_share


Allocation = Dict[int, ParticipantShare]


@dataclass
class ImportedItem:
    """One line returned by the receipt-parsing service"""
    name: str
    price: Decimal


@dataclass
class ImportedReceipt:
    """Validated answer of the receipt-parsing service"""
    items: List[ImportedItem] = field(default_factory=list)
    tax: Decimal = ZERO
    tip: Decimal = ZERO
