from decimal import Decimal
from pathlib import Path
import sys

import pytest

# Source/ holds flat modules; put it on the import path wherever pytest runs
SOURCE = Path(__file__).resolve().parents[1] / "Source"
if str(SOURCE) not in sys.path:
    sys.path.insert(0, str(SOURCE))

from bill_store import BillStore
from data_models import Item, Participant


@pytest.fixture
def alice():
    return Participant(id=1, name="Alice")


@pytest.fixture
def bob():
    return Participant(id=2, name="Bob")


@pytest.fixture
def dinner_items():
    """20.00 shared by Alice and Bob, 10.00 for Alice alone"""
    return [
        Item(id=1, name="Pizza", cost=Decimal("20"), participant_ids={1, 2}),
        Item(id=2, name="Wine", cost=Decimal("10"), participant_ids={1}),
    ]


@pytest.fixture
def store():
    """Store with Alice (1), Bob (2) and two unassigned items"""
    s = BillStore()
    s.add_participant("Alice")
    s.add_participant("Bob")
    s.add_item("Pizza", Decimal("20"))
    s.add_item("Wine", Decimal("10"))
    return s


@pytest.fixture
def state_file(tmp_path):
    return tmp_path / "state.json"
