import json
from decimal import Decimal

import pytest

from bill_store import BillStore
from data_models import BillState, SplitMode
from exceptions import PersistenceError
from persistence import BillRepository, dict_to_state, state_to_dict


def test_missing_file_loads_empty_bill(state_file):
    assert BillRepository(str(state_file)).load() == BillState()


def test_corrupt_file_loads_empty_bill(state_file):
    state_file.write_text("{not json")
    assert BillRepository(str(state_file)).load() == BillState()


def test_save_and_load(store, state_file):
    store.toggle_participant_on_item(1, 2)
    store.set_tax(Decimal("2.475"))
    store.set_tip_mode(SplitMode.EVEN)
    repo = BillRepository(str(state_file))

    repo.save(store.state)

    assert repo.load() == store.state


def test_stable_keys(store, state_file):
    BillRepository(str(state_file)).save(store.state)
    data = json.loads(state_file.read_text(encoding="utf-8"))

    assert set(data) == {"people", "items", "tax", "tip", "taxMode", "tipMode", "nextPersonId", "nextItemId"}
    assert data["people"][0] == {"id": 1, "name": "Alice"}
    assert data["items"][0] == {"id": 1, "name": "Pizza", "cost": "20", "people": []}


def test_bad_entries_default_individually():
    state = dict_to_state({
        "people": [{"id": 1, "name": "Ann"}, {"id": "x"}, {"id": 1, "name": "dup"}, "junk"],
        "items": "nope",
        "tax": "abc",
        "tip": -4,
        "taxMode": "even",
        "tipMode": "sideways",
    })

    assert [(p.id, p.name) for p in state.participants] == [(1, "Ann")]
    assert state.items == []
    assert state.tax == 0
    assert state.tip == 0
    assert state.tax_mode is SplitMode.EVEN
    assert state.tip_mode is SplitMode.PROPORTIONAL


def test_id_counters_are_repaired():
    state = dict_to_state({
        "people": [{"id": 4, "name": "D"}],
        "items": [{"id": 7, "name": "Pie", "cost": 3.5, "people": [4, "x"]}],
        "nextPersonId": 2,
    })

    assert state.next_participant_id == 5
    assert state.next_item_id == 8
    assert state.items[0].cost == Decimal("3.5")
    assert state.items[0].participant_ids == {4}

    store = BillStore(state)
    assert store.add_participant() == 5


def test_round_trip_preserves_counters_after_removal():
    store = BillStore()
    store.add_participant("A")
    store.add_participant("B")
    store.remove_participant(2)

    state = dict_to_state(state_to_dict(store.state))
    assert state.next_participant_id == 3


def test_save_failure_raises(tmp_path, store):
    repo = BillRepository(str(tmp_path / "missing_dir" / "state.json"))
    with pytest.raises(PersistenceError):
        repo.save(store.state)


def test_amounts_survive_round_trip_exactly(store, state_file):
    store.set_item_cost(1, Decimal("100").normalize())
    store.set_tax(Decimal("0.00000005"))
    store.set_tip(Decimal("1E+1"))
    repo = BillRepository(str(state_file))

    repo.save(store.state)
    data = json.loads(state_file.read_text(encoding="utf-8"))
    loaded = repo.load()

    assert data["items"][0]["cost"] == "100"
    assert data["tax"] == "0.00000005"
    assert loaded.items[0].cost == 100
    assert loaded.tax == Decimal("0.00000005")
    assert loaded.tip == 10


def test_european_amounts_still_load():
    state = dict_to_state({"tax": "1,50", "items": [{"id": 1, "name": "Pie", "cost": "3,255"}]})
    assert state.tax == Decimal("1.50")
    assert state.items[0].cost == Decimal("3255")
