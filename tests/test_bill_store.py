from decimal import Decimal

from bill_store import (
    AddItem,
    AddParticipant,
    BillStore,
    ClearAll,
    RemoveParticipant,
    RenameParticipant,
    ReplaceItems,
    SetItemCost,
    SetTax,
    SetTip,
    ToggleParticipantOnItem,
)
from data_models import BillState, ImportedItem, ImportedReceipt, SplitMode


def test_ids_are_monotonic_and_never_reused():
    store = BillStore()
    first = store.add_participant("A")
    second = store.add_participant("B")
    store.remove_participant(second)
    third = store.add_participant("C")

    assert (first, second, third) == (1, 2, 3)
    assert store.state.participant_ids() == [1, 3]


def test_item_and_participant_counters_are_separate():
    store = BillStore()
    assert store.add_participant() == 1
    assert store.add_item() == 1
    assert store.add_item() == 2
    assert store.add_participant() == 2


def test_new_entries_use_defaults():
    store = BillStore()
    store.add_participant()
    store.add_item()
    state = store.state

    assert state.participants[0].name == "New Person"
    item = state.items[0]
    assert item.name == "New Item"
    assert item.cost == 0
    assert item.participant_ids == set()


def test_operations_do_not_mutate_their_input():
    state = AddItem("Soup").apply(AddParticipant("A").apply(BillState()))
    before = state.copy()

    ToggleParticipantOnItem(1, 1).apply(state)
    SetItemCost(1, Decimal("5")).apply(state)
    RenameParticipant(1, "Z").apply(state)
    ClearAll().apply(state)

    assert state == before


def test_store_snapshot_is_isolated(store):
    snapshot = store.state
    snapshot.items[0].participant_ids.add(1)
    snapshot.participants.clear()

    assert store.state.items[0].participant_ids == set()
    assert len(store.state.participants) == 2


def test_toggle_participant_on_item(store):
    store.toggle_participant_on_item(1, 1)
    store.toggle_participant_on_item(1, 2)
    assert store.state.find_item(1).participant_ids == {1, 2}
    assert store.allocation[1].subtotal_share == 10

    store.toggle_participant_on_item(1, 2)
    assert store.state.find_item(1).participant_ids == {1}
    assert store.allocation[1].subtotal_share == 20
    assert store.allocation[2].subtotal_share == 0


def test_toggle_ignores_unknown_ids(store):
    before = store.state
    store.toggle_participant_on_item(1, 42)
    store.toggle_participant_on_item(42, 1)
    assert store.state == before


def test_removed_participant_stops_counting(store):
    store.toggle_participant_on_item(1, 1)
    store.toggle_participant_on_item(1, 2)
    store.remove_participant(2)

    allocation = store.allocation
    assert set(allocation) == {1}
    assert allocation[1].subtotal_share == 10
    # the stale id stays on the item; nothing cascades
    assert store.state.find_item(1).participant_ids == {1, 2}


def test_removed_participant_can_be_untoggled(store):
    store.toggle_participant_on_item(1, 2)
    store.remove_participant(2)
    store.toggle_participant_on_item(1, 2)
    assert store.state.find_item(1).participant_ids == set()


def test_rename_to_same_name_keeps_allocation(store):
    store.toggle_participant_on_item(1, 1)
    store.toggle_participant_on_item(2, 2)
    store.set_tax(Decimal("2.475"))
    before = store.allocation

    store.rename_participant(1, "Alice")
    assert store.allocation == before


def test_rename_and_remove_item(store):
    store.rename_item(2, "Red wine")
    assert store.state.find_item(2).name == "Red wine"

    store.remove_item(1)
    assert [item.id for item in store.state.items] == [2]
    assert store.subtotal == 10


def test_set_item_cost_recomputes(store):
    store.toggle_participant_on_item(2, 2)
    store.set_item_cost(2, Decimal("12.50"))
    assert store.subtotal == Decimal("32.50")
    assert store.allocation[2].subtotal_share == Decimal("12.50")


def test_money_values_are_clamped():
    state = SetTax(Decimal("-3")).apply(BillState())
    state = SetTip("-2").apply(state)
    state = SetItemCost(1, -5).apply(AddItem().apply(state))

    assert state.tax == 0
    assert state.tip == 0
    assert state.items[0].cost == 0


def test_item_costs_are_truncated_to_cents(store):
    store.set_item_cost(1, Decimal("1.005"))
    store.dispatch(SetItemCost(2, "12.509"))
    assert store.state.find_item(1).cost == Decimal("1.00")
    assert store.state.find_item(2).cost == Decimal("12.50")

    receipt = ImportedReceipt(items=[ImportedItem("Soup", Decimal("12.505"))])
    store.dispatch(ReplaceItems(receipt))
    assert store.state.items[0].cost == Decimal("12.50")


def test_tax_and_tip_keep_full_precision(store):
    store.set_tax(Decimal("2.475"))
    assert store.state.tax == Decimal("2.475")


def test_modes_and_totals(store):
    store.toggle_participant_on_item(1, 1)
    store.toggle_participant_on_item(1, 2)
    store.toggle_participant_on_item(2, 1)
    store.set_tax(Decimal("2.475"))
    store.set_tip(Decimal("6"))
    store.set_tip_mode(SplitMode.EVEN)

    assert store.total_after_extras == Decimal("38.475")
    assert store.state.tip_mode is SplitMode.EVEN
    assert store.allocation[2].tip_share == 3


def test_clear_all(store):
    store.set_tax(Decimal("1"))
    store.set_tip(Decimal("2"))
    store.set_tax_mode(SplitMode.EVEN)
    store.clear_all()

    state = store.state
    assert state.participants == []
    assert state.items == []
    assert state.tax == 0
    assert state.tip == 0
    assert store.allocation == {}
    assert store.add_participant() == 3


def test_replace_items_mints_fresh_ids(store):
    store.toggle_participant_on_item(1, 1)
    receipt = ImportedReceipt(
        items=[ImportedItem("Ramen", Decimal("14")), ImportedItem("Gyoza", Decimal("6.50"))],
        tax=Decimal("1.69"),
        tip=Decimal("4"),
    )
    store.dispatch(ReplaceItems(receipt))
    state = store.state

    assert [(i.id, i.name, i.cost) for i in state.items] == [
        (3, "Ramen", Decimal("14")),
        (4, "Gyoza", Decimal("6.50")),
    ]
    assert all(not i.participant_ids for i in state.items)
    assert state.tax == Decimal("1.69")
    assert state.tip == 4
    assert [p.name for p in state.participants] == ["Alice", "Bob"]


def test_listeners_see_every_change():
    seen = []
    store = BillStore()
    store.listeners.append(seen.append)

    store.add_participant("A")
    store.dispatch(RemoveParticipant(1))

    assert [len(s.participants) for s in seen] == [1, 0]
