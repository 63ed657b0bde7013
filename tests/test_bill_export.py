import json
from datetime import datetime
from decimal import Decimal

from bill_export import build_export, export_results


def test_build_export(store):
    store.toggle_participant_on_item(1, 1)
    store.toggle_participant_on_item(1, 2)
    store.add_item("Bread", Decimal("4"))
    store.set_tax(Decimal("3.4"))
    store.set_tip(Decimal("6"))

    data = build_export(store.state, store.allocation, "USD", datetime(2026, 1, 2, 3, 4, 5))

    assert data["export_info"] == {"timestamp": "2026-01-02T03:04:05", "version": "1.0", "currency": "USD"}
    assert data["bill"]["subtotal"] == 34.0
    assert data["bill"]["total"] == 43.4
    assert data["bill"]["items"][0]["assigned_to"] == ["Alice", "Bob"]
    assert data["unassigned_items"] == ["Wine", "Bread"]

    alice = data["split"]["1"]
    assert alice["name"] == "Alice"
    assert alice["items"] == [
        {"item_name": "Pizza", "item_total_price": 20.0, "shared_with": 2, "person_share": 10.0},
    ]
    assert alice["subtotal_share"] == 10.0
    assert alice["tax_share"] == 1.0
    assert alice["tip_share"] == round(10 / 34 * 6, 2)


def test_export_results_writes_file(store, tmp_path):
    target = tmp_path / "out.json"
    filename = export_results(store.state, store.allocation, "USD", filename=str(target))

    assert filename == str(target)
    data = json.loads(target.read_text(encoding="utf-8"))
    assert [p["name"] for p in data["participants"]] == ["Alice", "Bob"]
    assert data["split"]["2"]["total"] == 0.0
