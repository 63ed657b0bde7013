"""
CLI Interface module for Splitt
Command-line interface for splitting a shared bill
"""

from typing import Optional

from bill_export import export_results
from bill_splitter import suggest_tax, tip_from_percentage, unassigned_items
from bill_store import BillStore
from config import CURRENCY_DEFAULT, DEFAULT_TAX_RATE_PERCENT, DEFAULT_TIP_PERCENT
from data_models import SplitMode
from exceptions import SplittError
from persistence import BillRepository
from receipt_import import ReceiptImportClient
from utils import (
    clean_text_for_display,
    format_money,
    parse_money,
    try_parse_decimal,
    try_parse_int,
    validate_menu_choice,
)


class SplittCLI:
    """Command-line interface for Splitt"""

    def __init__(self, store: BillStore = None, repository: Optional[BillRepository] = None,
                 client: Optional[ReceiptImportClient] = None, currency: str = CURRENCY_DEFAULT):
        self.store = store or BillStore()
        self.repository = repository
        self.client = client
        self.currency = currency

        if self.repository is not None:
            self.store.listeners.append(self._autosave)

    def _autosave(self, state):
        try:
            self.repository.save(state)
        except SplittError as e:
            print(f"⚠ {e}")

    def _money(self, amount) -> str:
        return format_money(amount, self.currency)

    def _select_participant(self, prompt: str = "Select person number: ") -> Optional[int]:
        people = self.store.state.participants
        if not people:
            print("\n⚠ No people added yet")
            return None
        for i, person in enumerate(people, 1):
            print(f"{i}. {person.name or '(unnamed)'}")
        idx = try_parse_int(input(prompt))
        if idx is None or not 1 <= idx <= len(people):
            print("Invalid selection")
            return None
        return people[idx - 1].id

    def _select_item(self, prompt: str = "Select item number: ") -> Optional[int]:
        items = self.store.state.items
        if not items:
            print("\n⚠ No items on the bill")
            return None
        for i, item in enumerate(items, 1):
            print(f"{i:2}. {clean_text_for_display(item.name, 30):30} {self._money(item.cost):>10}")
        idx = try_parse_int(input(prompt))
        if idx is None or not 1 <= idx <= len(items):
            print("Invalid selection")
            return None
        return items[idx - 1].id

    def display_banner(self):
        """Display application banner"""
        print("\n" + "="*60)
        print("🍽️  SPLITT - Shared Bill Splitter")
        print("="*60)

    def display_bill(self):
        """Display items with their assignees and the bill totals"""
        state = self.store.state
        names = {p.id: p.name or '(unnamed)' for p in state.participants}

        print("\n" + "="*50)
        print("📋 BILL ITEMS")
        print("="*50)

        if not state.items:
            print("No items yet")
        for i, item in enumerate(state.items, 1):
            assigned = [names[pid] for pid in sorted(item.participant_ids) if pid in names]
            label = ', '.join(assigned) if assigned else 'Unassigned'
            print(f"{i:2}. {clean_text_for_display(item.name, 30):30} {self._money(item.cost):>10} [{label}]")

        print("-"*50)
        print(f"{'SUBTOTAL:':38} {self._money(self.store.subtotal):>10}")
        tax_label = f"TAX ({state.tax_mode.value}):"
        tip_label = f"TIP ({state.tip_mode.value}):"
        print(f"{tax_label:38} {self._money(state.tax):>10}")
        print(f"{tip_label:38} {self._money(state.tip):>10}")
        print(f"{'TOTAL:':38} {self._money(self.store.total_after_extras):>10}")

    def display_split(self):
        """Display what everyone owes"""
        state = self.store.state
        allocation = self.store.allocation

        print("\n" + "="*50)
        print("💰 INDIVIDUAL SHARES")
        print("="*50)

        if not state.participants:
            print("No people added yet")
            return

        print(f"{'':15} {'Items':>9} {'Tax':>9} {'Tip':>9} {'Total':>10}")
        for person in state.participants:
            share = allocation[person.id]
            print(f"{clean_text_for_display(person.name or '(unnamed)', 15):15} "
                  f"{self._money(share.subtotal_share):>9} {self._money(share.tax_share):>9} "
                  f"{self._money(share.tip_share):>9} {self._money(share.total):>10}")

        floating = unassigned_items(state.items)
        if floating:
            print(f"\n⚠ {len(floating)} items are unassigned and charged to no one:")
            for item in floating:
                print(f"  • {item.name} ({self._money(item.cost)})")

    def manage_people(self):
        """Manage people for bill splitting"""
        print("\n" + "="*50)
        print("👥 PEOPLE MANAGEMENT")
        print("="*50)

        while True:
            people = self.store.state.participants
            current = ', '.join(p.name or '(unnamed)' for p in people) if people else 'None'
            print(f"\nCurrent people: {current}")
            print("\n1. Add person")
            print("2. Rename person")
            print("3. Remove person")
            print("4. Done")

            choice = validate_menu_choice(input("\nChoice: "), ['1', '2', '3', '4']) or ''
            print("-"*50)

            if choice == '1':
                name = input("Enter name: ").strip()
                self.store.add_participant(name)
                print(f"✓ Added {name or '(unnamed)'}")
            elif choice == '2':
                pid = self._select_participant()
                if pid is not None:
                    self.store.rename_participant(pid, input("New name: ").strip())
                    print("✓ Renamed")
            elif choice == '3':
                pid = self._select_participant("Select person number to remove: ")
                if pid is not None:
                    self.store.remove_participant(pid)
                    print("✓ Removed")
            elif choice == '4':
                break

    def manage_items(self):
        """Add, edit and remove bill items"""
        print("\n" + "="*50)
        print("🧾 ITEM MANAGEMENT")
        print("="*50)

        while True:
            print("\n1. Add item")
            print("2. Rename item")
            print("3. Set item cost")
            print("4. Remove item")
            print("5. Show bill")
            print("6. Done")

            choice = validate_menu_choice(input("\nChoice: "), ['1', '2', '3', '4', '5', '6']) or ''
            print("-"*50)

            if choice == '1':
                name = input("Item name: ").strip() or "New Item"
                cost = parse_money(input("Cost: "))
                self.store.add_item(name, cost)
                print(f"✓ Added {name} ({self._money(cost)})")
            elif choice == '2':
                item_id = self._select_item()
                if item_id is not None:
                    self.store.rename_item(item_id, input("New name: ").strip())
                    print("✓ Renamed")
            elif choice == '3':
                item_id = self._select_item()
                if item_id is not None:
                    cost = parse_money(input("Cost: "))
                    self.store.set_item_cost(item_id, cost)
                    print(f"✓ Cost set to {self._money(cost)}")
            elif choice == '4':
                item_id = self._select_item("Select item number to remove: ")
                if item_id is not None:
                    self.store.remove_item(item_id)
                    print("✓ Removed")
            elif choice == '5':
                self.display_bill()
            elif choice == '6':
                break

    def assign_items(self):
        """Toggle people on each item"""
        state = self.store.state
        if not state.items:
            print("\n⚠ No items to assign")
            return

        if not state.participants:
            print("\n⚠ No people added yet")
            return

        print("\n" + "="*50)
        print("🔍 ITEM ASSIGNMENT")
        print("="*50)

        for item in state.items:
            while True:
                current = self.store.state.find_item(item.id)
                people = self.store.state.participants
                print(f"\n{current.name} - {self._money(current.cost)}")
                for i, person in enumerate(people, 1):
                    mark = 'x' if person.id in current.participant_ids else ' '
                    print(f"  [{mark}] {i}. {person.name or '(unnamed)'}")

                selections = input("Toggle person numbers (comma-separated, a = everyone, Enter = next): ").strip()
                if not selections:
                    break
                if selections.lower() == 'a':
                    for person in people:
                        if person.id not in current.participant_ids:
                            self.store.toggle_participant_on_item(item.id, person.id)
                    continue
                for raw in selections.split(','):
                    idx = try_parse_int(raw)
                    if idx is not None and 1 <= idx <= len(people):
                        self.store.toggle_participant_on_item(item.id, people[idx - 1].id)
                    else:
                        print(f"Invalid selection: {raw.strip()}")

    def set_tax(self):
        """Set the tax amount, offering the default rate"""
        suggested = suggest_tax(self.store.subtotal)
        raw = input(f"\nEnter tax amount (Enter = {DEFAULT_TAX_RATE_PERCENT}%: {self._money(suggested)}): ").strip()
        tax = suggested if not raw else parse_money(raw)
        self.store.set_tax(tax)
        print(f"✓ Tax set to {self._money(tax)}")

    def set_tip(self):
        """Set the tip as an amount or a percentage of the subtotal"""
        raw = input(f"\nEnter tip amount or percentage like 18% (Enter = {DEFAULT_TIP_PERCENT}%): ").strip()
        if not raw:
            tip = tip_from_percentage(self.store.subtotal, DEFAULT_TIP_PERCENT)
        elif raw.endswith('%'):
            percent = try_parse_decimal(raw[:-1])
            if percent is None or percent < 0:
                print("Invalid percentage")
                return
            tip = tip_from_percentage(self.store.subtotal, percent)
        else:
            tip = parse_money(raw)
        self.store.set_tip(tip)
        print(f"✓ Tip set to {self._money(tip)}")

    def toggle_modes(self):
        """Switch tax or tip between even and proportional split"""
        state = self.store.state
        print(f"\n1. Tax split: {state.tax_mode.value}")
        print(f"2. Tip split: {state.tip_mode.value}")
        choice = validate_menu_choice(input("Toggle which? "), ['1', '2']) or ''

        def flipped(mode: SplitMode) -> SplitMode:
            return SplitMode.PROPORTIONAL if mode is SplitMode.EVEN else SplitMode.EVEN

        if choice == '1':
            self.store.set_tax_mode(flipped(state.tax_mode))
            print(f"✓ Tax now split {self.store.state.tax_mode.value}")
        elif choice == '2':
            self.store.set_tip_mode(flipped(state.tip_mode))
            print(f"✓ Tip now split {self.store.state.tip_mode.value}")

    def import_receipt(self, image_path: str):
        """Replace the items with those of a receipt image"""
        if self.client is None:
            self.client = ReceiptImportClient()

        print(f"\n📸 Importing receipt: {image_path}")
        try:
            receipt = self.store.import_receipt(self.client, image_path)
        except SplittError as e:
            print(f"⚠ Import failed, bill left unchanged: {e}")
            return

        print(f"✓ Imported {len(receipt.items)} items")
        self.display_bill()

    def export(self):
        """Export the bill and split to JSON"""
        try:
            filename = export_results(self.store.state, self.store.allocation, self.currency)
        except SplittError as e:
            print(f"\n{e}")
            return
        print(f"\n✅ Bill exported to {filename}")

    def clear_all(self):
        confirm = input("\nClear all people and items? (y/N): ").strip().lower()
        if confirm == 'y':
            self.store.clear_all()
            print("✓ Cleared")

    def run(self):
        """Run the CLI application"""
        self.display_banner()

        while True:
            print("\n" + "="*50)
            print("MAIN MENU")
            print("="*50)
            print("1. Manage people")
            print("2. Manage items")
            print("3. Assign items to people")
            print("4. Set tax")
            print("5. Set tip")
            print("6. Even / proportional split")
            print("7. Show split")
            print("8. Import receipt image")
            print("9. Export results")
            print("10. Clear all")
            print("11. Exit")

            choice = input("\nChoice: ").strip()

            if choice == '1':
                self.manage_people()
            elif choice == '2':
                self.manage_items()
            elif choice == '3':
                self.assign_items()
            elif choice == '4':
                self.set_tax()
            elif choice == '5':
                self.set_tip()
            elif choice == '6':
                self.toggle_modes()
            elif choice == '7':
                self.display_bill()
                self.display_split()
            elif choice == '8':
                self.import_receipt(input("Enter image path: ").strip())
            elif choice == '9':
                self.export()
            elif choice == '10':
                self.clear_all()
            elif choice == '11':
                print("\n👋 Thank you for using Splitt!")
                break
