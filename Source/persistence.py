"""
Persistence for Splitt
Stores the bill state as a JSON key-value file under stable keys.

Loading never fails: a missing file gives the empty bill, and every key that is
absent or corrupt falls back to its empty/zero value on its own.
"""

import json
import logging
import os
import tempfile
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List

from constants import STATE_KEYS as K, ZERO
from data_models import BillState, Item, Participant, SplitMode
from exceptions import PersistenceError
from utils import clean_price, to_cost, to_money

logger = logging.getLogger(__name__)


def _load_people(raw: Any) -> List[Participant]:
    if not isinstance(raw, list):
        return []
    people = []
    seen = set()
    for entry in raw:
        if not isinstance(entry, dict):
            continue
        pid = entry.get('id')
        if isinstance(pid, bool) or not isinstance(pid, int) or pid < 1 or pid in seen:
            continue
        name = entry.get('name')
        people.append(Participant(id=pid, name=name if isinstance(name, str) else ""))
        seen.add(pid)
    return people


def _load_items(raw: Any) -> List[Item]:
    if not isinstance(raw, list):
        return []
    items = []
    seen = set()
    for entry in raw:
        if not isinstance(entry, dict):
            continue
        item_id = entry.get('id')
        if isinstance(item_id, bool) or not isinstance(item_id, int) or item_id < 1 or item_id in seen:
            continue
        name = entry.get('name')
        people = entry.get('people')
        participant_ids = set()
        if isinstance(people, list):
            participant_ids = {p for p in people if isinstance(p, int) and not isinstance(p, bool)}
        items.append(Item(
            id=item_id,
            name=name if isinstance(name, str) else "",
            cost=to_cost(_load_amount(entry.get('cost'))),
            participant_ids=participant_ids,
        ))
        seen.add(item_id)
    return items


def _load_amount(raw: Any):
    if raw is None or isinstance(raw, bool) or not isinstance(raw, (int, float, str)):
        return ZERO
    try:
        amount = Decimal(str(raw).strip())
    except InvalidOperation:
        amount = clean_price(raw)
    return to_money(amount) if amount is not None else ZERO


def _load_counter(raw: Any, used_ids) -> int:
    floor = max(used_ids, default=0) + 1
    if isinstance(raw, int) and not isinstance(raw, bool) and raw >= floor:
        return raw
    if raw is not None:
        logger.warning("Id counter %r repaired to %d", raw, floor)
    return floor


def state_to_dict(state: BillState) -> Dict[str, Any]:
    """Convert BillState to a dictionary for JSON serialization"""
    return {
        K['people']: [{'id': p.id, 'name': p.name} for p in state.participants],
        K['items']: [
            {
                'id': item.id,
                'name': item.name,
                'cost': format(item.cost, 'f'),
                'people': sorted(item.participant_ids),
            }
            for item in state.items
        ],
        K['tax']: format(state.tax, 'f'),
        K['tip']: format(state.tip, 'f'),
        K['tax_mode']: state.tax_mode.value,
        K['tip_mode']: state.tip_mode.value,
        K['next_person_id']: state.next_participant_id,
        K['next_item_id']: state.next_item_id,
    }


def dict_to_state(d: Any) -> BillState:
    """Convert dictionary from JSON to BillState, defaulting every bad key"""
    if not isinstance(d, dict):
        return BillState()

    participants = _load_people(d.get(K['people']))
    items = _load_items(d.get(K['items']))

    return BillState(
        participants=participants,
        items=items,
        tax=_load_amount(d.get(K['tax'])),
        tip=_load_amount(d.get(K['tip'])),
        tax_mode=SplitMode.parse(d.get(K['tax_mode']), SplitMode.PROPORTIONAL),
        tip_mode=SplitMode.parse(d.get(K['tip_mode']), SplitMode.PROPORTIONAL),
        next_participant_id=_load_counter(d.get(K['next_person_id']), [p.id for p in participants]),
        next_item_id=_load_counter(d.get(K['next_item_id']), [item.id for item in items]),
    )


class BillRepository:
    """JSON file holding one bill"""

    def __init__(self, path: str):
        self.path = path

    def load(self) -> BillState:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return BillState()
        except (OSError, ValueError) as e:
            logger.warning("Could not read %s, starting with an empty bill: %s", self.path, e)
            return BillState()

        return dict_to_state(data)

    def save(self, state: BillState):
        """Write the state atomically (temp file, then replace)"""
        directory = os.path.dirname(os.path.abspath(self.path))
        try:
            fd, tmp_path = tempfile.mkstemp(prefix=".splitt_", suffix=".json", dir=directory)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(state_to_dict(state), f, ensure_ascii=False, indent=2)
                os.replace(tmp_path, self.path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.remove(tmp_path)
                raise
        except OSError as e:
            logger.error("Saving %s failed: %s", self.path, e)
            raise PersistenceError(f"Could not save bill to {self.path}: {e}") from e
