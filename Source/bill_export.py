"""
Export module for Splitt
Complete bill and split breakdown as JSON
"""

import json
import logging
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Optional

from bill_splitter import bill_subtotal, total_after_extras, unassigned_items
from config import CURRENCY_DEFAULT
from constants import VERSION
from data_models import Allocation, BillState
from exceptions import PersistenceError
from utils import round_money, sanitize_filename

logger = logging.getLogger(__name__)


def _money(amount: Decimal) -> float:
    return float(round_money(amount))


def build_export(state: BillState, allocation: Allocation, currency: str = CURRENCY_DEFAULT,
                 now: Optional[datetime] = None) -> Dict[str, Any]:
    """JSON-serialisable view of the bill and what everyone owes"""
    now = now or datetime.now()
    names = {p.id: p.name for p in state.participants}

    items = []
    for item in state.items:
        live = [pid for pid in sorted(item.participant_ids) if pid in names]
        items.append({
            'id': item.id,
            'name': item.name,
            'cost': _money(item.cost),
            'assigned_to': [names[pid] for pid in live],
        })

    breakdown = {}
    for participant in state.participants:
        share = allocation.get(participant.id)
        if share is None:
            continue
        person_items = []
        for item in state.items:
            if participant.id in item.participant_ids:
                person_items.append({
                    'item_name': item.name,
                    'item_total_price': _money(item.cost),
                    'shared_with': len(item.participant_ids),
                    'person_share': _money(item.cost / len(item.participant_ids)),
                })
        breakdown[str(participant.id)] = {
            'name': participant.name,
            'items': person_items,
            'subtotal_share': _money(share.subtotal_share),
            'tax_share': _money(share.tax_share),
            'tip_share': _money(share.tip_share),
            'total': _money(share.total),
        }

    return {
        'export_info': {
            'timestamp': now.isoformat(),
            'version': VERSION,
            'currency': currency,
        },
        'bill': {
            'items': items,
            'subtotal': _money(bill_subtotal(state.items)),
            'tax': _money(state.tax),
            'tip': _money(state.tip),
            'total': _money(total_after_extras(state.items, state.tax, state.tip)),
            'tax_mode': state.tax_mode.value,
            'tip_mode': state.tip_mode.value,
        },
        'participants': [{'id': p.id, 'name': p.name} for p in state.participants],
        'split': breakdown,
        'unassigned_items': [item.name for item in unassigned_items(state.items)],
    }


def export_results(state: BillState, allocation: Allocation, currency: str = CURRENCY_DEFAULT,
                   filename: Optional[str] = None) -> str:
    """Write the export to a timestamped JSON file and return its name"""
    now = datetime.now()
    if filename is None:
        filename = sanitize_filename(f"splitt_bill_{now.strftime('%Y%m%d_%H%M%S')}.json")

    data = build_export(state, allocation, currency, now)
    try:
        with open(filename, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
    except OSError as e:
        logger.error("Export to %s failed: %s", filename, e)
        raise PersistenceError(f"Export failed: {e}") from e

    logger.info("Exported bill to %s", filename)
    return filename
