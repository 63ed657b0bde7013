"""
Bill Splitter module for Splitt
Turns the bill state into what every participant owes.

Everything here is a pure function of its arguments: nothing is cached and
nothing is rounded. Rounding to cents happens only when amounts are displayed
(see utils.round_money).
"""

import logging
from decimal import Decimal, localcontext
from typing import Iterable, List, Sequence

from config import DEFAULT_TAX_RATE_PERCENT
from constants import ZERO
from data_models import Allocation, BillState, Item, Participant, ParticipantShare, SplitMode

logger = logging.getLogger(__name__)

# Working precision for shares; well beyond anything a bill needs
ALLOCATION_PRECISION = 50


def _dec(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def bill_subtotal(items: Iterable[Item]) -> Decimal:
    """Sum of all item costs, assigned or not"""
    return sum((_dec(item.cost) for item in items), ZERO)


def total_after_extras(items: Iterable[Item], tax, tip) -> Decimal:
    """Subtotal plus tax plus tip"""
    return bill_subtotal(items) + _dec(tax) + _dec(tip)


def suggest_tax(subtotal, rate_percent=DEFAULT_TAX_RATE_PERCENT) -> Decimal:
    """Default tax suggestion as a percentage of the subtotal"""
    return _dec(subtotal) * _dec(rate_percent) / Decimal(100)


def tip_from_percentage(subtotal, percent) -> Decimal:
    """tip = subtotal * percent / 100"""
    return _dec(subtotal) * _dec(percent) / Decimal(100)


def unassigned_items(items: Iterable[Item]) -> List[Item]:
    """Items nobody is assigned to; their cost is charged to no one"""
    return [item for item in items if not item.participant_ids]


def _extra_share(mode: SplitMode, amount: Decimal, proportion: Decimal, participant_count: int) -> Decimal:
    if mode is SplitMode.EVEN:
        return amount / Decimal(participant_count)
    return proportion * amount


def allocate(
    items: Sequence[Item],
    participants: Sequence[Participant],
    tax,
    tip,
    tax_mode: SplitMode,
    tip_mode: SplitMode,
) -> Allocation:
    """Compute every participant's share of subtotal, tax and tip.

    Returns one ParticipantShare per participant, keyed by participant id.
    Item assignments that point at ids which are not in `participants` are
    ignored. Items with no participants count towards the subtotal but are
    charged to nobody.
    """
    with localcontext() as ctx:
        ctx.prec = ALLOCATION_PRECISION

        tax = _dec(tax)
        tip = _dec(tip)
        subtotal = bill_subtotal(items)

        subtotal_shares = {p.id: ZERO for p in participants}

        for item in items:
            if not item.participant_ids:
                continue
            share = _dec(item.cost) / Decimal(len(item.participant_ids))
            for pid in item.participant_ids:
                if pid in subtotal_shares:
                    subtotal_shares[pid] += share

        if subtotal == 0:
            logger.debug("Subtotal is zero, all %d participants owe nothing", len(subtotal_shares))
            return {pid: ParticipantShare() for pid in subtotal_shares}

        participant_count = len(subtotal_shares)
        result = {}
        for pid, subtotal_share in subtotal_shares.items():
            proportion = subtotal_share / subtotal
            result[pid] = ParticipantShare(
                subtotal_share=subtotal_share,
                tax_share=_extra_share(tax_mode, tax, proportion, participant_count),
                tip_share=_extra_share(tip_mode, tip, proportion, participant_count),
            )

    logger.debug(
        "Allocated subtotal %s, tax %s (%s), tip %s (%s) across %d participants",
        subtotal, tax, tax_mode.value, tip, tip_mode.value, participant_count,
    )
    return result


def allocate_state(state: BillState) -> Allocation:
    """allocate() over a whole BillState snapshot"""
    return allocate(
        state.items,
        state.participants,
        state.tax,
        state.tip,
        state.tax_mode,
        state.tip_mode,
    )
