"""
Kakeibo page state and the reducers that edit it.

The state is a frozen dataclass that round-trips through a plain dict, so it
can be kept in the session cookie between requests. Reducers never mutate:
each returns a new state, or the same one when the edit does not apply.
"""

import re
from dataclasses import dataclass, field, replace
from typing import Optional, Tuple

from allocation import (
    FUND_KEYS, MODE_AMOUNT, MODES, FundAllocationInput, FundAmounts,
    IncomeSource, parse_or_zero, summarize,
)

DEFAULT_SOURCES = (
    IncomeSource('bpi', 'BPI'),
    IncomeSource('gcash', 'GCash'),
)


@dataclass(frozen=True)
class KakeiboState:
    sources: Tuple[IncomeSource, ...] = DEFAULT_SOURCES
    funds: FundAllocationInput = field(default_factory=FundAllocationInput)
    mode: str = MODE_AMOUNT
    finalized: Optional[FundAmounts] = None

    def summary(self):
        return summarize(self.sources, self.funds, self.mode)

    def to_dict(self):
        return {
            'sources': [
                {'id': s.id, 'name': s.name, 'received': s.received, 'amount': s.amount}
                for s in self.sources
            ],
            'funds': {key: getattr(self.funds, key) for key in FUND_KEYS},
            'mode': self.mode,
            'finalized': (
                {key: str(value) for key, value in self.finalized.as_dict().items()}
                if self.finalized else None
            ),
        }

    @classmethod
    def from_dict(cls, data):
        if not data:
            return initial_state()

        sources = tuple(
            IncomeSource(
                id=str(s['id']),
                name=str(s.get('name', s['id'])),
                received=bool(s.get('received', False)),
                amount=_text(s.get('amount')),
            )
            for s in data.get('sources', [])
        )
        funds_data = data.get('funds') or {}
        funds = FundAllocationInput(**{key: _text(funds_data.get(key)) for key in FUND_KEYS})

        mode = data.get('mode')
        if mode not in MODES:
            mode = MODE_AMOUNT

        finalized = data.get('finalized')
        if finalized:
            finalized = FundAmounts(**{key: parse_or_zero(finalized.get(key)) for key in FUND_KEYS})

        return cls(sources=sources, funds=funds, mode=mode, finalized=finalized or None)


def _text(value):
    return '' if value is None else str(value)


def _slug(name):
    # ids travel in URL paths
    return re.sub(r'[^a-z0-9]+', '-', name.lower()).strip('-') or 'source'


def initial_state():
    return KakeiboState()


def add_source(state, name):
    name = (name or '').strip()
    if not name:
        return state

    taken = {s.id for s in state.sources}
    base = _slug(name)
    n = 1
    while f'{base}-{n}' in taken:
        n += 1

    source = IncomeSource(f'{base}-{n}', name)
    return replace(state, sources=state.sources + (source,))


def remove_source(state, source_id):
    sources = tuple(s for s in state.sources if s.id != source_id)
    if len(sources) == len(state.sources):
        return state
    return replace(state, sources=sources)


def find_source(state, source_id):
    for source in state.sources:
        if source.id == source_id:
            return source
    return None


def apply_stage1_edit(state, source_id, received=None, amount=None):
    """Edit one income source.

    Turning ``received`` off clears the amount. Amount edits only land on a
    source that is (or is being turned) received.
    """
    source = find_source(state, source_id)
    if source is None:
        return state

    updated = source
    if received is not None:
        updated = replace(updated, received=bool(received), amount=updated.amount if received else '')
    if amount is not None and updated.received:
        updated = replace(updated, amount=_text(amount))

    if updated == source:
        return state
    sources = tuple(updated if s.id == source_id else s for s in state.sources)
    return replace(state, sources=sources)


def save_stage1(state):
    if state.summary().stage1_errors:
        return state
    return replace(state, finalized=None)


def apply_stage2_edit(state, mode=None, **fields):
    """Switch the mode and/or edit fund fields.

    The mode re-reads the stored text and never rewrites it. Field edits are
    dropped while step 2 is locked.
    """
    unknown = set(fields) - set(FUND_KEYS)
    if unknown:
        raise TypeError(f'Unknown fund field(s): {", ".join(sorted(unknown))}')

    if mode is not None and mode in MODES:
        state = replace(state, mode=mode)

    edits = {key: _text(value) for key, value in fields.items() if value is not None}
    if edits and state.summary().stage2_unlocked:
        state = replace(state, funds=replace(state.funds, **edits))
    return state


def finalize(state):
    summary = state.summary()
    if not summary.can_finalize:
        return state
    return replace(state, finalized=summary.funds_as_amount)


def reset(state):
    sources = tuple(replace(s, received=False, amount='') for s in state.sources)
    return KakeiboState(sources=sources)
