"""
Allocation engine for the Kakeibo page.

Everything here is a pure function over plain values: income sources are
summed, fund inputs are converted to amounts and both steps are validated.
Malformed numeric text never raises; it reads as zero.
"""

from collections import namedtuple
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

EPSILON = Decimal('0.0001')
HUNDRED = Decimal('100')
ZERO = Decimal('0')
MAX_EXPONENT = 308

MODE_AMOUNT = 'amount'
MODE_PERCENT = 'percent'
MODES = (MODE_AMOUNT, MODE_PERCENT)

FUND_KEYS = ('ef', 'sf', 'spending', 'fun')

Fund = namedtuple('Fund', ['key', 'label', 'bank'])

FUNDS = (
    Fund('ef', 'Emergency Fund', 'EF-bank'),
    Fund('sf', 'Sinking Fund', 'SF-bank / GSave'),
    Fund('spending', 'Spending Fund', 'spend-bank'),
    Fund('fun', 'Fun Fund', 'spend-bank'),
)

MISSING_RECEIVED_INCOME = 'MissingReceivedIncome'
NON_POSITIVE_SOURCE_AMOUNT = 'NonPositiveSourceAmount'
ALLOCATION_EXCEEDS_INCOME = 'AllocationExceedsIncome'
PERCENT_TOTAL_EXCEEDS_100 = 'PercentTotalExceeds100'
STAGE2_LOCKED = 'Stage2Locked'


@dataclass(frozen=True)
class IncomeSource:
    id: str
    name: str
    received: bool = False
    amount: str = ''


@dataclass(frozen=True)
class FundAllocationInput:
    ef: str = ''
    sf: str = ''
    spending: str = ''
    fun: str = ''

    def values(self):
        return [getattr(self, key) for key in FUND_KEYS]


@dataclass(frozen=True)
class FundAmounts:
    ef: Decimal = ZERO
    sf: Decimal = ZERO
    spending: Decimal = ZERO
    fun: Decimal = ZERO

    def total(self):
        return self.ef + self.sf + self.spending + self.fun

    def as_dict(self):
        return {key: getattr(self, key) for key in FUND_KEYS}


@dataclass(frozen=True)
class Finding:
    """A soft validation result shown to the user."""
    code: str
    message: str
    source_id: str = None

    def __str__(self):
        return self.message


@dataclass(frozen=True)
class AllocationSummary:
    total_income: Decimal
    funds_as_amount: FundAmounts
    allocated_total: Decimal
    remaining: Decimal
    stage1_errors: list
    stage2_errors: list
    can_finalize: bool

    @property
    def stage1_valid(self):
        return not self.stage1_errors

    @property
    def stage2_unlocked(self):
        return self.total_income > 0


def parse_or_zero(text):
    """Read user-typed numeric text, falling back to zero.

    Blank, malformed, NaN and infinite input all read as ``Decimal(0)``.
    Negative numbers keep their sign; callers decide whether to clamp.
    """
    if text is None or isinstance(text, bool):
        return ZERO
    if isinstance(text, (int, float, Decimal)):
        text = str(text)
    text = text.strip()
    # Decimal accepts digit separators, a number input does not
    if not text or '_' in text:
        return ZERO
    try:
        value = Decimal(text)
    except InvalidOperation:
        return ZERO
    # past double range a number field reads as Infinity
    if not value.is_finite() or value.adjusted() > MAX_EXPONENT:
        return ZERO
    return value


def clamp_non_negative(value):
    return value if value > 0 else ZERO


def compute_total_income(sources):
    total = ZERO
    for source in sources:
        if not source.received:
            continue
        amount = parse_or_zero(source.amount)
        if amount > 0:
            total += amount
    return total


def convert_allocations(funds, mode, total_income):
    """Turn the four fund inputs into currency amounts.

    In amount mode each field is its own amount. In percent mode each field
    is a share of ``total_income``. No single field is capped; only the
    aggregate is validated.
    """
    parsed = [clamp_non_negative(parse_or_zero(value)) for value in funds.values()]
    if mode == MODE_PERCENT:
        parsed = [total_income * value / HUNDRED for value in parsed]
    return FundAmounts(*parsed)


def percent_total(funds):
    return sum((clamp_non_negative(parse_or_zero(value)) for value in funds.values()), ZERO)


def validate_stage1(sources):
    findings = []
    if not any(s.received and parse_or_zero(s.amount) > 0 for s in sources):
        findings.append(Finding(
            MISSING_RECEIVED_INCOME,
            'At least 1 source must be marked received with an amount > 0.'
        ))
    for source in sources:
        if source.received and parse_or_zero(source.amount) <= 0:
            findings.append(Finding(
                NON_POSITIVE_SOURCE_AMOUNT,
                f'{source.name}: amount must be > 0 if received is ON.',
                source_id=source.id
            ))
    return findings


def validate_stage2(stage1_valid, mode, funds, allocated_total, total_income):
    if not stage1_valid:
        return [Finding(STAGE2_LOCKED, 'Step 2 is locked until Step 1 has a valid total income.')]

    findings = []
    if mode == MODE_AMOUNT and allocated_total > total_income + EPSILON:
        findings.append(Finding(ALLOCATION_EXCEEDS_INCOME, 'Allocated total cannot exceed total income.'))

    if mode == MODE_PERCENT and percent_total(funds) > HUNDRED + EPSILON:
        findings.append(Finding(PERCENT_TOTAL_EXCEEDS_100, 'Total percent cannot exceed 100%.'))

    return findings


def summarize(sources, funds, mode):
    """Recompute every derived value for the given inputs."""
    total_income = compute_total_income(sources)
    funds_as_amount = convert_allocations(funds, mode, total_income)
    allocated_total = funds_as_amount.total()

    stage1 = validate_stage1(sources)
    # the lock follows the income total, not the per-source findings
    stage2 = validate_stage2(total_income > 0, mode, funds, allocated_total, total_income)

    return AllocationSummary(
        total_income=total_income,
        funds_as_amount=funds_as_amount,
        allocated_total=allocated_total,
        remaining=total_income - allocated_total,
        stage1_errors=[str(f) for f in stage1],
        stage2_errors=[str(f) for f in stage2],
        can_finalize=not stage2,
    )
