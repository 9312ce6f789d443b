"""
zkship - Outcome Module

Gas and token totals for a finished call, plus NEAR amount formatting.
"""

import re
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Optional, Union

NEAR_NOMINATION_EXP = 24
YOCTO_PER_NEAR = 10 ** NEAR_NOMINATION_EXP


def format_near_amount(yocto: Union[int, str], frac_digits: int = NEAR_NOMINATION_EXP) -> str:
    """
    Render a yoctoNEAR amount as NEAR.

    The whole part is comma grouped and trailing zeros are dropped. With
    fewer than 24 fraction digits the value is rounded half up at the
    last kept digit.

    Example:
        >>> format_near_amount(1234500000000000000000000000)
        '1,234.5'
    """
    value = int(yocto)
    if value < 0:
        raise ValueError(f"amount must not be negative: {yocto}")
    if not 0 <= frac_digits <= NEAR_NOMINATION_EXP:
        raise ValueError(f"frac_digits must be within 0..{NEAR_NOMINATION_EXP}")

    if frac_digits != NEAR_NOMINATION_EXP:
        rounding_exp = NEAR_NOMINATION_EXP - frac_digits - 1
        if rounding_exp > 0:
            value += 5 * 10 ** rounding_exp

    digits = str(value)
    split = max(0, len(digits) - NEAR_NOMINATION_EXP)
    whole = digits[:split] or '0'
    fraction = digits[split:].rjust(NEAR_NOMINATION_EXP, '0')[:frac_digits]
    return re.sub(r'\.?0*$', '', f"{int(whole):,}.{fraction}", count=1)


def parse_near_amount(amount: str) -> int:
    """
    Convert a NEAR amount string back to yoctoNEAR.

    Raises:
        ValueError: If the string has more than 24 fraction digits
    """
    cleaned = amount.replace(',', '').strip()
    whole, _, fraction = cleaned.partition('.')
    if '.' in fraction or len(fraction) > NEAR_NOMINATION_EXP:
        raise ValueError(f"cannot parse {amount!r} as NEAR amount")
    return int((whole or '0') + fraction.ljust(NEAR_NOMINATION_EXP, '0'))


def yocto_to_near(yocto: int) -> Decimal:
    return Decimal(f"{int(yocto)}E-{NEAR_NOMINATION_EXP}")


@dataclass(frozen=True)
class OutcomeSummary:
    """Totals burnt by a transaction and every receipt it produced."""
    total_gas_burnt: int
    total_tokens_burnt_yocto: int
    receipt_count: int = 0

    @property
    def total_tokens_burnt(self) -> Decimal:
        return yocto_to_near(self.total_tokens_burnt_yocto)

    @property
    def formatted_tokens_burnt(self) -> str:
        return format_near_amount(self.total_tokens_burnt_yocto)


def _burnt(entry: Dict[str, Any]):
    outcome = entry['outcome']
    return int(outcome['gas_burnt']), int(outcome['tokens_burnt'])


def summarize_outcome(outcome: Dict[str, Any]) -> OutcomeSummary:
    """
    Add up gas and tokens burnt across a call outcome.

    Totals start from ``transaction_outcome`` and add every entry of
    ``receipts_outcome``.
    """
    gas, tokens = _burnt(outcome['transaction_outcome'])
    receipts = outcome.get('receipts_outcome') or []
    for receipt in receipts:
        receipt_gas, receipt_tokens = _burnt(receipt)
        gas += receipt_gas
        tokens += receipt_tokens
    return OutcomeSummary(
        total_gas_burnt=gas,
        total_tokens_burnt_yocto=tokens,
        receipt_count=len(receipts),
    )


def outcome_failure(outcome: Dict[str, Any]) -> Optional[Any]:
    """Return the raw ``Failure`` object of an outcome status, if any."""
    status = outcome.get('status')
    if isinstance(status, dict) and 'Failure' in status:
        return status['Failure']
    return None
