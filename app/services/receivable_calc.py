"""
Receivable derivation.

A receivable is not stored; it is computed from a billing and the
collections booked against it. Everything here is pure so the same rules
back the list endpoint, the detail endpoint and the tests.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from app.config import settings
from app.models.enums import ReceivableClassification, ReceivableStatus

ZERO = Decimal("0")


@dataclass(frozen=True)
class ReceivableFigures:
    billing_amount: Decimal
    collected_amount: Decimal
    remaining_amount: Decimal
    status: ReceivableStatus
    classification: ReceivableClassification
    days_elapsed: int


def derive_status(billing_amount: Decimal, collected_amount: Decimal) -> ReceivableStatus:
    if collected_amount <= ZERO:
        return ReceivableStatus.PENDING
    if collected_amount < billing_amount:
        return ReceivableStatus.PARTIAL
    return ReceivableStatus.COMPLETED


def days_since(billing_date: date, as_of: date) -> int:
    """Whole days from billing date to as_of; a future billing date counts as 0."""
    return max((as_of - billing_date).days, 0)


def classify(
    status: ReceivableStatus,
    days_elapsed: int,
    manual: Optional[ReceivableClassification] = None,
    overdue_long_days: Optional[int] = None,
    bad_debt_days: Optional[int] = None,
) -> ReceivableClassification:
    """
    Age-based classification with a manual write-off override.

    Only ``written_off`` is honored as a manual value; any other stored
    value is ignored and the classification is recomputed from age.
    """
    if manual == ReceivableClassification.WRITTEN_OFF:
        return ReceivableClassification.WRITTEN_OFF
    if status == ReceivableStatus.COMPLETED:
        return ReceivableClassification.NORMAL

    overdue_long_days = settings.RECEIVABLE_OVERDUE_LONG_DAYS if overdue_long_days is None else overdue_long_days
    bad_debt_days = settings.RECEIVABLE_BAD_DEBT_DAYS if bad_debt_days is None else bad_debt_days

    if days_elapsed > bad_debt_days:
        return ReceivableClassification.BAD_DEBT
    if days_elapsed > overdue_long_days:
        return ReceivableClassification.OVERDUE_LONG
    return ReceivableClassification.NORMAL


def compute_receivable(
    billing_amount: Decimal,
    collection_amounts: Iterable[Decimal],
    billing_date: date,
    as_of: date,
    manual_classification: Optional[ReceivableClassification] = None,
) -> ReceivableFigures:
    """
    Derive all receivable figures for one billing.

    Args:
        billing_amount: Amount billed
        collection_amounts: Amounts of every collection booked against it
        billing_date: Date the billing was issued
        as_of: Business "today" (Asia/Seoul)
        manual_classification: Classification stored by an administrator, if any
    """
    collected = sum((Decimal(amount) for amount in collection_amounts), ZERO)
    remaining = max(billing_amount - collected, ZERO)
    status = derive_status(billing_amount, collected)
    elapsed = days_since(billing_date, as_of)
    return ReceivableFigures(
        billing_amount=billing_amount,
        collected_amount=collected,
        remaining_amount=remaining,
        status=status,
        classification=classify(status, elapsed, manual_classification),
        days_elapsed=elapsed,
    )
