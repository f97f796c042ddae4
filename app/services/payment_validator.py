"""
Payment Validator

Gate in front of payment creation. Rules, checked in order:

  1. paid_amount > 0
  2. creation is refused when nothing is owed (remaining <= 0);
     corrections of an existing payment skip this rule
  3. paid_amount <= remaining + tolerance

`remaining` must be computed without the payment being corrected.
"""
import logging

from app.core.exceptions import BalanceMismatchError, PaymentValidationError
from app.services.balance_service import MONEY_TOLERANCE

logger = logging.getLogger(__name__)

EXCEEDS_REMAINING = "exceeds remaining balance"
BALANCE_ALREADY_ZERO = "balance already zero"
NOT_POSITIVE = "must be greater than zero"


def validate_payment(paid_amount: float, remaining_balance: float, is_edit: bool = False) -> None:
    if paid_amount is None or paid_amount <= 0:
        raise PaymentValidationError(NOT_POSITIVE, field="paidAmount")

    if not is_edit and remaining_balance <= 0:
        raise PaymentValidationError(BALANCE_ALREADY_ZERO, field="paidAmount")

    if paid_amount > remaining_balance + MONEY_TOLERANCE:
        raise PaymentValidationError(EXCEEDS_REMAINING, field="paidAmount")


def validate_submitted_balance(submitted: float, expected: float) -> None:
    """Reject a client-computed post-payment balance that drifted from ours."""
    if abs(submitted - expected) > MONEY_TOLERANCE:
        logger.info(f"[payments] Balance mismatch: submitted={submitted:.2f} expected={expected:.2f}")
        raise BalanceMismatchError(
            f"balance mismatch: expected {expected:.2f}, got {submitted:.2f}",
            field="balance",
        )
