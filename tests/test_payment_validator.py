import pytest

from app.core.exceptions import BalanceMismatchError, PaymentValidationError
from app.services.payment_validator import (
    BALANCE_ALREADY_ZERO,
    EXCEEDS_REMAINING,
    NOT_POSITIVE,
    validate_payment,
    validate_submitted_balance,
)


def test_amount_within_tolerance_is_accepted():
    validate_payment(50.005, 50.0)
    validate_payment(50.0, 50.0)


def test_amount_over_tolerance_is_rejected():
    with pytest.raises(PaymentValidationError) as exc_info:
        validate_payment(50.02, 50.0)
    assert exc_info.value.reason == EXCEEDS_REMAINING
    assert exc_info.value.field == "paidAmount"
    assert exc_info.value.status_code == 400


@pytest.mark.parametrize("amount", [0, -10.0, None])
def test_amount_must_be_positive(amount):
    with pytest.raises(PaymentValidationError) as exc_info:
        validate_payment(amount, 100.0)
    assert exc_info.value.reason == NOT_POSITIVE


def test_nothing_owed_rejects_new_payments_but_not_corrections():
    with pytest.raises(PaymentValidationError) as exc_info:
        validate_payment(10.0, 0.0)
    assert exc_info.value.reason == BALANCE_ALREADY_ZERO

    # Corrections skip the nothing-owed rule, not the ceiling
    with pytest.raises(PaymentValidationError) as exc_info:
        validate_payment(10.0, 0.0, is_edit=True)
    assert exc_info.value.reason == EXCEEDS_REMAINING
    validate_payment(0.005, 0.0, is_edit=True)


def test_submitted_balance_mismatch():
    validate_submitted_balance(100.005, 100.0)
    with pytest.raises(BalanceMismatchError) as exc_info:
        validate_submitted_balance(90.0, 100.0)
    assert exc_info.value.field == "balance"
    assert exc_info.value.to_dict()["success"] is False
