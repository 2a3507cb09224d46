import pytest

from app.services.payments import PaymentSelection
from app.utils.validation import is_valid_upi_id


@pytest.mark.parametrize("value", ["alice@okhdfc", "a.b-c_d@ybl", "user123@upi", "alice.smith@upi"])
def test_valid_upi_ids(value):
    assert is_valid_upi_id(value)


@pytest.mark.parametrize("value", ["", None, "alice", "@upi", "alice@", "a@b@c", "al ice@upi", "alice smith@upi", "alice@ok-hdfc", "alice@upi\n"])
def test_invalid_upi_ids(value):
    assert not is_valid_upi_id(value)


def test_upi_selection_requires_valid_id():
    assert PaymentSelection("upi", "bad").validation_error() == "Please enter a valid UPI ID (e.g., yourname@upi)"
    assert PaymentSelection("upi", "bob@ybl").validation_error() is None


def test_other_methods_ignore_upi_id():
    for method in ("cod", "card", "netbanking"):
        assert PaymentSelection(method).validation_error() is None


def test_unknown_method_rejected():
    assert PaymentSelection("cheque").validation_error() == "Please choose a payment method"
