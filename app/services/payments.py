import logging
import time
from decimal import Decimal
from typing import NamedTuple, Optional

from app.utils.validation import is_valid_upi_id

logger = logging.getLogger(__name__)

COD = "cod"
UPI = "upi"
CARD = "card"
NETBANKING = "netbanking"

PAYMENT_METHODS = (COD, UPI, CARD, NETBANKING)
ONLINE_METHODS = (UPI, CARD, NETBANKING)


class PaymentError(Exception):
    pass


class PaymentSelection(NamedTuple):
    method: str
    upi_id: Optional[str] = None

    @property
    def is_online(self) -> bool:
        return self.method in ONLINE_METHODS

    def validation_error(self) -> Optional[str]:
        """Message for an unusable selection, or None. Never touches the network."""
        if self.method not in PAYMENT_METHODS:
            return "Please choose a payment method"
        if self.method == UPI and not is_valid_upi_id(self.upi_id):
            return "Please enter a valid UPI ID (e.g., yourname@upi)"
        return None


class PaymentReceipt(NamedTuple):
    payment_method: str  # display label stored on the order
    payment_status: str


def describe(selection: PaymentSelection) -> PaymentReceipt:
    if selection.method == COD:
        return PaymentReceipt("Cash on Delivery", "Cash on Delivery")
    if selection.method == UPI:
        return PaymentReceipt(f"UPI ({selection.upi_id})", "Paid via UPI")
    if selection.method == CARD:
        return PaymentReceipt("Card", "completed")
    return PaymentReceipt("Net Banking", "completed")


class PaymentGateway:
    """Seam for a real payment provider."""

    def authorize(self, selection: PaymentSelection, amount: Decimal) -> PaymentReceipt:
        raise NotImplementedError


class SimulatedPaymentGateway(PaymentGateway):
    """Stands in for a provider: waits a fixed delay for online methods and
    always succeeds."""

    def __init__(self, delay_seconds: float = 2.0, sleep=time.sleep):
        self.delay_seconds = delay_seconds
        self._sleep = sleep

    def authorize(self, selection, amount):
        if selection.is_online and self.delay_seconds > 0:
            logger.info("Simulating %s payment of %s", selection.method, amount)
            self._sleep(self.delay_seconds)
        return describe(selection)
