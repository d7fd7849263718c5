"""
Payment Method Widgets

Display-only widgets for the checkout page. Actual payment happens on the
external gateway; these widgets collect nothing and validate nothing.
"""

from dataclasses import dataclass
from typing import Callable, Optional

# UPI id reported to the checkout as soon as the widget is shown; the real
# VPA is entered on the gateway page.
AUTO_CONFIRMED_UPI_ID = "secure@upi"
PAYMENT_GATEWAY_NAME = "Razorpay"


@dataclass(frozen=True)
class UpiApp:
    """A UPI app shown on the payment widget."""
    name: str
    logo: str
    color: str


UPI_APPS = (
    UpiApp(name="Google Pay", logo="🟢", color="bg-green-100"),
    UpiApp(name="PhonePe", logo="🟣", color="bg-purple-100"),
    UpiApp(name="Paytm", logo="🔵", color="bg-blue-100"),
    UpiApp(name="BHIM", logo="🟠", color="bg-orange-100"),
)


class UpiPaymentWidget:
    """
    UPI payment method selector.

    The widget takes no input: on creation it reports AUTO_CONFIRMED_UPI_ID
    to `on_upi_change` exactly once, which marks UPI as a valid choice for
    the checkout.

    Example:
        >>> chosen = []
        >>> widget = UpiPaymentWidget(chosen.append)
        >>> chosen
        ['secure@upi']
    """

    template_name = "components/upi_payment.html"

    def __init__(self, on_upi_change: Optional[Callable[[str], None]] = None):
        self.upi_id = AUTO_CONFIRMED_UPI_ID
        if on_upi_change is not None:
            on_upi_change(self.upi_id)

    @property
    def apps(self) -> tuple[UpiApp, ...]:
        return UPI_APPS

    @property
    def gateway_name(self) -> str:
        return PAYMENT_GATEWAY_NAME

    @property
    def message(self) -> str:
        return (
            f"You will be redirected to a secure payment gateway ({self.gateway_name}) "
            f"where you can use {', '.join(app.name for app in self.apps[:3])}, etc."
        )

    def context(self) -> dict:
        """Template context for rendering the widget."""
        return {
            "upi_id": self.upi_id,
            "apps": self.apps,
            "gateway_name": self.gateway_name,
            "message": self.message,
        }


@dataclass(frozen=True)
class CardDetails:
    """Card summary reported to the checkout."""
    last4: str
    card_type: str


# Placeholder card reported as soon as the widget is shown; card entry
# happens on the gateway page.
AUTO_CONFIRMED_CARD = CardDetails(last4="1111", card_type="Secure")


class CardPaymentWidget:
    """
    Card payment method selector.

    Like the UPI widget it takes no input: on creation it reports
    AUTO_CONFIRMED_CARD to `on_card_change` exactly once.

    Example:
        >>> chosen = []
        >>> widget = CardPaymentWidget(chosen.append)
        >>> chosen[0].last4
        '1111'
    """

    template_name = "components/card_payment.html"

    def __init__(self, on_card_change: Optional[Callable[[CardDetails], None]] = None):
        self.card = AUTO_CONFIRMED_CARD
        if on_card_change is not None:
            on_card_change(self.card)

    @property
    def message(self) -> str:
        return "You will be redirected to a secure payment gateway to complete this transaction."

    def context(self) -> dict:
        """Template context for rendering the widget."""
        return {
            "last4": self.card.last4,
            "card_type": self.card.card_type,
            "message": self.message,
        }
