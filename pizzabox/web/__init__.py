"""
Web module: server-rendered storefront pages and display widgets.
"""

from pizzabox.web.components import (
    AUTO_CONFIRMED_CARD,
    AUTO_CONFIRMED_UPI_ID,
    UPI_APPS,
    CardDetails,
    CardPaymentWidget,
    UpiPaymentWidget,
)
from pizzabox.web.pages import router, templates, wants_html, render_error, render_not_found

__all__ = [
    "UpiPaymentWidget",
    "UPI_APPS",
    "AUTO_CONFIRMED_UPI_ID",
    "AUTO_CONFIRMED_CARD",
    "CardDetails",
    "CardPaymentWidget",
    "router",
    "templates",
    "wants_html",
    "render_error",
    "render_not_found",
]
