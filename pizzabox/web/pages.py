"""
Storefront Pages

Server-rendered pages and fragments:
    - GET /payments/upi: UPI payment widget fragment for the checkout
    - GET /payments/card: card payment widget fragment for the checkout
    - 404 page ("404 - Page Not Found")
    - error page ("Something went wrong!")

The 404 and error pages are rendered by the exception handlers in
pizzabox.main; API and JSON clients get JSON bodies instead.
"""

import logging
from pathlib import Path

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from pizzabox.web.components import CardPaymentWidget, UpiPaymentWidget

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).parent / "templates"
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

router = APIRouter(tags=["Pages"])


def wants_html(request: Request) -> bool:
    """True for browser page requests, False for API/JSON clients."""
    if request.url.path.startswith("/api"):
        return False
    return "text/html" in request.headers.get("accept", "")


def render_not_found(request: Request) -> HTMLResponse:
    return templates.TemplateResponse(
        request,
        "not_found.html",
        {"home_url": "/"},
        status_code=404,
    )


def render_error(request: Request) -> HTMLResponse:
    """Error page; "Try again" reloads the page that failed."""
    return templates.TemplateResponse(
        request,
        "error.html",
        {"retry_url": str(request.url.path)},
        status_code=500,
    )


@router.get(
    "/payments/upi",
    response_class=HTMLResponse,
    summary="UPI Payment Widget",
)
async def upi_payment_widget(request: Request) -> HTMLResponse:
    """Render the display-only UPI payment method widget."""
    widget = UpiPaymentWidget()
    return templates.TemplateResponse(request, widget.template_name, widget.context())


@router.get(
    "/payments/card",
    response_class=HTMLResponse,
    summary="Card Payment Widget",
)
async def card_payment_widget(request: Request) -> HTMLResponse:
    """Render the display-only card payment method widget."""
    widget = CardPaymentWidget()
    return templates.TemplateResponse(request, widget.template_name, widget.context())
