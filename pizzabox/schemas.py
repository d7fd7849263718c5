"""
Pydantic Schemas for Request/Response Validation

Covers:
- Public storefront settings (camelCase JSON, as consumed by the web apps)
- Storefront client state: cart lines, user, delivery address
- Health and error envelopes
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Optional, Any, Dict, Union
from datetime import datetime


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys, populated by either name."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# =============================================================================
# SETTINGS
# =============================================================================

class PublicSettings(CamelModel):
    """Storefront configuration served by GET /api/settings."""
    restaurant_name: str = Field(..., examples=["The Pizza Box"])
    contact_phone: str = Field(default="", examples=["+91 98765 43210"])
    contact_email: str = Field(default="", examples=["hello@thepizzabox.in"])
    address: str = Field(default="")
    min_order_amount: Union[int, float] = Field(default=0, ge=0)
    operating_hours: str = Field(default="9 AM - 11 PM")
    is_open: bool = True
    is_paused: bool = False
    notifications_enabled: bool = True


# =============================================================================
# STOREFRONT CLIENT STATE
# =============================================================================

class CartItem(CamelModel):
    """One cart line: a product/options combination and a quantity."""
    id: str = Field(..., min_length=1, examples=["margherita-large"])
    name: str = Field(..., examples=["Margherita (Large)"])
    price: float = Field(..., ge=0, examples=[399.0])
    quantity: int = Field(..., ge=1, examples=[2])
    options: Optional[Any] = None
    addons: Optional[Any] = None
    variants: Optional[Any] = None
    type: Optional[str] = Field(None, examples=["pizza"])

    @property
    def line_total(self) -> float:
        return round(self.price * self.quantity, 2)


class User(CamelModel):
    """Signed-in (or guest) customer. Replaced as a whole, never edited."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        frozen=True,
    )

    id: str
    name: str
    email: str
    role: str = Field(..., examples=["CUSTOMER", "ADMIN"])
    phone: Optional[str] = None
    is_guest: Optional[bool] = None


class DeliveryAddress(CamelModel):
    """Free-text location plus structured sub-fields."""
    location: str
    house_no: str
    floor: Optional[str] = None
    building_name: str
    landmark: Optional[str] = None
    type: str = Field(..., examples=["home", "work"])


# =============================================================================
# RESPONSE SCHEMAS
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    success: bool = False
    error: str
    detail: Optional[str] = None


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    database: str
    masked_failures: Dict[str, int]
    timestamp: datetime
