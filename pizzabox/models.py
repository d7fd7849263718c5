"""
SQLAlchemy Database Models

Storefront configuration lives in a single `settings` row. The table may
be empty; readers fall back to built-in defaults in that case.
"""

from sqlalchemy import Column, Integer, String, Float, DateTime, Boolean
from sqlalchemy.sql import func
from pizzabox.database import Base


class RestaurantSettings(Base):
    """
    Storefront operational configuration.

    At most one row is read. Absence of a row is a valid state.
    """
    __tablename__ = "settings"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # =========================================================================
    # IDENTITY & CONTACT
    # =========================================================================
    restaurant_name = Column(String(100), nullable=False, default="The Pizza Box")
    contact_phone = Column(String(20), nullable=False, default="")
    contact_email = Column(String(255), nullable=False, default="")
    address = Column(String(255), nullable=False, default="")

    # =========================================================================
    # ORDERING RULES
    # =========================================================================
    min_order_amount = Column(Float, nullable=False, default=0.0)
    operating_hours = Column(String(100), nullable=False, default="9 AM - 11 PM")

    # =========================================================================
    # FLAGS
    # =========================================================================
    is_open = Column(Boolean, nullable=False, default=True)
    is_paused = Column(Boolean, nullable=False, default=False)
    notifications_enabled = Column(Boolean, nullable=False, default=True)

    # =========================================================================
    # TIMESTAMPS
    # =========================================================================
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def __repr__(self):
        return f"<RestaurantSettings #{self.id} - {self.restaurant_name}>"
