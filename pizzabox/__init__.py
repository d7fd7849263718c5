"""
                The Pizza Box

Storefront backend for online food ordering: public settings API,
error/not-found pages, a UPI payment widget, and a client toolkit
(admin API client, auth lifecycle, persisted cart/user store).

Version: 1.0.0
License: MIT
"""

__version__ = "1.0.0"
