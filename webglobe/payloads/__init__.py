"""
Request payload builders
"""

from webglobe.payloads.contact import Contact
from webglobe.payloads.order import Order, ORDER_TYPES

__all__ = [
    "Contact",
    "Order",
    "ORDER_TYPES",
]
