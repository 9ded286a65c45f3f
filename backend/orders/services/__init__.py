"""
Orders services package.

- OrderService: order lifecycle (create, update, close) and order queries
"""

from .order_service import OrderService

__all__ = [
    'OrderService',
]
