"""Database models package."""

from .user import User
from .product import Product
from .cart import CartItem
from .order import Order, OrderItem, CheckoutRun
from .impact import ImpactStats, ImpactIncrement
from .notification import Notification

__all__ = [
    'User',
    'Product',
    'CartItem',
    'Order',
    'OrderItem',
    'CheckoutRun',
    'ImpactStats',
    'ImpactIncrement',
    'Notification',
]
