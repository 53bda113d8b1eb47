# ------ storefront/model/__init__.py ------

from .user import User, Admin
from .product import Product, Image, Opinion
from .cart import CartEntry
from .discount import DiscountCode
from .order import Order, OrderProduct, ORDER_STATUSES, INITIAL_STATUS

__all__ = [
    "User",
    "Admin",
    "Product",
    "Image",
    "Opinion",
    "CartEntry",
    "DiscountCode",
    "Order",
    "OrderProduct",
    "ORDER_STATUSES",
    "INITIAL_STATUS",
]
