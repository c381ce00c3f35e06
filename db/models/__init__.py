"""
Model package exports.

Import all SQLAlchemy models here so metadata registration works without
extra imports.
"""

from db.models.category import Category
from db.models.price import Price
from db.models.product import Product
from db.models.product_retailer import ProductRetailer
from db.models.retailer import Retailer

__all__ = [
    "Category",
    "Price",
    "Product",
    "ProductRetailer",
    "Retailer",
]
