"""
HTML parsing exports.
"""

from prisbanditt.crawling.parsing.product_parser import ProductPageParser, parse_price

__all__ = ["ProductPageParser", "parse_price"]
