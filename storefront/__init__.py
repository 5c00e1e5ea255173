"""
Storefront Basket API

Product catalog browsing and basket/checkout workflow over HTTP.
"""

__version__ = "1.0.0"
