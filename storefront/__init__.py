"""
                Food Ordering Storefront

Backend for a consumer food-ordering storefront: nearby restaurant search,
shareable restaurant pages, cart checkout and order tracking, with
in-memory fallbacks for every external dependency.

Version: 1.0.0
License: MIT
"""

__version__ = "1.0.0"
