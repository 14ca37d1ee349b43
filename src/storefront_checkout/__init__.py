"""
Storefront checkout - product pricing, delivery charges and checkout totals.
"""

__version__ = "0.1.0"
