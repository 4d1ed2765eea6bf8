"""
Product Catalog

Banking product definitions and their sub-resources (charges, rules, roles,
transactions, communications, interest rates, balances) kept as insert-only
version histories. Every change appends a version; reads resolve the latest
version and treat a delete marker as absent.
"""

__version__ = "1.0.0"
