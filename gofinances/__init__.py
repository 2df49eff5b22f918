"""
GoFinances - Core Package

The engine behind a personal finance tracker: sign in with Google or
Apple, record income and expense transactions, and see what came in,
what went out and what is left.

DESIGN PRINCIPLES:
1. Identity is normalized once, at the provider boundary
2. Fail early, fail visibly
3. No silent corrections (a corrupted record never becomes zero)
4. Every step must be auditable
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "GoFinances Team"
