"""
Eolia - appointment slots and public booking for independent practitioners.
"""

__version__ = "0.1.0"
