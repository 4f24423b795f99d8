"""
Utility modules for the rent estimation engine.
"""

from rentestimate.utils.formatting import format_rent, format_rent_range

__all__ = [
    "format_rent",
    "format_rent_range",
]
