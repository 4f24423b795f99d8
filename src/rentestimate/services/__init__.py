"""
Services: comparable listings and the estimation orchestrator.
"""

from rentestimate.services.comparables import ComparablesProvider, SQLiteComparablesProvider
from rentestimate.services.estimation import EstimationService

__all__ = [
    "ComparablesProvider",
    "SQLiteComparablesProvider",
    "EstimationService",
]
