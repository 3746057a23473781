"""
Impact models.

Modules:
    - economic: Weighted economic loss and people-affected estimates
    - demographic: Compounding population projection
    - orchestrator: Per-query composition into an ImpactScenario
    - session: Session tokens for dropping superseded results
"""

from core.analysis.impact.demographic import DemographicProjector
from core.analysis.impact.economic import (
    EconomicImpactModel,
    classify_risk,
    normalize_factors,
)
from core.analysis.impact.orchestrator import (
    ImpactOrchestrator,
    ImpactSession,
    time_factor,
)
from core.analysis.impact.session import SessionTokens

__all__ = [
    "DemographicProjector",
    "EconomicImpactModel",
    "ImpactOrchestrator",
    "ImpactSession",
    "SessionTokens",
    "classify_risk",
    "normalize_factors",
    "time_factor",
]
