"""
Economic Impact Model

Scales baseline daily GDP by a weighted blend of normalized risk factors
to estimate the daily economic loss, and estimates the number of people
affected.

Normalization:
    aqi_loss     = clamp((aqi - 50) / 400, 0, 1)
    rain_loss    = clamp(rainfall_mm / 150, 0, 1)
    flood_loss   = clamp(flood_risk, 0, 1)
    traffic_loss = clamp(traffic_congestion, 0, 1)

Loss:
    impact_factor = sum(weight * loss)          (weights sum to 1.0)
    daily_gdp     = gdp_per_capita * population / 365
    loss_cr       = daily_gdp * impact_factor * fx / 1e7
"""

import logging
import math
from typing import Dict, Optional

from core.config import EconomicConfig
from core.models import ImpactFactors, LossEstimate, MacroEconomicBaseline

logger = logging.getLogger(__name__)

CRORE = 1e7
DAYS_PER_YEAR = 365
MIN_PEOPLE_AFFECTED = 100

# People-affected terms
AQI_HEALTH_BASE = 800
AQI_HEALTH_PER_POINT = 110
AQI_HEALTH_WEIGHT = 0.4
FLOOD_DISPLACEMENT = 12000
TRAFFIC_DELAY = 9000
POPULATION_SHARE = 0.05


def _clamp01(value: float) -> float:
    if value is None or math.isnan(value):
        return 0.0
    return min(1.0, max(0.0, value))


def _usable(value: Optional[float]) -> bool:
    return value is not None and math.isfinite(value) and value > 0


def normalize_factors(factors: ImpactFactors) -> Dict[str, float]:
    """Map raw factors onto [0, 1] losses keyed like the weights."""
    return {
        "aqi": _clamp01((factors.aqi - 50) / 400),
        "rain": _clamp01(factors.rainfall_mm / 150),
        "flood": _clamp01(factors.flood_risk),
        "traffic": _clamp01(factors.traffic_congestion),
    }


def classify_risk(aqi: float, economic_loss_cr: float, impact_factor: float) -> str:
    if aqi >= 250 or economic_loss_cr > 1500 or impact_factor > 0.65:
        return "Severe"
    if aqi >= 150 or economic_loss_cr > 600 or impact_factor > 0.45:
        return "Moderate"
    return "Low"


class EconomicImpactModel:
    """
    Weighted multi-factor loss model.

    Flood risk carries the largest weight. Baseline fields that are
    missing fall back to the configured constants.
    """

    def __init__(self, config: Optional[EconomicConfig] = None):
        self.config = config or EconomicConfig()

    def daily_gdp(self, baseline: Optional[MacroEconomicBaseline] = None) -> float:
        """Baseline daily GDP in USD."""
        gdp_per_capita = self.config.fallback_gdp_per_capita
        population = self.config.fallback_population
        if baseline is not None:
            if _usable(baseline.gdp_per_capita):
                gdp_per_capita = baseline.gdp_per_capita
            if _usable(baseline.population):
                population = baseline.population
        return (gdp_per_capita * population) / DAYS_PER_YEAR

    def compute_loss(
        self,
        factors: ImpactFactors,
        baseline: Optional[MacroEconomicBaseline] = None,
    ) -> LossEstimate:
        """
        Estimate daily economic loss in INR crore.

        Args:
            factors: Risk factors for the scenario
            baseline: Macro indicators; missing fields use fallbacks

        Returns:
            LossEstimate with the rounded loss, impact factor and the
            weighted contribution of each factor
        """
        losses = normalize_factors(factors)
        breakdown = {
            name: self.config.weights[name] * loss for name, loss in losses.items()
        }
        impact_factor = sum(breakdown.values())

        loss_usd = self.daily_gdp(baseline) * impact_factor
        loss_cr = loss_usd * self.config.fx_inr_per_usd / CRORE
        economic_loss_cr = max(0.0, round(loss_cr, 2))

        logger.debug(
            f"Loss estimate: impact_factor={impact_factor:.4f}, "
            f"loss_usd={loss_usd:.2f}, loss_cr={economic_loss_cr}"
        )
        return LossEstimate(
            economic_loss_cr=economic_loss_cr,
            impact_factor=impact_factor,
            breakdown=breakdown,
        )

    def compute_people_affected(
        self,
        factors: ImpactFactors,
        projected_population: float,
    ) -> int:
        """
        Estimate people affected from health, flood, traffic and
        population terms. Never below MIN_PEOPLE_AFFECTED.
        """
        aqi = factors.aqi if factors.aqi and math.isfinite(factors.aqi) else 0.0
        population = projected_population if _usable(projected_population) else 0.0

        health = (AQI_HEALTH_BASE + AQI_HEALTH_PER_POINT * max(0.0, aqi)) * AQI_HEALTH_WEIGHT
        displacement = FLOOD_DISPLACEMENT * _clamp01(factors.flood_risk)
        delay = TRAFFIC_DELAY * _clamp01(factors.traffic_congestion)
        share = POPULATION_SHARE * population

        return max(MIN_PEOPLE_AFFECTED, int(round(health + displacement + delay + share)))
