"""
Demographic Projector

Compounds population year by year from a base year. Economic stress
(daily loss relative to a severe-loss threshold) damps net in-migration.

    stress         = clamp(loss_cr / 3000, 0, 1)
    migration_rate = 0.012 * (1 - 0.6 * stress)
    natural_rate   = max(0.002, 0.009 - 0.0004 * years_elapsed)
    population    += round(population * (natural_rate + migration_rate))

Rounding to whole people compounds each year. This is a planning
approximation, not a cohort-component model.
"""

import logging
import math
from typing import Optional

from core.config import DemographicConfig
from core.models import DemographicState

logger = logging.getLogger(__name__)


class DemographicProjector:
    """Compounding population projection with migration feedback."""

    def __init__(
        self,
        config: Optional[DemographicConfig] = None,
        fallback_population: int = 20_000_000,
    ):
        self.config = config or DemographicConfig()
        self.fallback_population = fallback_population

    def economic_stress(self, economic_loss_cr: float) -> float:
        if economic_loss_cr is None or math.isnan(economic_loss_cr):
            return 0.0
        return min(1.0, max(0.0, economic_loss_cr / self.config.stress_loss_cr))

    def adjusted_migration_rate(self, economic_loss_cr: float) -> float:
        """Net migration rate after economic-stress damping."""
        stress = self.economic_stress(economic_loss_cr)
        return self.config.base_migration_rate * (
            1 - self.config.migration_stress_damping * stress
        )

    def natural_rate(self, years_elapsed: int) -> float:
        return max(
            self.config.natural_rate_floor,
            self.config.base_natural_rate - years_elapsed * self.config.natural_rate_decay,
        )

    def fertility_rate(self, years_elapsed: int) -> float:
        return max(
            self.config.tfr_floor,
            self.config.base_tfr - years_elapsed * self.config.tfr_decay,
        )

    def _usable_population(self, base_population: Optional[float]) -> int:
        """Whole-person base population; the fallback when missing, non-finite or below 1."""
        rounded = None
        if base_population is not None and math.isfinite(base_population):
            rounded = int(round(base_population))
        if rounded is None or rounded < 1:
            logger.debug(
                f"Unusable base population {base_population}, "
                f"using fallback {self.fallback_population}"
            )
            return int(self.fallback_population)
        return rounded

    def project(
        self,
        base_year: int,
        target_year: int,
        base_population: Optional[float],
        economic_loss_cr: float = 0.0,
    ) -> DemographicState:
        """
        Project population from base_year to target_year.

        Growth is applied for every year in [base_year, target_year);
        the reported rates are those of target_year itself. A target
        before the base year is treated as the base year.

        Args:
            base_year: Year the base population refers to
            target_year: Year to report
            base_population: Population in base_year
            economic_loss_cr: Daily economic loss driving migration stress

        Returns:
            DemographicState for target_year
        """
        target_year = max(base_year, target_year)
        base_population = self._usable_population(base_population)

        migration_rate = self.adjusted_migration_rate(economic_loss_cr)

        population = base_population
        for year in range(base_year, target_year):
            total_rate = self.natural_rate(year - base_year) + migration_rate
            population += int(round(population * total_rate))
            population = max(1, population)

        years_elapsed = target_year - base_year
        total_rate = self.natural_rate(years_elapsed) + migration_rate
        migration_share = (migration_rate / total_rate) * 100 if total_rate else 0.0

        return DemographicState(
            year=target_year,
            population=population,
            growth_rate_pct=total_rate * 100,
            tfr=self.fertility_rate(years_elapsed),
            migration_share_pct=migration_share,
            absolute_growth=population - base_population,
        )
