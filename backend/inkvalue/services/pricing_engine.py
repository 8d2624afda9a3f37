"""
PricingEngine — suggested sale price for a tattoo project.

Covers:
  - Overhead-per-hour from fixed monthly studio expenses
  - Labor, overhead and material base cost (break-even)
  - Margin, style and complexity multipliers
  - Fixed / percentage discounts with a zero floor on the final price
  - Chart categories (net profit clamped at zero for display only)

The computation is pure and total: every numeric input has a defined result,
nothing is rounded internally and nothing is raised.
"""
from types import MappingProxyType
from typing import List, Mapping, Tuple

from inkvalue.models.schemas import (
    BreakdownCategory,
    ComplexityLevel,
    CostProfile,
    DiscountType,
    PricingBreakdown,
    Project,
    TattooStyle,
)


# ---------------------------------------------------------------------------
# Multiplier tables (immutable)
# ---------------------------------------------------------------------------
STYLE_MULTIPLIERS: Mapping[TattooStyle, float] = MappingProxyType({
    TattooStyle.FINE_LINE: 1.1,
    TattooStyle.OLD_SCHOOL: 1.0,
    TattooStyle.REALISM: 1.4,
    TattooStyle.BLACKWORK: 1.1,
    TattooStyle.WATERCOLOR: 1.25,
    TattooStyle.TRIBAL: 1.0,
    TattooStyle.LETTERING: 1.05,
    TattooStyle.OTHER: 1.0,
})

COMPLEXITY_MULTIPLIERS: Mapping[ComplexityLevel, float] = MappingProxyType({
    ComplexityLevel.LOW: 1.0,
    ComplexityLevel.MEDIUM: 1.15,
    ComplexityLevel.HIGH: 1.3,
    ComplexityLevel.EXTREME: 1.5,
})


# ---------------------------------------------------------------------------
# Chart categories: (key, label, colour)
# ---------------------------------------------------------------------------
_CATEGORY_LABOR: Tuple[str, str, str] = ("labor", "Mão de Obra", "#3b82f6")
_CATEGORY_OVERHEAD: Tuple[str, str, str] = ("overhead", "Custos Fixos", "#ef4444")
_CATEGORY_MATERIALS: Tuple[str, str, str] = ("materials", "Materiais", "#eab308")
_CATEGORY_PROFIT: Tuple[str, str, str] = ("net_profit", "Lucro Líquido", "#10b981")


def overhead_per_hour(costs: CostProfile) -> float:
    """Fixed monthly expenses spread over available hours; 0 when no hours."""
    hours = costs.total_monthly_hours
    if hours > 0:
        return costs.total_monthly_fixed_expenses / hours
    return 0.0


def discount_value(gross_price: float, amount: float, kind: DiscountType) -> float:
    """Fixed discounts are taken as-is (never clamped to the gross price)."""
    if kind == DiscountType.PERCENTAGE:
        return gross_price * amount / 100.0
    return amount


def _category(entry: Tuple[str, str, str], value: float) -> BreakdownCategory:
    key, name, color = entry
    return BreakdownCategory(key=key, name=name, value=value, color=color)


class PricingEngine:
    """
    Stateless pricing calculator.

    Usage:
        breakdown = PricingEngine().compute(project, costs)
    """

    def style_multiplier(self, style: TattooStyle) -> float:
        return STYLE_MULTIPLIERS[TattooStyle(style)]

    def complexity_multiplier(self, complexity: ComplexityLevel) -> float:
        return COMPLEXITY_MULTIPLIERS[ComplexityLevel(complexity)]

    def compute(self, project: Project, costs: CostProfile) -> PricingBreakdown:
        overhead_hr = overhead_per_hour(costs)

        total_hours = project.design_time_hours + project.tattoo_time_hours
        labor_cost = total_hours * project.hourly_rate
        total_overhead_cost = total_hours * overhead_hr
        total_base_cost = labor_cost + total_overhead_cost + project.material_cost

        margin_multiplier = 1 + project.profit_margin_percent / 100.0
        gross_price = (
            total_base_cost
            * margin_multiplier
            * self.style_multiplier(project.style)
            * self.complexity_multiplier(project.complexity)
        )

        discount = discount_value(gross_price, project.discount_amount, project.discount_type)
        suggested_price = max(0.0, gross_price - discount)
        profit_amount = suggested_price - total_base_cost

        breakdown: List[BreakdownCategory] = [
            _category(_CATEGORY_LABOR, labor_cost),
            _category(_CATEGORY_OVERHEAD, total_overhead_cost),
            _category(_CATEGORY_MATERIALS, project.material_cost),
            _category(_CATEGORY_PROFIT, max(0.0, profit_amount)),
        ]

        return PricingBreakdown(
            overhead_per_hour=overhead_hr,
            total_overhead_cost=total_overhead_cost,
            labor_cost=labor_cost,
            total_base_cost=total_base_cost,
            gross_price=gross_price,
            discount_value=discount,
            suggested_price=suggested_price,
            profit_amount=profit_amount,
            breakdown=breakdown,
        )


_DEFAULT_ENGINE = PricingEngine()


def compute_pricing(project: Project, costs: CostProfile) -> PricingBreakdown:
    """Module-level shortcut around a shared PricingEngine."""
    return _DEFAULT_ENGINE.compute(project, costs)
