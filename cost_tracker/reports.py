"""
Cost Tracker - Report Aggregation

PURPOSE: Monthly report, per-category totals and per-month totals
SCOPE: Load -> filter -> convert -> reduce, recomputed on every call
DEPENDENCIES: managers.py (cost store), services.py (rates, conversion)
"""

import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List

from .managers import CostsDB
from .models import CostEntry
from .services import ExchangeRateService, convert_currency

logger = logging.getLogger(__name__)

MONTH_NAMES = (
    'Jan', 'Feb', 'Mar', 'Apr', 'May', 'Jun',
    'Jul', 'Aug', 'Sep', 'Oct', 'Nov', 'Dec',
)

_CENTS = Decimal('0.01')


def round_money(value: float) -> float:
    """Round half-up to 2 decimal places, e.g. 0.125 -> 0.13."""
    return float(Decimal(repr(value)).quantize(_CENTS, rounding=ROUND_HALF_UP))


def _check_month(month: int) -> None:
    if not 1 <= month <= 12:
        raise ValueError(f"Month must be between 1 and 12, got {month}")


class ReportService:
    """Builds reports from the cost store, converted to a display currency."""

    def __init__(self, costs_db: CostsDB, rate_service: ExchangeRateService):
        self.costs_db = costs_db
        self.rate_service = rate_service

    async def monthly_report(self, year: int, month: int, currency: str) -> Dict[str, Any]:
        """
        Detailed list of one month's costs.

        Line items keep their original sum and currency; only the total is
        converted into ``currency``.
        """
        costs = await self._costs_in_month(year, month)
        rates = await self.rate_service.fetch_rates()

        items = []
        total = 0.0
        for cost in costs:
            items.append({
                'sum': cost.sum,
                'currency': cost.currency,
                'category': cost.category,
                'description': cost.description,
                'date': {'day': cost.date.day},
            })
            total += convert_currency(cost.sum, cost.currency, currency, rates)

        return {
            'year': year,
            'month': month,
            'costs': items,
            'total': {'currency': currency, 'total': round_money(total)},
        }

    async def category_totals(self, year: int, month: int, currency: str) -> List[Dict[str, Any]]:
        """Converted totals per category; categories without costs are left out."""
        costs = await self._costs_in_month(year, month)
        rates = await self.rate_service.fetch_rates()

        totals: Dict[str, float] = {}
        for cost in costs:
            converted = convert_currency(cost.sum, cost.currency, currency, rates)
            totals[cost.category] = totals.get(cost.category, 0.0) + converted

        return [
            {'id': category, 'label': category, 'value': round_money(total)}
            for category, total in totals.items()
        ]

    async def yearly_totals(self, year: int, currency: str) -> List[Dict[str, Any]]:
        """Converted totals for each of the 12 months of ``year``."""
        costs = [cost for cost in await self.costs_db.get_all_costs() if cost.date.year == year]
        rates = await self.rate_service.fetch_rates()

        monthly = [0.0] * 12
        for cost in costs:
            monthly[cost.date.month - 1] += convert_currency(cost.sum, cost.currency, currency, rates)

        return [
            {'month': name, 'value': round_money(total)}
            for name, total in zip(MONTH_NAMES, monthly)
        ]

    async def _costs_in_month(self, year: int, month: int) -> List[CostEntry]:
        _check_month(month)
        costs = await self.costs_db.get_all_costs()
        matching = [c for c in costs if c.date.year == year and c.date.month == month]
        logger.info(f"{len(matching)} of {len(costs)} costs fall in {year}-{month:02d}")
        return matching
