"""
Cost Tracker - Exchange Rate Services

PURPOSE: Exchange rate fetching and currency conversion
SCOPE: HTTP rate table retrieval with fallback, pure conversion arithmetic
DEPENDENCIES: httpx, managers.py (settings)
"""

import math
import httpx
import logging
from numbers import Real
from typing import Dict, Mapping, Optional

from .config import config
from .managers import SettingsStore

logger = logging.getLogger(__name__)


def convert_currency(amount: float, from_currency: str, to_currency: str,
                     rates: Mapping[str, float]) -> float:
    """Convert ``amount`` between currencies through the rate table's base unit.

    Same-currency conversions return ``amount`` untouched. A currency missing
    from ``rates`` converts at a multiplier of 1.
    """
    if from_currency == to_currency:
        return amount

    amount_in_base = amount / (rates.get(from_currency) or 1)
    return amount_in_base * (rates.get(to_currency) or 1)


class ExchangeRateService:
    """Fetches the current rate table from the configured endpoint."""

    def __init__(self, settings: SettingsStore,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings
        self.transport = transport

    async def get_exchange_url(self) -> str:
        return await self.settings.get_exchange_url()

    async def set_exchange_url(self, url: str) -> None:
        await self.settings.set_exchange_url(url)

    async def fetch_rates(self) -> Dict[str, float]:
        """
        Get the current rate table.

        Falls back to ``config.FALLBACK_FX_RATES`` on any network, status or
        body-shape failure; this method never raises for those.
        """
        exchange_url = await self.get_exchange_url()

        try:
            async with httpx.AsyncClient(timeout=config.FX_REQUEST_TIMEOUT,
                                         transport=self.transport) as client:
                response = await client.get(exchange_url)
                response.raise_for_status()
                data = response.json()
            rates = self._extract_rates(data)
            logger.info(f"Fetched {len(rates)} exchange rates from {exchange_url}")
            return rates

        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Using fallback exchange rates: {e}")
            return dict(config.FALLBACK_FX_RATES)

    @staticmethod
    def _extract_rates(data) -> Dict[str, float]:
        """Validate the ``rates`` mapping of a rate endpoint response."""
        rates = data.get('rates') if isinstance(data, dict) else None
        if not isinstance(rates, dict):
            raise ValueError("Response body has no 'rates' object")

        for code, rate in rates.items():
            if isinstance(rate, bool) or not isinstance(rate, Real) or not math.isfinite(rate):
                raise ValueError(f"Rate for {code!r} is not a number: {rate!r}")

        return {code: float(rate) for code, rate in rates.items()}
