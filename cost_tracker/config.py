"""
Cost Tracker - Configuration and Constants

PURPOSE: Central configuration management for the application
SCOPE: Application settings, constants, and environment variables
DEPENDENCIES: None (foundational module)
"""

import os
import logging
from dataclasses import dataclass
from typing import List, Dict


@dataclass
class AppConfig:
    """Application configuration constants."""
    DB_FILE: str = os.environ.get('COSTS_DB_FILE', 'costsdb.db')
    DB_VERSION: int = 1
    SETTINGS_FILE: str = os.environ.get('COSTS_SETTINGS_FILE', 'settings.json')
    DEFAULT_EXCHANGE_URL: str = 'https://api.exchangerate-api.com/v4/latest/USD'
    FX_REQUEST_TIMEOUT: float = 10.0
    CURRENCIES: List[str] = None
    DEFAULT_CATEGORIES: List[str] = None
    FALLBACK_FX_RATES: Dict[str, float] = None

    def __post_init__(self):
        if self.CURRENCIES is None:
            self.CURRENCIES = ['USD', 'EUR', 'GBP', 'ILS']
        if self.DEFAULT_CATEGORIES is None:
            self.DEFAULT_CATEGORIES = [
                'Food', 'Transportation', 'Entertainment', 'Shopping',
                'Bills', 'Healthcare', 'Education', 'Travel', 'Other'
            ]
        if self.FALLBACK_FX_RATES is None:
            # keyed 'EURO', not 'EUR': EUR costs convert at par while these rates are in use
            self.FALLBACK_FX_RATES = {'USD': 1, 'GBP': 1.27, 'EURO': 0.85, 'ILS': 3.65}


# Global configuration instance
config = AppConfig()

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)
