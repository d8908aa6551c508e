"""
Cost Tracker Package

PURPOSE: Package initialization for the cost tracker
SCOPE: Module imports and package configuration
"""

__version__ = "1.0.0"
__author__ = "Cost Tracker Team"
__description__ = "Personal expense tracker with multi-currency reports"

# Package imports for easier access
from .config import config
from .database import DatabaseManager, open_costs_db
from .errors import CostStoreError, StorageUnavailable, WriteFailed, ReadFailed
from .managers import CostsDB, SettingsStore
from .models import CostEntry
from .reports import ReportService, round_money
from .services import ExchangeRateService, convert_currency
from .validators import validate_cost_data, validate_exchange_url

__all__ = [
    "config",
    "DatabaseManager",
    "open_costs_db",
    "CostStoreError",
    "StorageUnavailable",
    "WriteFailed",
    "ReadFailed",
    "CostsDB",
    "SettingsStore",
    "CostEntry",
    "ReportService",
    "round_money",
    "ExchangeRateService",
    "convert_currency",
    "validate_cost_data",
    "validate_exchange_url"
]
