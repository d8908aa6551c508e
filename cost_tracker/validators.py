"""
Cost Tracker - Data Validation

PURPOSE: Input validation before data reaches the store or settings
SCOPE: Cost entry checks, exchange URL checks, form sanitizing
DEPENDENCIES: typing, urllib
"""

import math
from typing import Dict, Any, List, Tuple
from urllib.parse import urlparse

from .config import config


def validate_cost_data(cost_data: Dict[str, Any]) -> Tuple[bool, List[str]]:
    """Validate cost data and return validation result with error messages."""
    errors = []

    amount = cost_data.get('sum')
    if isinstance(amount, bool) or not isinstance(amount, (int, float)) \
            or not math.isfinite(amount) or amount <= 0:
        errors.append("Please enter a valid positive amount")

    if cost_data.get('currency') not in config.CURRENCIES:
        errors.append(f"Currency must be one of {', '.join(config.CURRENCIES)}")

    if not str(cost_data.get('category') or '').strip():
        errors.append("Category is required")

    if not str(cost_data.get('description') or '').strip():
        errors.append("Description is required")

    return len(errors) == 0, errors


def validate_exchange_url(url: str) -> Tuple[bool, List[str]]:
    """Validate an exchange rate endpoint URL."""
    errors = []

    if not url or not url.strip():
        errors.append("Please enter a valid URL")
    else:
        parsed = urlparse(url.strip())
        if parsed.scheme not in ('http', 'https') or not parsed.netloc:
            errors.append("Please enter a valid URL")

    return len(errors) == 0, errors


def sanitize_form_data(form_data: Dict[str, Any]) -> Dict[str, Any]:
    """Sanitize form data by stripping whitespace."""
    sanitized = {}

    for key, value in form_data.items():
        if isinstance(value, str):
            sanitized[key] = value.strip()
        else:
            sanitized[key] = value

    return sanitized
