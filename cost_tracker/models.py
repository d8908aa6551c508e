"""
Cost Tracker - Data Models

PURPOSE: The cost entry record shared by the store, reports and API
SCOPE: Row <-> object <-> JSON conversion
DEPENDENCIES: datetime
"""

from dataclasses import dataclass, asdict
from datetime import datetime
from typing import Any, Dict, Mapping


@dataclass(frozen=True)
class CostEntry:
    """A single recorded expense. Immutable once stored."""
    id: int
    sum: float
    currency: str
    category: str
    description: str
    date: datetime

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "CostEntry":
        """Build an entry from a ``costs`` table row."""
        return cls(
            id=int(row['id']),
            sum=float(row['sum']),
            currency=str(row['currency']),
            category=str(row['category']),
            description=str(row['description']),
            date=datetime.fromisoformat(row['date']),
        )

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['date'] = self.date.isoformat()
        return data
