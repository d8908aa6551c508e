"""
Cost Tracker - Data Managers

PURPOSE: Data access layer for cost entries and persisted settings
SCOPE: Insert/fetch of cost entries, exchange URL settings
DEPENDENCIES: aiosqlite, aiofiles, json, datetime
"""

import json
import sqlite3
import aiofiles
import aiofiles.os
import aiosqlite
import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from .config import config
from .errors import ReadFailed, WriteFailed
from .models import CostEntry

logger = logging.getLogger(__name__)


class CostsDB:
    """Handles cost entry operations against an opened costs database.

    Instances are returned by ``database.open_costs_db``, which guarantees
    the schema exists before any operation runs.
    """

    def __init__(self, db_file: str, clock: Optional[Callable[[], datetime]] = None):
        self.db_file = db_file
        self.clock = clock or datetime.now

    async def add_cost(self, cost: Dict[str, Any]) -> CostEntry:
        """Store a new cost entry, assigning its ``id`` and ``date``."""
        created = self.clock()
        try:
            async with aiosqlite.connect(self.db_file) as conn:
                cursor = await conn.execute('''
                    INSERT INTO costs (sum, currency, category, description, date)
                    VALUES (?, ?, ?, ?, ?)
                ''', (
                    float(cost['sum']), cost['currency'], cost['category'],
                    cost['description'], created.isoformat()
                ))
                cost_id = cursor.lastrowid
                await conn.commit()
        except sqlite3.Error as e:
            logger.error(f"Failed to add cost item: {e}")
            raise WriteFailed("Failed to add cost item") from e

        entry = CostEntry(
            id=cost_id,
            sum=float(cost['sum']),
            currency=cost['currency'],
            category=cost['category'],
            description=cost['description'],
            date=created,
        )
        logger.info(f"Cost added: id={entry.id}, {entry.sum} {entry.currency} ({entry.category})")
        return entry

    async def get_all_costs(self) -> List[CostEntry]:
        """Get every stored cost entry in insertion order."""
        try:
            async with aiosqlite.connect(self.db_file) as conn:
                conn.row_factory = aiosqlite.Row
                cursor = await conn.execute('''
                    SELECT id, sum, currency, category, description, date
                    FROM costs
                    ORDER BY id
                ''')
                rows = await cursor.fetchall()
        except sqlite3.Error as e:
            logger.error(f"Failed to read costs: {e}")
            raise ReadFailed("Failed to read cost items") from e

        return [CostEntry.from_row(row) for row in rows]


class SettingsStore:
    """Key/value settings persisted as a JSON object, re-read on every access."""

    EXCHANGE_URL_KEY = 'exchangeUrl'

    def __init__(self, settings_file: str):
        self.settings_file = settings_file

    async def get_exchange_url(self) -> str:
        """Get the configured exchange rate URL or the default endpoint."""
        settings = await self._load()
        return settings.get(self.EXCHANGE_URL_KEY) or config.DEFAULT_EXCHANGE_URL

    async def set_exchange_url(self, url: str) -> None:
        """Persist a new exchange rate URL."""
        settings = await self._load()
        settings[self.EXCHANGE_URL_KEY] = url
        await self._save(settings)
        logger.info(f"Exchange URL set to {url}")

    async def reset_exchange_url(self) -> str:
        """Restore the default exchange rate URL and return it."""
        await self.set_exchange_url(config.DEFAULT_EXCHANGE_URL)
        return config.DEFAULT_EXCHANGE_URL

    async def _load(self) -> Dict[str, Any]:
        try:
            async with aiofiles.open(self.settings_file, mode='r', encoding='utf-8') as f:
                content = await f.read()
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable settings file {self.settings_file}: {e}")
            return {}

        try:
            settings = json.loads(content)
        except json.JSONDecodeError as e:
            logger.warning(f"Ignoring unreadable settings file {self.settings_file}: {e}")
            return {}
        return settings if isinstance(settings, dict) else {}

    async def _save(self, settings: Dict[str, Any]) -> None:
        # readers only ever see the old or the new file, never a truncated one
        tmp_file = f"{self.settings_file}.tmp"
        async with aiofiles.open(tmp_file, mode='w', encoding='utf-8') as f:
            await f.write(json.dumps(settings, indent=2))
        await aiofiles.os.replace(tmp_file, self.settings_file)
