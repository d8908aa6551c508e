"""
Cost Tracker - Database Management

PURPOSE: Database schema, migrations, and opening the cost store
SCOPE: SQLite operations, schema versioning, and data persistence
DEPENDENCIES: aiosqlite, config.py, managers.py
"""

import sqlite3
import aiosqlite
import logging
from datetime import datetime
from typing import Callable, Optional

from .config import config
from .errors import StorageUnavailable
from .managers import CostsDB

logger = logging.getLogger(__name__)


class DatabaseManager:
    """Handles schema creation and version upgrades for the costs database."""

    def __init__(self, db_file: str, version: int = config.DB_VERSION):
        if version < 1:
            raise ValueError(f"Database version must be a positive integer, got {version}")
        self.db_file = db_file
        self.version = version

    async def initialize_database(self) -> None:
        """Open the database file and bring its schema up to ``self.version``."""
        try:
            async with aiosqlite.connect(self.db_file) as conn:
                await self._setup_schema_versioning(conn)
                current_version = await self._get_current_schema_version(conn)
                logger.info(f"Current database schema version: {current_version}")

                if current_version > self.version:
                    raise StorageUnavailable(
                        f"Database {self.db_file} is at version {current_version}, "
                        f"cannot open it as version {self.version}"
                    )

                if current_version < self.version:
                    await self._upgrade(conn, current_version)

                await conn.commit()
        except (sqlite3.Error, OSError) as e:
            logger.error(f"Failed to open database {self.db_file}: {e}")
            raise StorageUnavailable(f"Failed to open database {self.db_file}") from e

    async def _setup_schema_versioning(self, conn: aiosqlite.Connection) -> None:
        """Set up schema version tracking table."""
        await conn.execute('''
            CREATE TABLE IF NOT EXISTS schema_version (
                version INTEGER PRIMARY KEY,
                applied_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        ''')

    async def _get_current_schema_version(self, conn: aiosqlite.Connection) -> int:
        """Get the current database schema version."""
        cursor = await conn.execute('SELECT MAX(version) FROM schema_version')
        result = await cursor.fetchone()
        return result[0] or 0

    async def _upgrade(self, conn: aiosqlite.Connection, current_version: int) -> None:
        """Upgrade from ``current_version`` to ``self.version``."""
        logger.info(f"Upgrading schema from version {current_version} to {self.version}")

        if not await self._table_exists(conn, 'costs'):
            await self._create_costs_table(conn)

        await conn.execute(
            'INSERT OR REPLACE INTO schema_version (version) VALUES (?)', (self.version,)
        )
        logger.info(f"Schema upgrade to version {self.version} completed")

    async def _table_exists(self, conn: aiosqlite.Connection, name: str) -> bool:
        cursor = await conn.execute(
            "SELECT name FROM sqlite_master WHERE type='table' AND name=?", (name,)
        )
        return await cursor.fetchone() is not None

    async def _create_costs_table(self, conn: aiosqlite.Connection) -> None:
        """Create the costs table and its secondary indexes."""
        await conn.execute('''
            CREATE TABLE IF NOT EXISTS costs (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                sum REAL NOT NULL,
                currency TEXT NOT NULL,
                category TEXT NOT NULL,
                description TEXT NOT NULL,
                date TEXT NOT NULL
            )
        ''')
        await conn.execute('CREATE INDEX IF NOT EXISTS idx_costs_date ON costs (date)')
        await conn.execute('CREATE INDEX IF NOT EXISTS idx_costs_category ON costs (category)')
        await conn.execute('CREATE INDEX IF NOT EXISTS idx_costs_currency ON costs (currency)')
        logger.info("Created costs table")


async def open_costs_db(db_file: str, version: int = config.DB_VERSION,
                        clock: Optional[Callable[[], datetime]] = None) -> CostsDB:
    """Open (creating or upgrading as needed) the costs database."""
    await DatabaseManager(db_file, version).initialize_database()
    return CostsDB(db_file, clock=clock)
