"""Tests for opening the cost store and its add/fetch operations."""

import asyncio
import sqlite3
from datetime import datetime

import pytest

from cost_tracker.database import DatabaseManager, open_costs_db
from cost_tracker.errors import ReadFailed, StorageUnavailable, WriteFailed
from cost_tracker.managers import CostsDB


def _index_names(db_file):
    conn = sqlite3.connect(db_file)
    try:
        rows = conn.execute(
            "SELECT name FROM sqlite_master WHERE type='index' AND tbl_name='costs'"
        ).fetchall()
    finally:
        conn.close()
    return {row[0] for row in rows}


def _schema_version(db_file):
    conn = sqlite3.connect(db_file)
    try:
        return conn.execute('SELECT MAX(version) FROM schema_version').fetchone()[0]
    finally:
        conn.close()


class TestOpen:
    """Tests for schema creation and upgrades."""

    def test_creates_costs_table_with_indexes(self, db_file):
        asyncio.run(open_costs_db(db_file, 1))
        assert {'idx_costs_date', 'idx_costs_category', 'idx_costs_currency'} <= _index_names(db_file)
        assert _schema_version(db_file) == 1

    def test_open_is_idempotent(self, db_file, clock):
        db = asyncio.run(open_costs_db(db_file, 1, clock=clock))
        asyncio.run(db.add_cost({'sum': 5, 'currency': 'USD', 'category': 'Food', 'description': 'tea'}))

        reopened = asyncio.run(open_costs_db(db_file, 1))
        costs = asyncio.run(reopened.get_all_costs())
        assert len(costs) == 1
        assert _schema_version(db_file) == 1

    def test_upgrade_keeps_existing_costs(self, db_file, clock):
        db = asyncio.run(open_costs_db(db_file, 1, clock=clock))
        asyncio.run(db.add_cost({'sum': 5, 'currency': 'USD', 'category': 'Food', 'description': 'tea'}))

        upgraded = asyncio.run(open_costs_db(db_file, 2))
        assert _schema_version(db_file) == 2
        assert len(asyncio.run(upgraded.get_all_costs())) == 1

    def test_lower_version_is_rejected(self, db_file):
        asyncio.run(open_costs_db(db_file, 2))
        with pytest.raises(StorageUnavailable):
            asyncio.run(open_costs_db(db_file, 1))

    def test_unopenable_file_raises_storage_unavailable(self, tmp_path):
        missing_dir = tmp_path / "does-not-exist" / "costsdb.db"
        with pytest.raises(StorageUnavailable):
            asyncio.run(open_costs_db(str(missing_dir), 1))

    def test_version_must_be_positive(self, db_file):
        with pytest.raises(ValueError):
            DatabaseManager(db_file, 0)


class TestAddCost:
    """Tests for storing cost entries."""

    def test_assigns_id_and_date(self, costs_db, clock):
        clock.now = datetime(2024, 3, 5, 9, 30, 15, 123456)
        entry = asyncio.run(costs_db.add_cost({
            'sum': 100, 'currency': 'USD', 'category': 'Food', 'description': 'groceries'
        }))

        assert entry.id is not None
        assert entry.date == datetime(2024, 3, 5, 9, 30, 15, 123456)
        assert entry.sum == 100.0
        assert entry.currency == 'USD'
        assert entry.category == 'Food'
        assert entry.description == 'groceries'

    def test_stored_entry_matches_returned_entry(self, costs_db):
        entry = asyncio.run(costs_db.add_cost({
            'sum': 12.5, 'currency': 'ILS', 'category': 'Bills', 'description': 'water'
        }))

        first = asyncio.run(costs_db.get_all_costs())
        second = asyncio.run(costs_db.get_all_costs())
        assert first == [entry]
        assert second == [entry]

    def test_ids_are_unique_within_same_instant(self, costs_db):
        cost = {'sum': 1, 'currency': 'USD', 'category': 'Other', 'description': 'x'}
        entries = [asyncio.run(costs_db.add_cost(cost)) for _ in range(5)]
        assert len({e.id for e in entries}) == 5

    def test_category_outside_suggested_set_is_stored(self, costs_db):
        entry = asyncio.run(costs_db.add_cost({
            'sum': 3, 'currency': 'GBP', 'category': 'Hobbies', 'description': 'paint'
        }))
        assert asyncio.run(costs_db.get_all_costs())[0].category == entry.category == 'Hobbies'

    def test_missing_table_raises_write_failed(self, tmp_path):
        db = CostsDB(str(tmp_path / "unopened.db"))
        with pytest.raises(WriteFailed):
            asyncio.run(db.add_cost({
                'sum': 1, 'currency': 'USD', 'category': 'Food', 'description': 'x'
            }))


class TestGetAllCosts:
    """Tests for fetching cost entries."""

    def test_empty_store(self, costs_db):
        assert asyncio.run(costs_db.get_all_costs()) == []

    def test_returns_entries_in_insertion_order(self, costs_db, clock):
        clock.now = datetime(2024, 5, 1)
        a = asyncio.run(costs_db.add_cost({'sum': 1, 'currency': 'USD', 'category': 'A', 'description': 'a'}))
        clock.now = datetime(2023, 5, 1)
        b = asyncio.run(costs_db.add_cost({'sum': 2, 'currency': 'EUR', 'category': 'B', 'description': 'b'}))

        assert asyncio.run(costs_db.get_all_costs()) == [a, b]

    def test_missing_table_raises_read_failed(self, tmp_path):
        db = CostsDB(str(tmp_path / "unopened.db"))
        with pytest.raises(ReadFailed):
            asyncio.run(db.get_all_costs())

    def test_to_dict_renders_iso_date(self, costs_db, clock):
        clock.now = datetime(2024, 3, 20, 8, 0)
        entry = asyncio.run(costs_db.add_cost({
            'sum': 50, 'currency': 'EUR', 'category': 'Transport', 'description': 'train'
        }))
        data = entry.to_dict()
        assert data['date'] == '2024-03-20T08:00:00'
        assert data['id'] == entry.id
        assert data['sum'] == 50.0
