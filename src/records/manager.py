# recordkeeper - Personal Records and Reminders
# Copyright (c) 2025-2026 Slash Daemon slashdaemon@protonmail.com
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published by
# the Free Software Foundation, version 3 of the License.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program. If not, see <https://www.gnu.org/licenses/>.
#
# Commercial licensing: [slashdaemon@protonmail.com]

"""
Record Manager Module

Handles database operations for records, categories and the audit trail.
Audit entries are written by a database trigger; this module only reads them.
"""

import json
import logging
from datetime import date
from typing import Any, Optional

import asyncpg

from store import rows_affected, store_errors

logger = logging.getLogger("recordkeeper.records.manager")

RECORD_SELECT = """
    SELECT r.id, r.title, r.description, r.category_id, c.name AS category,
           r.event_date, r.notes, r.created_by, r.created_at, r.updated_at
    FROM records r
    LEFT JOIN categories c ON c.id = r.category_id
"""

UPDATABLE_FIELDS = ("title", "description", "category_id", "event_date", "notes")


class RecordValidationError(ValueError):
    """Raised when record or category fields are invalid."""

    pass


class RecordManager:
    """
    Manages database operations for records.

    Rows are returned as plain dicts with the category name joined in.
    """

    def __init__(self, db_pool: asyncpg.Pool):
        self.db = db_pool

    async def create_record(
        self,
        title: str,
        event_date: Optional[date] = None,
        description: Optional[str] = None,
        category_id: Optional[Any] = None,
        notes: Optional[str] = None,
    ) -> dict:
        """
        Create a new record.

        Args:
            title: Record title
            event_date: Date the record is about (defaults to today in the store)
            description: Rich-text description (stored as given)
            category_id: Optional category
            notes: Free-form notes

        Returns:
            The created record
        """
        title = (title or "").strip()
        if not title:
            raise RecordValidationError("Record title is required")

        with store_errors("create record"):
            record_id = await self.db.fetchval(
                """
                INSERT INTO records (title, description, category_id, event_date, notes)
                VALUES ($1, $2, $3, COALESCE($4, CURRENT_DATE), $5)
                RETURNING id
                """,
                title,
                description,
                category_id,
                event_date,
                notes,
            )

        logger.info(f"Created record {record_id}: {title}")
        return await self.get_record(record_id)

    async def get_record(self, record_id: Any) -> Optional[dict]:
        """
        Get a record by ID.

        Returns:
            Record dict or None if not found
        """
        with store_errors("get record"):
            row = await self.db.fetchrow(f"{RECORD_SELECT} WHERE r.id = $1", record_id)
        return dict(row) if row else None

    async def list_records(self, limit: int = 100, offset: int = 0) -> list[dict]:
        """
        List records, most recent event first.

        Args:
            limit: Maximum results per page
            offset: Offset for pagination
        """
        with store_errors("list records"):
            rows = await self.db.fetch(
                f"""
                {RECORD_SELECT}
                ORDER BY r.event_date DESC, r.created_at DESC
                LIMIT $1 OFFSET $2
                """,
                limit,
                offset,
            )
        return [dict(row) for row in rows]

    async def update_record(self, record_id: Any, **fields: Any) -> Optional[dict]:
        """
        Update any subset of a record's editable fields.

        Returns:
            The updated record, or None if it does not exist
        """
        unknown = set(fields) - set(UPDATABLE_FIELDS)
        if unknown:
            raise RecordValidationError(f"Unknown record fields: {', '.join(sorted(unknown))}")
        if "title" in fields:
            fields["title"] = (fields["title"] or "").strip()
            if not fields["title"]:
                raise RecordValidationError("Record title is required")
        if not fields:
            return await self.get_record(record_id)

        names = [name for name in UPDATABLE_FIELDS if name in fields]
        assignments = ", ".join(f"{name} = ${i}" for i, name in enumerate(names, start=2))

        with store_errors("update record"):
            result = await self.db.execute(
                f"""
                UPDATE records
                SET {assignments}, updated_at = NOW()
                WHERE id = $1
                """,
                record_id,
                *[fields[name] for name in names],
            )

        if rows_affected(result) != 1:
            return None
        logger.info(f"Updated record {record_id}: {', '.join(names)}")
        return await self.get_record(record_id)

    async def delete_record(self, record_id: Any) -> bool:
        """
        Delete a record (its reminders go with it via ON DELETE CASCADE).

        Returns:
            True if deleted, False if not found
        """
        with store_errors("delete record"):
            result = await self.db.execute("DELETE FROM records WHERE id = $1", record_id)

        deleted = rows_affected(result) == 1
        if deleted:
            logger.info(f"Deleted record {record_id}")
        return deleted


class CategoryManager:
    """Manages the category list records can be filed under."""

    def __init__(self, db_pool: asyncpg.Pool):
        self.db = db_pool

    async def list_categories(self) -> list[dict]:
        with store_errors("list categories"):
            rows = await self.db.fetch("SELECT id, name FROM categories ORDER BY name")
        return [dict(row) for row in rows]

    async def create_category(self, name: str) -> dict:
        """
        Create a category, or return the existing one with the same name.
        """
        name = (name or "").strip()
        if not name:
            raise RecordValidationError("Category name is required")

        with store_errors("create category"):
            row = await self.db.fetchrow(
                """
                INSERT INTO categories (name) VALUES ($1)
                ON CONFLICT (name) DO UPDATE SET name = EXCLUDED.name
                RETURNING id, name
                """,
                name,
            )
        logger.info(f"Category ready: {name}")
        return dict(row)

    async def rename_category(self, category_id: Any, name: str) -> bool:
        name = (name or "").strip()
        if not name:
            raise RecordValidationError("Category name is required")

        with store_errors("rename category"):
            result = await self.db.execute(
                "UPDATE categories SET name = $2 WHERE id = $1",
                category_id,
                name,
            )
        return rows_affected(result) == 1

    async def delete_category(self, category_id: Any) -> bool:
        """Delete a category; records keep existing with no category."""
        with store_errors("delete category"):
            result = await self.db.execute("DELETE FROM categories WHERE id = $1", category_id)
        return rows_affected(result) == 1


class AuditTrailReader:
    """Read access to the audit_trail table."""

    def __init__(self, db_pool: asyncpg.Pool):
        self.db = db_pool

    async def list_entries(
        self,
        record_id: Optional[Any] = None,
        limit: int = 100,
    ) -> list[dict]:
        """
        Get audit entries, newest first.

        Args:
            record_id: Only entries about this record (all entries if None)
            limit: Maximum number of entries

        Returns:
            List of audit entry dicts (old_data/new_data decoded from JSON)
        """
        query = """
            SELECT id, table_name, record_id, action, changed_fields,
                   old_data, new_data, user_id, timestamp, ip_address, user_agent
            FROM audit_trail
        """
        args: list[Any] = []
        if record_id is not None:
            query += " WHERE record_id = $1"
            args.append(record_id)
        query += f" ORDER BY timestamp DESC LIMIT ${len(args) + 1}"
        args.append(limit)

        with store_errors("list audit trail"):
            rows = await self.db.fetch(query, *args)

        entries = []
        for row in rows:
            entry = dict(row)
            for key in ("old_data", "new_data"):
                # asyncpg hands back json/jsonb as text unless a codec is set
                if isinstance(entry.get(key), str):
                    entry[key] = json.loads(entry[key])
            entries.append(entry)
        return entries
