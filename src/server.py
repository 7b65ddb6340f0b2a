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
recordkeeper MCP Server

Exposes records, categories, reminders and the audit trail as MCP tools, and
owns the reminder scheduler for the lifetime of the server.
"""

import json
import logging
import os
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, AsyncIterator, Optional

import asyncpg
import pytz
from dotenv import load_dotenv
from mcp.server.fastmcp import Context, FastMCP

import analytics
from config import AppConfig
from integrations import EmailClient, IntegrationClient, SlackClient, WhatsAppClient
from notifications import NotificationCenter
from records import (
    AuditTrailReader,
    CategoryManager,
    RecordManager,
    get_unique_categories,
    search_records,
)
from reminders import (
    ActionDispatcher,
    ReminderManager,
    ReminderScheduler,
    build_follow_ups,
    default_registry,
    describe_lead_time,
    filter_follow_ups,
)

load_dotenv()

# Configure logging (stderr; stdout carries the MCP stdio transport)
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger("recordkeeper")


@dataclass
class AppContext:
    """Resources shared by the tools, created at start-up and closed at shutdown."""

    config: AppConfig
    db_pool: asyncpg.Pool
    records: RecordManager
    categories: CategoryManager
    audit: AuditTrailReader
    reminders: ReminderManager
    notifications: NotificationCenter
    scheduler: ReminderScheduler
    clients: list[IntegrationClient] = field(default_factory=list)

    async def close(self) -> None:
        self.scheduler.stop()
        for client in self.clients:
            await client.close()
        await analytics.shutdown()
        await self.db_pool.close()


def build_app(config: AppConfig, db_pool: asyncpg.Pool) -> AppContext:
    """
    Wire managers, integrations and the scheduler around a pool.

    Integrations without configuration are left out; their actions only log.
    """
    tz = config.tz
    notifications = NotificationCenter(
        url=config.notify_url,
        token=config.notify_token,
        configured_permission=config.notification_permission,
    )
    clients: list[IntegrationClient] = [notifications]

    slack = SlackClient(config.slack_webhook_url) if config.slack_webhook_url else None
    email = None
    if config.email_api_url and config.email_api_key and config.email_from and config.email_to:
        email = EmailClient(config.email_api_url, config.email_api_key, config.email_from, config.email_to)
    whatsapp = None
    if config.whatsapp_api_url and config.whatsapp_token and config.whatsapp_to:
        whatsapp = WhatsAppClient(config.whatsapp_api_url, config.whatsapp_token, config.whatsapp_to)
    clients.extend(client for client in (slack, email, whatsapp) if client is not None)

    reminders = ReminderManager(db_pool, tz)
    registry = default_registry(notifications, tz, email=email, slack=slack, whatsapp=whatsapp)
    scheduler = ReminderScheduler(
        reminders,
        ActionDispatcher(registry),
        tz=tz,
        check_interval_seconds=config.check_interval_seconds,
    )

    logger.info(f"Setup: timezone={config.timezone}")
    logger.info(f"Setup: NOTIFY_URL={'set' if config.notify_url else 'missing'}")
    logger.info(f"Setup: SLACK={'set' if slack else 'missing'}")
    logger.info(f"Setup: EMAIL={'set' if email else 'missing'}")
    logger.info(f"Setup: WHATSAPP={'set' if whatsapp else 'missing'}")

    return AppContext(
        config=config,
        db_pool=db_pool,
        records=RecordManager(db_pool),
        categories=CategoryManager(db_pool),
        audit=AuditTrailReader(db_pool),
        reminders=reminders,
        notifications=notifications,
        scheduler=scheduler,
        clients=clients,
    )


@asynccontextmanager
async def lifespan(server: FastMCP) -> AsyncIterator[AppContext]:
    """Open the store and start the reminder scheduler while the server runs."""
    config = AppConfig.from_env()
    if not config.database_url:
        raise ValueError("DATABASE_URL environment variable not set")

    db_pool = await asyncpg.create_pool(config.database_url)
    analytics.configure(db_pool, enabled=config.analytics_enabled)
    app = build_app(config, db_pool)

    await app.notifications.request_permission()
    app.scheduler.start()

    try:
        yield app  # Server runs here
    finally:
        await app.close()
        logger.info("recordkeeper shut down")


# Initialize MCP server with lifespan
mcp = FastMCP(name="recordkeeper", lifespan=lifespan)


def _app(ctx: Context) -> AppContext:
    return ctx.request_context.lifespan_context


def _json(data: Any) -> str:
    return json.dumps(data, default=str, indent=2)


# =============================================================================
# Records
# =============================================================================


@mcp.tool()
async def create_record(
    ctx: Context,
    title: str,
    event_date: Optional[str] = None,
    description: Optional[str] = None,
    category: Optional[str] = None,
    notes: Optional[str] = None,
) -> str:
    """
    Create a record.

    Args:
        title: Record title
        event_date: Date in YYYY-MM-DD format (defaults to today)
        description: Rich-text description
        category: Category name (created if it doesn't exist)
        notes: Free-form notes

    Returns:
        The created record as JSON
    """
    app = _app(ctx)
    try:
        category_id = None
        if category:
            category_id = (await app.categories.create_category(category))["id"]
        record = await app.records.create_record(
            title,
            event_date=datetime.strptime(event_date, "%Y-%m-%d").date() if event_date else None,
            description=description,
            category_id=category_id,
            notes=notes,
        )
        return _json(record)
    except Exception as e:
        return f"Error creating record: {str(e)}"


@mcp.tool()
async def update_record(
    ctx: Context,
    record_id: str,
    title: Optional[str] = None,
    event_date: Optional[str] = None,
    description: Optional[str] = None,
    category: Optional[str] = None,
    notes: Optional[str] = None,
) -> str:
    """
    Edit a record. Only the fields given are changed.

    Args:
        record_id: The record ID
        title: New title
        event_date: New date in YYYY-MM-DD format
        description: New description
        category: New category name
        notes: New notes

    Returns:
        The updated record as JSON
    """
    app = _app(ctx)
    try:
        fields: dict[str, Any] = {}
        if title is not None:
            fields["title"] = title
        if event_date is not None:
            fields["event_date"] = datetime.strptime(event_date, "%Y-%m-%d").date()
        if description is not None:
            fields["description"] = description
        if notes is not None:
            fields["notes"] = notes
        if category is not None:
            fields["category_id"] = (await app.categories.create_category(category))["id"]

        record = await app.records.update_record(record_id, **fields)
        if record is None:
            return f"Record {record_id} not found"
        return _json(record)
    except Exception as e:
        return f"Error updating record: {str(e)}"


@mcp.tool()
async def delete_record(ctx: Context, record_id: str) -> str:
    """
    Delete a record and its reminders.

    Args:
        record_id: The record ID
    """
    try:
        if await _app(ctx).records.delete_record(record_id):
            return f"Record {record_id} deleted"
        return f"Record {record_id} not found"
    except Exception as e:
        return f"Error deleting record: {str(e)}"


@mcp.tool()
async def search(
    ctx: Context,
    query: str = "",
    category: Optional[str] = None,
    date_from: Optional[str] = None,
    date_to: Optional[str] = None,
    limit: int = 100,
) -> str:
    """
    Search records by text, category and event date.

    Args:
        query: Text matched against title, description, category and date
        category: Exact category name
        date_from: Earliest event date ("2026-01-01", "last month")
        date_to: Latest event date, inclusive
        limit: Maximum number of records to search (default 100, max 500)

    Returns:
        Matching records as JSON
    """
    try:
        records = await _app(ctx).records.list_records(limit=min(limit, 500))
        results = search_records(records, query, category, date_from, date_to)
        if not results:
            return "No records found"
        return _json(results)
    except Exception as e:
        return f"Error searching records: {str(e)}"


@mcp.tool()
async def list_categories(ctx: Context) -> str:
    """List all categories, marking the ones no record uses."""
    app = _app(ctx)
    try:
        categories = await app.categories.list_categories()
        if not categories:
            return "No categories found"
        in_use = set(get_unique_categories(await app.records.list_records(limit=500)))
        return "\n".join(
            f"[{c['id']}] {c['name']}" + ("" if c["name"] in in_use else " (unused)")
            for c in categories
        )
    except Exception as e:
        return f"Error listing categories: {str(e)}"


@mcp.tool()
async def rename_category(ctx: Context, category_id: str, name: str) -> str:
    """
    Rename a category.

    Args:
        category_id: The category ID
        name: New category name
    """
    try:
        if await _app(ctx).categories.rename_category(category_id, name):
            return f"Category {category_id} renamed to {name.strip()}"
        return f"Category {category_id} not found"
    except Exception as e:
        return f"Error renaming category: {str(e)}"


@mcp.tool()
async def delete_category(ctx: Context, category_id: str) -> str:
    """
    Delete a category. Records filed under it keep existing without one.

    Args:
        category_id: The category ID
    """
    try:
        if await _app(ctx).categories.delete_category(category_id):
            return f"Category {category_id} deleted"
        return f"Category {category_id} not found"
    except Exception as e:
        return f"Error deleting category: {str(e)}"



@mcp.tool()
async def audit_trail(ctx: Context, record_id: Optional[str] = None, limit: int = 100) -> str:
    """
    Show the change history, newest first.

    Args:
        record_id: Only show changes to this record
        limit: Maximum number of entries (default 100)
    """
    try:
        entries = await _app(ctx).audit.list_entries(record_id, limit=min(limit, 500))
        if not entries:
            return "No audit entries found"
        formatted = []
        for entry in entries:
            fields = ", ".join(entry.get("changed_fields") or []) or "-"
            formatted.append(
                f"[{entry['timestamp']}] {entry['action']} {entry['table_name']} "
                f"{entry['record_id']} (fields: {fields})"
            )
        return "\n".join(formatted)
    except Exception as e:
        return f"Error reading audit trail: {str(e)}"


# =============================================================================
# Reminders
# =============================================================================


@mcp.tool()
async def create_reminder(
    ctx: Context,
    record_id: str,
    title: str,
    reminder_date: str,
    reminder_time: str,
    time_limit: str = "1hour",
    actions: Optional[list[str]] = None,
    description: Optional[str] = None,
) -> str:
    """
    Attach a reminder to a record.

    Args:
        record_id: The record ID
        title: Reminder title
        reminder_date: Due date in YYYY-MM-DD format
        reminder_time: Due time in HH:MM format (server timezone)
        time_limit: How long before the due time to remind: 5min, 15min,
            30min, 1hour, 2hours, 1day, 2days, 1week, or custom like 45min
        actions: Actions to run, e.g. ["Show browser notification"]
        description: Optional description

    Returns:
        The created reminder as JSON
    """
    try:
        reminder = await _app(ctx).reminders.create_reminder(
            record_id,
            title,
            reminder_date,
            reminder_time,
            time_limit=time_limit,
            actions=actions,
            description=description,
        )
        return _json(reminder.to_dict())
    except Exception as e:
        return f"Error creating reminder: {str(e)}"


@mcp.tool()
async def update_reminder(
    ctx: Context,
    reminder_id: str,
    title: Optional[str] = None,
    reminder_date: Optional[str] = None,
    reminder_time: Optional[str] = None,
    time_limit: Optional[str] = None,
    actions: Optional[list[str]] = None,
    description: Optional[str] = None,
    is_active: Optional[bool] = None,
) -> str:
    """
    Edit a reminder. Only the fields given are changed.

    Args:
        reminder_id: The reminder ID
        title: New title
        reminder_date: New due date (YYYY-MM-DD)
        reminder_time: New due time (HH:MM)
        time_limit: New lead time
        actions: New action list
        description: New description
        is_active: Activate or deactivate

    Returns:
        The updated reminder as JSON
    """
    given = {
        "title": title,
        "reminder_date": reminder_date,
        "reminder_time": reminder_time,
        "time_limit": time_limit,
        "actions": actions,
        "description": description,
        "is_active": is_active,
    }
    try:
        reminder = await _app(ctx).reminders.update_reminder(
            reminder_id, **{k: v for k, v in given.items() if v is not None}
        )
        if reminder is None:
            return f"Reminder {reminder_id} not found"
        return _json(reminder.to_dict())
    except Exception as e:
        return f"Error updating reminder: {str(e)}"


@mcp.tool()
async def delete_reminder(ctx: Context, reminder_id: str) -> str:
    """Delete a reminder."""
    try:
        if await _app(ctx).reminders.delete_reminder(reminder_id):
            return f"Reminder {reminder_id} deleted"
        return f"Reminder {reminder_id} not found"
    except Exception as e:
        return f"Error deleting reminder: {str(e)}"


@mcp.tool()
async def toggle_reminder(ctx: Context, reminder_id: str) -> str:
    """Activate an inactive reminder or deactivate an active one."""
    try:
        value = await _app(ctx).reminders.toggle_active(reminder_id)
        if value is None:
            return f"Reminder {reminder_id} not found"
        return f"Reminder {reminder_id} {'activated' if value else 'deactivated'}"
    except Exception as e:
        return f"Error updating reminder status: {str(e)}"


@mcp.tool()
async def complete_reminder(ctx: Context, reminder_id: str) -> str:
    """Mark a reminder (follow-up) as complete."""
    try:
        if await _app(ctx).reminders.mark_complete(reminder_id):
            return f"Reminder {reminder_id} marked as complete"
        return f"Reminder {reminder_id} not found"
    except Exception as e:
        return f"Error completing reminder: {str(e)}"


@mcp.tool()
async def list_reminders(ctx: Context, record_id: str) -> str:
    """
    List the reminders attached to a record.

    Args:
        record_id: The record ID
    """
    app = _app(ctx)
    try:
        reminders = await app.reminders.list_for_record(record_id)
        if not reminders:
            return "No reminders for this record"
        active = await app.reminders.count_active_for_record(record_id)
        formatted = [f"{active} active of {len(reminders)} reminder(s)"]
        for r in reminders:
            state = "active" if r.is_active else "inactive"
            formatted.append(
                f"[{r.id}] {r.title} - {r.reminder_date} {r.reminder_time.strftime('%H:%M')} "
                f"({describe_lead_time(r.time_limit)}, {state}) actions: {', '.join(r.actions) or '-'}"
            )
        return "\n".join(formatted)
    except Exception as e:
        return f"Error listing reminders: {str(e)}"


@mcp.tool()
async def upcoming_reminders(ctx: Context, limit: int = 10) -> str:
    """
    List the next active reminders across all records.

    Args:
        limit: Maximum number of reminders (default 10)
    """
    try:
        reminders = await _app(ctx).reminders.get_upcoming(limit=min(limit, 100))
        if not reminders:
            return "No upcoming reminders"
        formatted = []
        for r in reminders:
            category = f" [{r.record_category}]" if r.record_category else ""
            formatted.append(
                f"{r.reminder_date} {r.reminder_time.strftime('%H:%M')} - {r.title} "
                f"(record: {r.record_title}{category}, {describe_lead_time(r.time_limit)})"
            )
        return "\n".join(formatted)
    except Exception as e:
        return f"Error fetching upcoming reminders: {str(e)}"


@mcp.tool()
async def follow_ups(ctx: Context, period: str = "all") -> str:
    """
    Show follow-ups grouped by when they are due.

    Args:
        period: today, tomorrow, this-week, this-month, overdue or all
    """
    app = _app(ctx)
    try:
        tz = app.config.tz
        now = datetime.now(pytz.UTC)
        reminders = await app.reminders.get_upcoming(now, limit=500)
        items = filter_follow_ups(build_follow_ups(reminders, now, tz), period, now, tz)
        if not items:
            return f"No follow-ups for '{period}'"
        return _json([item.to_dict() for item in items])
    except Exception as e:
        return f"Error loading follow-ups: {str(e)}"


# =============================================================================
# Scheduler
# =============================================================================


@mcp.tool()
async def scheduler_status(ctx: Context) -> str:
    """Show whether the reminder scheduler is running and when it last checked."""
    app = _app(ctx)
    status = app.scheduler.status()
    status["notification_permission"] = app.notifications.permission.value
    return "\n".join(f"{k}: {v}" for k, v in status.items())


@mcp.tool()
async def check_reminders_now(ctx: Context) -> str:
    """Run a reminder check immediately instead of waiting for the next tick."""
    fired = await _app(ctx).scheduler.run_once()
    return f"Reminder check complete, {fired} reminder(s) fired"


if __name__ == "__main__":
    # Run MCP server with stdio transport
    mcp.run(transport="stdio")
