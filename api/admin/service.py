"""
Admin dashboard statistics.

Each "...Change" figure is the number of rows created in the last 30 days
minus the number created in the 30 days before that.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from . import repository

CHANGE_WINDOW = timedelta(days=30)
RECENT_ACTIVITY_LIMIT = 5

# (response key, change key, table)
_COUNTERS = (
    ("publications", "publicationsChange", "publications"),
    ("services", "servicesChange", "services"),
    ("seminars", "seminarsChange", "seminars"),
    ("newspapers", "newspapersChange", "newspapers"),
    ("whistleblowerReports", "reportsChange", "whistleblower_reports"),
)


async def _change(table: str, now: datetime) -> int:
    current = await repository.count_created_between(table, now - CHANGE_WINDOW, now)
    previous = await repository.count_created_between(table, now - 2 * CHANGE_WINDOW, now - CHANGE_WINDOW)
    return current - previous


async def recent_activity(limit: int = RECENT_ACTIVITY_LIMIT) -> list[dict]:
    items = [
        {
            "id": row["id"],
            "type": "publication",
            "title": row["title"],
            "timestamp": row["created_at"],
            "user": "Administrator",
        }
        for row in await repository.recent_publications(limit)
    ]
    items += [
        {
            "id": row["id"],
            "type": "seminar",
            "title": row["title"],
            "timestamp": row["created_at"],
            "user": "Administrator",
        }
        for row in await repository.recent_seminars(limit)
    ]
    items += [
        {
            "id": row["id"],
            "type": "report",
            "title": "New whistleblower report received",
            "timestamp": row["created_at"],
            "user": "System",
        }
        for row in await repository.recent_reports(limit)
    ]
    items.sort(key=lambda item: item["timestamp"], reverse=True)
    return items[:limit]


async def dashboard_stats(now: datetime | None = None) -> dict:
    now = now or datetime.now(timezone.utc)
    stats: dict = {}
    for key, change_key, table in _COUNTERS:
        stats[key] = await repository.count_rows(table)
        stats[change_key] = await _change(table, now)
    stats["recentActivity"] = await recent_activity()
    return stats
