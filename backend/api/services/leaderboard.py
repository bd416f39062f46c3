"""
leaderboard.py: Read-only access to the levelling bot's levels.json.

The file is a flat mapping of user id -> record, produced by another process.
It is re-read from disk on every call, so the API never serves data older
than what is on disk.
"""
from __future__ import annotations

import json
import logging
import os
from datetime import datetime, timezone
from typing import Optional

from pydantic import ValidationError

from backend.api.schemas.server import LeaderboardEntry

logger = logging.getLogger(__name__)


class LeaderboardStore:
    def __init__(self, path: str):
        self.path = path

    def load(self) -> dict:
        if not os.path.exists(self.path):
            logger.warning(f"Leaderboard file not found: {self.path}")
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Failed to read leaderboard file {self.path}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.error(f"Leaderboard file {self.path} is not a JSON object")
            return {}
        return data

    def entries_for_guild(self, guild_id: str) -> list[LeaderboardEntry]:
        entries = []
        for key, record in self.load().items():
            if not isinstance(record, dict) or str(record.get("guild_id")) != str(guild_id):
                continue
            try:
                entries.append(LeaderboardEntry.model_validate(record))
            except ValidationError as e:
                logger.warning(f"Skipping malformed leaderboard record {key}: {e.error_count()} error(s)")
        return entries


def top_by_messages(entries: list[LeaderboardEntry], limit: int = 10) -> list[LeaderboardEntry]:
    return sorted(entries, key=lambda e: e.messages, reverse=True)[:limit]


def total_messages(entries: list[LeaderboardEntry]) -> int:
    return sum(e.messages for e in entries)


def last_message_at(entry: LeaderboardEntry) -> Optional[datetime]:
    """Parse lastMessage (ISO-8601 string or epoch milliseconds) as a local datetime."""
    value = entry.lastMessage
    if value is None or value == "":
        return None
    try:
        if isinstance(value, (int, float)):
            parsed = datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        else:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (ValueError, OverflowError, OSError):
        return None
    return parsed.astimezone()
