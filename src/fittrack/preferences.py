"""Key-value preference storage.

Preferences live in their own SQLite file, separate from the exercise and
program store. Each scope is an independent store: writes are last-write-wins
per key and nothing spans more than one key.
"""

import asyncio
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import aiosqlite

from .db.engine import translate_errors
from .models.preferences import (
    DEFAULT_HOME_STATS,
    AppLanguage,
    StatType,
    WeightUnit,
    to_display,
    to_storage,
)

logger = logging.getLogger(__name__)

ENABLED_HOME_STATS = "enabled_home_stats"
WEIGHT_UNIT = "weight_unit"
APP_LANGUAGE = "app_language"

HOME_STATS_SCOPE = "home_stats"
SETTINGS_SCOPE = "settings"


class PreferenceStore:
    """Durable key to JSON value mapping for one scope."""

    def __init__(self, path: Path | str, scope: str):
        self.path = path
        self.scope = scope
        self._conn: aiosqlite.Connection | None = None
        self._open_lock = asyncio.Lock()

    async def _connection(self) -> aiosqlite.Connection:
        if self._conn is not None:
            return self._conn
        async with self._open_lock:
            if self._conn is None:
                with translate_errors():
                    conn = await aiosqlite.connect(self.path)
                    await conn.execute(
                        """
                        CREATE TABLE IF NOT EXISTS preferences (
                            scope TEXT NOT NULL,
                            key TEXT NOT NULL,
                            value TEXT NOT NULL,
                            PRIMARY KEY (scope, key)
                        )
                        """
                    )
                    await conn.commit()
                self._conn = conn
        return self._conn

    async def close(self) -> None:
        if self._conn is not None:
            await self._conn.close()
            self._conn = None

    async def __aenter__(self) -> "PreferenceStore":
        await self._connection()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def read(self, key: str, default: Any = None) -> Any:
        """Return the stored value, or default if absent or unreadable."""
        conn = await self._connection()
        with translate_errors():
            cursor = await conn.execute(
                "SELECT value FROM preferences WHERE scope = ? AND key = ?",
                (self.scope, key),
            )
            row = await cursor.fetchone()
        if row is None:
            return default
        try:
            return json.loads(row[0])
        except json.JSONDecodeError:
            logger.warning("Ignoring corrupt preference %s/%s", self.scope, key)
            return default

    async def write(self, key: str, value: Any) -> None:
        """Serialize and persist a value, replacing any previous one."""
        payload = json.dumps(value)
        conn = await self._connection()
        with translate_errors():
            await conn.execute(
                "INSERT OR REPLACE INTO preferences (scope, key, value) VALUES (?, ?, ?)",
                (self.scope, key, payload),
            )
            await conn.commit()

    async def remove(self, key: str) -> None:
        conn = await self._connection()
        with translate_errors():
            await conn.execute(
                "DELETE FROM preferences WHERE scope = ? AND key = ?", (self.scope, key)
            )
            await conn.commit()


class HomeStatsPreferences:
    """Which statistics the home screen shows, in display order."""

    def __init__(self, store: PreferenceStore):
        self.store = store

    async def enabled_stats(self) -> list[StatType]:
        """Enabled stats in order; the defaults when unset, empty or corrupt."""
        raw = await self.store.read(ENABLED_HOME_STATS)
        if not isinstance(raw, list):
            return list(DEFAULT_HOME_STATS)

        stats: list[StatType] = []
        for value in raw:
            stat = StatType.from_raw(value) if isinstance(value, str) else None
            if stat is not None and stat not in stats:
                stats.append(stat)
        return stats or list(DEFAULT_HOME_STATS)

    async def save(self, stats: list[StatType]) -> None:
        unique = list(dict.fromkeys(stats))
        await self.store.write(ENABLED_HOME_STATS, [s.value for s in unique])

    async def is_enabled(self, stat: StatType) -> bool:
        return stat in await self.enabled_stats()

    async def toggle(self, stat: StatType) -> list[StatType]:
        """Remove the stat if shown, otherwise append it to the end."""
        stats = await self.enabled_stats()
        if stat in stats:
            stats.remove(stat)
        else:
            stats.append(stat)
        await self.save(stats)
        return stats

    async def move(self, source: int, destination: int) -> list[StatType]:
        """Move the stat at one position to another."""
        stats = await self.enabled_stats()
        if not 0 <= source < len(stats):
            raise IndexError(f"No stat at position {source}")
        stat = stats.pop(source)
        destination = max(0, min(destination, len(stats)))
        stats.insert(destination, stat)
        await self.save(stats)
        return stats

    async def reset_to_defaults(self) -> list[StatType]:
        await self.save(DEFAULT_HOME_STATS)
        return list(DEFAULT_HOME_STATS)


class WeightUnitPreferences:
    """The unit weights are displayed in. Storage is always kilograms."""

    def __init__(self, store: PreferenceStore):
        self.store = store

    async def selected_unit(self) -> WeightUnit:
        raw = await self.store.read(WEIGHT_UNIT)
        try:
            return WeightUnit(raw)
        except ValueError:
            return WeightUnit.KILOGRAMS

    async def set_unit(self, unit: WeightUnit) -> None:
        await self.store.write(WEIGHT_UNIT, unit.value)

    async def to_display_value(self, kg: float) -> float:
        return to_display(await self.selected_unit(), kg)

    async def to_storage_value(self, value: float) -> float:
        return to_storage(await self.selected_unit(), value)


class LanguagePreferences:
    """The UI language code."""

    def __init__(self, store: PreferenceStore, default: AppLanguage = AppLanguage.GERMAN):
        self.store = store
        self.default = default

    async def selected_language(self) -> AppLanguage:
        raw = await self.store.read(APP_LANGUAGE)
        try:
            return AppLanguage(raw)
        except ValueError:
            return self.default

    async def set_language(self, language: AppLanguage) -> None:
        await self.store.write(APP_LANGUAGE, language.value)


@dataclass
class Preferences:
    """All preference accessors, backed by two independent scoped stores."""

    home_stats: HomeStatsPreferences
    weight_unit: WeightUnitPreferences
    language: LanguagePreferences

    @classmethod
    def open(
        cls, path: Path | str, default_language: AppLanguage = AppLanguage.GERMAN
    ) -> "Preferences":
        settings_store = PreferenceStore(path, SETTINGS_SCOPE)
        return cls(
            home_stats=HomeStatsPreferences(PreferenceStore(path, HOME_STATS_SCOPE)),
            weight_unit=WeightUnitPreferences(settings_store),
            language=LanguagePreferences(settings_store, default_language),
        )

    async def close(self) -> None:
        await self.home_stats.store.close()
        await self.weight_unit.store.close()

    async def __aenter__(self) -> "Preferences":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()
