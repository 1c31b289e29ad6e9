"""Database engine setup and initialization."""

import asyncio
import logging
from contextlib import asynccontextmanager, contextmanager
from pathlib import Path
from typing import AsyncIterator, Iterator

import aiosqlite

from ..errors import ConstraintViolation, StorageUnavailable
from .observe import ObserverRegistry

logger = logging.getLogger(__name__)

# Bump when the schema changes; existing data is dropped and recreated.
SCHEMA_VERSION = 2

TABLES = ["program_exercise_settings", "workout_programs", "exercises"]

SCHEMA = [
    """
    CREATE TABLE IF NOT EXISTS exercises (
        id TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        description TEXT NOT NULL DEFAULT '',
        instructions TEXT NOT NULL DEFAULT '',
        muscle_groups TEXT NOT NULL DEFAULT '[]',
        is_favorite INTEGER NOT NULL DEFAULT 0,
        placeholder_image_url TEXT,
        placeholder_video_url TEXT,
        created_at TEXT NOT NULL,
        is_custom INTEGER NOT NULL DEFAULT 0
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS workout_programs (
        id TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        description TEXT NOT NULL DEFAULT '',
        image_data BLOB,
        use_preset_icon INTEGER NOT NULL DEFAULT 1,
        preset_icon_name TEXT,
        exercise_ids TEXT NOT NULL DEFAULT '[]',
        duration_minutes INTEGER,
        created_at TEXT NOT NULL,
        last_modified_at TEXT NOT NULL,
        completion_count INTEGER NOT NULL DEFAULT 0,
        last_completed_at TEXT
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS program_exercise_settings (
        id TEXT NOT NULL,
        program_id TEXT NOT NULL,
        position INTEGER NOT NULL,
        exercise_id TEXT NOT NULL,
        sets INTEGER NOT NULL DEFAULT 3,
        reps INTEGER NOT NULL DEFAULT 10,
        weight_kg REAL NOT NULL DEFAULT 0,
        rest_seconds INTEGER NOT NULL DEFAULT 60,
        notes TEXT NOT NULL DEFAULT '',
        PRIMARY KEY (program_id, id),
        UNIQUE (program_id, position),
        FOREIGN KEY (program_id) REFERENCES workout_programs(id) ON DELETE CASCADE
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_exercises_name ON exercises(name)",
    """
    CREATE INDEX IF NOT EXISTS idx_programs_last_modified
    ON workout_programs(last_modified_at)
    """,
    """
    CREATE INDEX IF NOT EXISTS idx_settings_exercise
    ON program_exercise_settings(exercise_id)
    """,
]


@contextmanager
def translate_errors() -> Iterator[None]:
    """Map driver errors onto the fittrack error taxonomy."""
    try:
        yield
    except aiosqlite.IntegrityError as e:
        raise ConstraintViolation(str(e)) from e
    except aiosqlite.Error as e:
        logger.error("Storage failure: %s", e)
        raise StorageUnavailable(str(e)) from e


def _casefold(value: str | None) -> str | None:
    """Unicode case folding for SQL; the builtin lower() only folds ASCII."""
    return value.casefold() if value is not None else None


async def _init_schema(db: aiosqlite.Connection) -> None:
    """Create tables, dropping them first if the stored schema is stale."""
    cursor = await db.execute("PRAGMA user_version")
    row = await cursor.fetchone()
    version = row[0] if row else 0

    if version not in (0, SCHEMA_VERSION):
        logger.warning(
            "Schema version %s does not match %s; recreating tables",
            version,
            SCHEMA_VERSION,
        )
        for table in TABLES:
            await db.execute(f"DROP TABLE IF EXISTS {table}")

    for statement in SCHEMA:
        await db.execute(statement)
    await db.execute(f"PRAGMA user_version = {SCHEMA_VERSION}")
    await db.commit()


class Database:
    """Handle on the local store.

    Construct one at startup and pass it to the repositories that need it.
    The connection is opened on first use and held until close().
    """

    def __init__(self, path: Path | str):
        self.path = path
        self.observers = ObserverRegistry()
        self._conn: aiosqlite.Connection | None = None
        self._open_lock = asyncio.Lock()
        self._write_lock = asyncio.Lock()

    @classmethod
    def in_memory(cls) -> "Database":
        """An in-memory store, discarded on close."""
        return cls(":memory:")

    async def connection(self) -> aiosqlite.Connection:
        """Return the open connection, opening it if needed."""
        if self._conn is not None:
            return self._conn

        async with self._open_lock:
            if self._conn is None:
                with translate_errors():
                    conn = await aiosqlite.connect(self.path)
                    conn.row_factory = aiosqlite.Row
                    await conn.execute("PRAGMA foreign_keys = ON")
                    await conn.create_function(
                        "casefold", 1, _casefold, deterministic=True
                    )
                    await _init_schema(conn)
                logger.debug("Opened database at %s", self.path)
                self._conn = conn
        return self._conn

    async def close(self) -> None:
        if self._conn is not None:
            await self._conn.close()
            self._conn = None

    async def __aenter__(self) -> "Database":
        await self.connection()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        """Run a block of writes atomically.

        Writers are serialized. Changes staged for observers are delivered
        only after a successful commit.
        """
        conn = await self.connection()
        async with self._write_lock:
            try:
                with translate_errors():
                    yield conn
                    await conn.commit()
            except BaseException:
                self.observers.discard_staged()
                await self._rollback(conn)
                raise
            self.observers.publish_staged()
        await self.observers.drain()

    async def _rollback(self, conn: aiosqlite.Connection) -> None:
        try:
            await conn.rollback()
        except aiosqlite.Error:
            logger.exception("Rollback failed")

    async def fetchall(self, sql: str, params: tuple = ()) -> list[aiosqlite.Row]:
        conn = await self.connection()
        with translate_errors():
            cursor = await conn.execute(sql, params)
            return list(await cursor.fetchall())

    async def fetchone(self, sql: str, params: tuple = ()) -> aiosqlite.Row | None:
        conn = await self.connection()
        with translate_errors():
            cursor = await conn.execute(sql, params)
            return await cursor.fetchone()


async def init_db(db_path: Path | str) -> None:
    """Initialize the database schema at the given path."""
    async with Database(db_path):
        pass
