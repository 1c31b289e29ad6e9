"""Table gateways: CRUD, filtered listing and live queries."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Generic, TypeVar

import aiosqlite

from ..errors import NotFound
from ..models.exercises import Exercise, parse_muscle_groups
from ..models.program import ExerciseSettings, WorkoutProgram
from .engine import Database, translate_errors
from .observe import SnapshotCallback, Subscription

logger = logging.getLogger(__name__)

T = TypeVar("T")


def to_timestamp(value: datetime | None) -> str | None:
    """Serialize a datetime so that stored values sort chronologically."""
    return value.isoformat(timespec="microseconds") if value else None


def from_timestamp(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


def _to_sql(value: Any) -> Any:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return to_timestamp(value)
    return value


def _escape_like(text: str) -> str:
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


@dataclass
class ListQuery:
    """Filter and sort options for Table.list().

    search: case-insensitive substring of the name.
    where: exact matches on boolean or enum columns.
    tag: a muscle group the record must carry.
    """

    search: str | None = None
    where: dict[str, Any] = field(default_factory=dict)
    tag: Enum | str | None = None
    order_by: str | None = None
    descending: bool = False

    def matches(self, record: Any) -> bool:
        """Whether a record belongs in this query's result set."""
        if self.search and self.search.casefold() not in record.name.casefold():
            return False
        for column, value in self.where.items():
            if getattr(record, column) != value:
                return False
        if self.tag is not None and self.tag not in getattr(record, "muscle_groups", []):
            return False
        return True


class Table(Generic[T]):
    """Generic single-table gateway keyed by an opaque text id."""

    name: str = ""
    columns: tuple[str, ...] = ()
    filter_columns: frozenset[str] = frozenset()
    sort_columns: frozenset[str] = frozenset()
    text_columns: frozenset[str] = frozenset({"name"})
    tag_column: str | None = None
    default_order: str = "name"

    def __init__(self, db: Database):
        self.db = db

    # Row mapping, implemented per table

    def to_row(self, record: T) -> dict:
        raise NotImplementedError

    def from_row(self, row: aiosqlite.Row) -> T:
        raise NotImplementedError

    async def _write_children(self, conn: aiosqlite.Connection, record: T) -> None:
        """Persist rows owned by the record. No-op by default."""

    async def _hydrate(self, conn: aiosqlite.Connection, records: list[T]) -> list[T]:
        """Attach owned rows to loaded records. No-op by default."""
        return records

    # Reads

    async def _select(
        self,
        conn: aiosqlite.Connection,
        where: str = "",
        params: tuple = (),
        order: str = "",
    ) -> list[T]:
        sql = f"SELECT * FROM {self.name}"
        if where:
            sql += f" WHERE {where}"
        if order:
            sql += f" ORDER BY {order}"
        cursor = await conn.execute(sql, params)
        rows = await cursor.fetchall()
        return await self._hydrate(conn, [self.from_row(row) for row in rows])

    async def _select_one(self, conn: aiosqlite.Connection, record_id: str) -> T | None:
        found = await self._select(conn, "id = ?", (record_id,))
        return found[0] if found else None

    async def get(self, record_id: str) -> T | None:
        """Get a record by id, or None if there is none."""
        conn = await self.db.connection()
        with translate_errors():
            return await self._select_one(conn, record_id)

    async def list(self, query: ListQuery | None = None) -> list[T]:
        """Snapshot of the records matching a query."""
        query = query or ListQuery()
        where, params = self._where_clause(query)
        order = self._order_clause(query)
        conn = await self.db.connection()
        with translate_errors():
            return await self._select(conn, where, params, order)

    async def count(self) -> int:
        row = await self.db.fetchone(f"SELECT COUNT(*) FROM {self.name}")
        return row[0] if row else 0

    def _where_clause(self, query: ListQuery) -> tuple[str, tuple]:
        clauses: list[str] = []
        params: list[Any] = []

        if query.search:
            clauses.append("casefold(name) LIKE ? ESCAPE '\\'")
            params.append(f"%{_escape_like(query.search.casefold())}%")

        for column, value in query.where.items():
            if column not in self.filter_columns:
                raise ValueError(f"Cannot filter {self.name} by {column!r}")
            clauses.append(f"{column} = ?")
            params.append(_to_sql(value))

        if query.tag is not None:
            if self.tag_column is None:
                raise ValueError(f"{self.name} records carry no tags")
            clauses.append(f"{self.tag_column} LIKE ? ESCAPE '\\'")
            params.append(f'%"{_escape_like(str(_to_sql(query.tag)))}"%')

        return " AND ".join(clauses), tuple(params)

    def _order_clause(self, query: ListQuery) -> str:
        column = query.order_by or self.default_order
        if column not in self.sort_columns:
            raise ValueError(f"Cannot sort {self.name} by {column!r}")
        direction = "DESC" if query.descending else "ASC"
        collate = " COLLATE NOCASE" if column in self.text_columns else ""
        return f"{column}{collate} {direction}, id ASC"

    # Writes

    async def insert(self, record: T) -> None:
        """Insert a record with its caller-assigned id."""
        await self.insert_many([record])

    async def insert_many(self, records: list[T]) -> None:
        """Insert records as one batch; nothing is kept if any insert fails."""
        placeholders = ", ".join("?" for _ in self.columns)
        sql = f"INSERT INTO {self.name} ({', '.join(self.columns)}) VALUES ({placeholders})"
        async with self.db.transaction() as conn:
            for record in records:
                row = self.to_row(record)
                await conn.execute(sql, tuple(row[c] for c in self.columns))
                await self._write_children(conn, record)
            self.db.observers.stage(self.name, records)

    async def update(self, record: T) -> None:
        """Replace the stored record with the same id."""
        assignments = ", ".join(f"{c} = ?" for c in self.columns if c != "id")
        row = self.to_row(record)
        params = tuple(row[c] for c in self.columns if c != "id") + (row["id"],)

        async with self.db.transaction() as conn:
            old = await self._select_one(conn, row["id"])
            if old is None:
                raise NotFound(self.name, row["id"])
            await conn.execute(
                f"UPDATE {self.name} SET {assignments} WHERE id = ?", params
            )
            await self._write_children(conn, record)
            self.db.observers.stage(self.name, [old, record])

    async def delete(self, record_id: str) -> bool:
        """Delete a record. Returns False if there was nothing to delete."""
        async with self.db.transaction() as conn:
            old = await self._select_one(conn, record_id)
            if old is None:
                return False
            await conn.execute(f"DELETE FROM {self.name} WHERE id = ?", (record_id,))
            self.db.observers.stage(self.name, [old])
        return True

    # Live queries

    async def observe(
        self, callback: SnapshotCallback, query: ListQuery | None = None
    ) -> Subscription:
        """Subscribe to a query.

        The callback gets the current snapshot before this returns, then a
        fresh snapshot after every change to a matching record.
        """
        query = query or ListQuery()
        # Validate the query up front rather than on first delivery
        self._where_clause(query)
        self._order_clause(query)

        subscription = Subscription(
            table=self.name,
            matches=query.matches,
            load=lambda: self.list(query),
            callback=callback,
            registry=self.db.observers,
        )
        self.db.observers.add(subscription)
        try:
            await subscription.refresh()
        except BaseException:
            subscription.cancel()
            raise
        return subscription


class ExerciseTable(Table[Exercise]):
    """The exercise library."""

    name = "exercises"
    columns = (
        "id",
        "name",
        "description",
        "instructions",
        "muscle_groups",
        "is_favorite",
        "placeholder_image_url",
        "placeholder_video_url",
        "created_at",
        "is_custom",
    )
    filter_columns = frozenset({"is_favorite", "is_custom"})
    sort_columns = frozenset({"name", "created_at", "is_favorite", "is_custom"})
    tag_column = "muscle_groups"
    default_order = "name"

    def to_row(self, record: Exercise) -> dict:
        return {
            "id": record.id,
            "name": record.name,
            "description": record.description,
            "instructions": record.instructions,
            "muscle_groups": json.dumps([mg.value for mg in record.muscle_groups]),
            "is_favorite": int(record.is_favorite),
            "placeholder_image_url": record.placeholder_image_url,
            "placeholder_video_url": record.placeholder_video_url,
            "created_at": to_timestamp(record.created_at),
            "is_custom": int(record.is_custom),
        }

    def from_row(self, row: aiosqlite.Row) -> Exercise:
        return Exercise(
            id=row["id"],
            name=row["name"],
            description=row["description"],
            instructions=row["instructions"],
            muscle_groups=parse_muscle_groups(row["muscle_groups"]),
            is_favorite=bool(row["is_favorite"]),
            placeholder_image_url=row["placeholder_image_url"],
            placeholder_video_url=row["placeholder_video_url"],
            created_at=from_timestamp(row["created_at"]),
            is_custom=bool(row["is_custom"]),
        )

    async def set_favorite(self, exercise_id: str, is_favorite: bool) -> None:
        """Set only the favorite flag."""
        async with self.db.transaction() as conn:
            old = await self._select_one(conn, exercise_id)
            if old is None:
                raise NotFound(self.name, exercise_id)
            await conn.execute(
                "UPDATE exercises SET is_favorite = ? WHERE id = ?",
                (int(is_favorite), exercise_id),
            )
            new = await self._select_one(conn, exercise_id)
            self.db.observers.stage(self.name, [old, new])


def _parse_id_list(raw: str | None) -> list[str]:
    if not raw:
        return []
    try:
        ids = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("Dropping corrupt exercise id list: %r", raw)
        return []
    if not isinstance(ids, list):
        return []
    return [str(i) for i in ids]


class ProgramTable(Table[WorkoutProgram]):
    """Workout programs plus their per-exercise settings rows."""

    name = "workout_programs"
    columns = (
        "id",
        "name",
        "description",
        "image_data",
        "use_preset_icon",
        "preset_icon_name",
        "exercise_ids",
        "duration_minutes",
        "created_at",
        "last_modified_at",
        "completion_count",
        "last_completed_at",
    )
    filter_columns = frozenset({"use_preset_icon"})
    sort_columns = frozenset(
        {
            "name",
            "created_at",
            "last_modified_at",
            "completion_count",
            "last_completed_at",
            "duration_minutes",
        }
    )
    default_order = "last_modified_at"

    def to_row(self, record: WorkoutProgram) -> dict:
        return {
            "id": record.id,
            "name": record.name,
            "description": record.description,
            "image_data": record.image_data,
            "use_preset_icon": int(record.use_preset_icon),
            "preset_icon_name": record.preset_icon_name,
            "exercise_ids": json.dumps(list(record.exercise_ids)),
            "duration_minutes": record.duration_minutes,
            "created_at": to_timestamp(record.created_at),
            "last_modified_at": to_timestamp(record.last_modified_at),
            "completion_count": record.completion_count,
            "last_completed_at": to_timestamp(record.last_completed_at),
        }

    def from_row(self, row: aiosqlite.Row) -> WorkoutProgram:
        image_data = row["image_data"]
        return WorkoutProgram(
            id=row["id"],
            name=row["name"],
            description=row["description"],
            image_data=bytes(image_data) if image_data is not None else None,
            use_preset_icon=bool(row["use_preset_icon"]),
            preset_icon_name=row["preset_icon_name"],
            exercise_ids=_parse_id_list(row["exercise_ids"]),
            duration_minutes=row["duration_minutes"],
            created_at=from_timestamp(row["created_at"]),
            last_modified_at=from_timestamp(row["last_modified_at"]),
            completion_count=row["completion_count"],
            last_completed_at=from_timestamp(row["last_completed_at"]),
        )

    async def _write_children(
        self, conn: aiosqlite.Connection, record: WorkoutProgram
    ) -> None:
        await conn.execute(
            "DELETE FROM program_exercise_settings WHERE program_id = ?", (record.id,)
        )
        await conn.executemany(
            """
            INSERT INTO program_exercise_settings
            (id, program_id, position, exercise_id, sets, reps, weight_kg,
             rest_seconds, notes)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            [
                (
                    s.id,
                    record.id,
                    position,
                    s.exercise_id,
                    s.sets,
                    s.reps,
                    s.weight_kg,
                    s.rest_seconds,
                    s.notes,
                )
                for position, s in enumerate(record.exercise_settings)
            ],
        )

    async def _hydrate(
        self, conn: aiosqlite.Connection, records: list[WorkoutProgram]
    ) -> list[WorkoutProgram]:
        if not records:
            return records
        by_id = {p.id: p for p in records}
        placeholders = ", ".join("?" for _ in by_id)
        cursor = await conn.execute(
            f"""
            SELECT * FROM program_exercise_settings
            WHERE program_id IN ({placeholders})
            ORDER BY program_id, position
            """,
            tuple(by_id),
        )
        for row in await cursor.fetchall():
            by_id[row["program_id"]].exercise_settings.append(
                ExerciseSettings(
                    id=row["id"],
                    exercise_id=row["exercise_id"],
                    sets=row["sets"],
                    reps=row["reps"],
                    weight_kg=row["weight_kg"],
                    rest_seconds=row["rest_seconds"],
                    notes=row["notes"],
                )
            )
        return records

    async def increment_completion(
        self, program_id: str, at: datetime | None = None
    ) -> WorkoutProgram:
        """Atomically bump completion_count and stamp last_completed_at."""
        at = at or datetime.now()
        async with self.db.transaction() as conn:
            old = await self._select_one(conn, program_id)
            if old is None:
                raise NotFound(self.name, program_id)
            await conn.execute(
                """
                UPDATE workout_programs
                SET completion_count = completion_count + 1, last_completed_at = ?
                WHERE id = ?
                """,
                (to_timestamp(at), program_id),
            )
            new = await self._select_one(conn, program_id)
            self.db.observers.stage(self.name, [old, new])
        return new

    async def update_settings_entry(
        self, program_id: str, entry: ExerciseSettings, at: datetime | None = None
    ) -> None:
        """Rewrite a single settings row in place.

        Counts as a structural edit, so last_modified_at moves forward.
        """
        at = at or datetime.now()
        async with self.db.transaction() as conn:
            old = await self._select_one(conn, program_id)
            if old is None:
                raise NotFound(self.name, program_id)
            cursor = await conn.execute(
                """
                UPDATE program_exercise_settings
                SET exercise_id = ?, sets = ?, reps = ?, weight_kg = ?,
                    rest_seconds = ?, notes = ?
                WHERE id = ? AND program_id = ?
                """,
                (
                    entry.exercise_id,
                    entry.sets,
                    entry.reps,
                    entry.weight_kg,
                    entry.rest_seconds,
                    entry.notes,
                    entry.id,
                    program_id,
                ),
            )
            if cursor.rowcount == 0:
                raise NotFound("program_exercise_settings", entry.id)
            await conn.execute(
                """
                UPDATE workout_programs
                SET last_modified_at = max(last_modified_at, ?)
                WHERE id = ?
                """,
                (to_timestamp(at), program_id),
            )
            # Keep the denormalized id list in step with the settings rows
            cursor = await conn.execute(
                """
                SELECT exercise_id FROM program_exercise_settings
                WHERE program_id = ? ORDER BY position
                """,
                (program_id,),
            )
            ids = [row["exercise_id"] for row in await cursor.fetchall()]
            await conn.execute(
                "UPDATE workout_programs SET exercise_ids = ? WHERE id = ?",
                (json.dumps(ids), program_id),
            )
            new = await self._select_one(conn, program_id)
            self.db.observers.stage(self.name, [old, new])

    async def programs_using(self, exercise_id: str) -> list[WorkoutProgram]:
        """Programs whose exercise list or settings mention an exercise."""
        conn = await self.db.connection()
        with translate_errors():
            return await self._select(
                conn,
                """
                id IN (
                    SELECT program_id FROM program_exercise_settings
                    WHERE exercise_id = ?
                ) OR exercise_ids LIKE ? ESCAPE '\\'
                """,
                (exercise_id, f'%"{_escape_like(exercise_id)}"%'),
                "last_modified_at DESC, id ASC",
            )
