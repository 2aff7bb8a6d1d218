import sqlite3
from contextlib import asynccontextmanager

import aiosqlite
from tenacity import (
    AsyncRetrying,
    retry_if_exception,
    stop_after_attempt,
    wait_random_exponential,
)

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS usage_counters (
    user_id TEXT PRIMARY KEY,
    request_count INTEGER NOT NULL DEFAULT 0,
    total_tokens INTEGER NOT NULL DEFAULT 0,
    total_cost REAL NOT NULL DEFAULT 0.0,
    window_start TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS usage_history (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id TEXT NOT NULL,
    model_id TEXT NOT NULL,
    input_tokens INTEGER NOT NULL DEFAULT 0,
    output_tokens INTEGER NOT NULL DEFAULT 0,
    cost REAL NOT NULL DEFAULT 0.0,
    timestamp TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_usage_history_user_time
    ON usage_history(user_id, timestamp);
"""

TRANSACTION_ATTEMPTS = 5

_db_path: str = ""


def set_db_path(path: str):
    global _db_path
    _db_path = path


@asynccontextmanager
async def get_db():
    """Yield an aiosqlite connection with WAL mode."""
    db = await aiosqlite.connect(_db_path)
    db.row_factory = aiosqlite.Row
    await db.execute("PRAGMA journal_mode=WAL")
    try:
        yield db
    finally:
        await db.close()


async def init_db():
    """Create all tables if they don't exist."""
    async with get_db() as db:
        await db.executescript(SCHEMA_SQL)
        await db.commit()


def _is_write_conflict(exc: BaseException) -> bool:
    return isinstance(exc, sqlite3.OperationalError) and "locked" in str(exc)


async def run_transaction(work):
    """Run ``await work(db)`` inside one write transaction and return its result.

    ``BEGIN IMMEDIATE`` takes the write lock up front, so the read-modify-write
    in ``work`` cannot interleave with another writer. When the lock cannot be
    taken the whole transaction is retried from the start.
    """
    async for attempt in AsyncRetrying(
        retry=retry_if_exception(_is_write_conflict),
        stop=stop_after_attempt(TRANSACTION_ATTEMPTS),
        wait=wait_random_exponential(multiplier=0.05, max=1.0),
        reraise=True,
    ):
        with attempt:
            async with get_db() as db:
                await db.execute("BEGIN IMMEDIATE")
                try:
                    result = await work(db)
                except BaseException:
                    await db.rollback()
                    raise
                await db.commit()
                return result
