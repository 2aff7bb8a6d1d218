import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from unichat.config import Settings
from unichat.database import get_db, run_transaction
from unichat.models.database_models import UsageCounter, UsageHistoryRecord

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _to_db(value: datetime) -> str:
    # Fixed-width ISO strings so that text comparison in SQL orders by time.
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


class UsageLedger:
    """Per-user hourly usage counter plus an append-only request history.

    The counter window is anchored at ``window_start`` and is only recomputed
    when a new request for that user is recorded; stale counters stay in the
    table untouched until then.
    """

    def __init__(
        self,
        settings: Settings,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._window = timedelta(seconds=settings.rate_limit_window_seconds)
        self._history_days = settings.history_days
        self._history_limit = settings.history_limit
        self._clock = clock or utcnow

    def is_window_active(self, counter: UsageCounter, now: datetime | None = None) -> bool:
        now = now or self._clock()
        return counter.window_start is not None and now - counter.window_start <= self._window

    async def current_window(self, user_id: str) -> UsageCounter | None:
        """Return the stored counter for ``user_id`` as-is, expired or not."""
        async with get_db() as db:
            cursor = await db.execute(
                "SELECT * FROM usage_counters WHERE user_id = ?", (user_id,)
            )
            row = await cursor.fetchone()
            return UsageCounter.from_row(row) if row else None

    async def record_usage(
        self,
        user_id: str,
        model_id: str,
        input_tokens: int,
        output_tokens: int,
        cost: float,
    ) -> UsageCounter:
        now = self._clock()
        tokens = input_tokens + output_tokens

        async def _apply(db) -> UsageCounter:
            cursor = await db.execute(
                "SELECT * FROM usage_counters WHERE user_id = ?", (user_id,)
            )
            row = await cursor.fetchone()
            existing = UsageCounter.from_row(row) if row else None

            if existing is None or not self.is_window_active(existing, now):
                counter = UsageCounter(
                    user_id=user_id,
                    request_count=1,
                    total_tokens=tokens,
                    total_cost=cost,
                    window_start=now,
                    updated_at=now,
                )
            else:
                counter = UsageCounter(
                    user_id=user_id,
                    request_count=existing.request_count + 1,
                    total_tokens=existing.total_tokens + tokens,
                    total_cost=existing.total_cost + cost,
                    window_start=existing.window_start,
                    updated_at=now,
                )

            await db.execute(
                """INSERT INTO usage_counters
                   (user_id, request_count, total_tokens, total_cost,
                    window_start, updated_at)
                   VALUES (?, ?, ?, ?, ?, ?)
                   ON CONFLICT(user_id) DO UPDATE SET
                    request_count = excluded.request_count,
                    total_tokens = excluded.total_tokens,
                    total_cost = excluded.total_cost,
                    window_start = excluded.window_start,
                    updated_at = excluded.updated_at""",
                (counter.user_id, counter.request_count, counter.total_tokens,
                 counter.total_cost, _to_db(counter.window_start), _to_db(now)),
            )
            return counter

        counter = await run_transaction(_apply)

        # The history append is not part of the counter transaction.
        try:
            await self.append_history(
                UsageHistoryRecord(
                    user_id=user_id,
                    model_id=model_id,
                    input_tokens=input_tokens,
                    output_tokens=output_tokens,
                    cost=cost,
                    timestamp=now,
                )
            )
        except Exception:
            logger.exception("Failed to append usage history for user %s", user_id)

        return counter

    async def append_history(self, record: UsageHistoryRecord):
        async with get_db() as db:
            await db.execute(
                """INSERT INTO usage_history
                   (user_id, model_id, input_tokens, output_tokens, cost, timestamp)
                   VALUES (?, ?, ?, ?, ?, ?)""",
                (record.user_id, record.model_id, record.input_tokens,
                 record.output_tokens, record.cost, _to_db(record.timestamp)),
            )
            await db.commit()

    async def get_history(
        self,
        user_id: str,
        days: int | None = None,
        limit: int | None = None,
    ) -> list[UsageHistoryRecord]:
        """Most recent records first, within the last ``days`` days."""
        days = self._history_days if days is None else days
        limit = self._history_limit if limit is None else limit
        cutoff = self._clock() - timedelta(days=days)
        async with get_db() as db:
            cursor = await db.execute(
                """SELECT * FROM usage_history
                   WHERE user_id = ? AND timestamp >= ?
                   ORDER BY timestamp DESC, id DESC
                   LIMIT ?""",
                (user_id, _to_db(cutoff), limit),
            )
            rows = await cursor.fetchall()
            return [UsageHistoryRecord.from_row(r) for r in rows]

    async def get_usage(self, user_id: str) -> dict:
        counter = await self.current_window(user_id)
        if counter is None:
            counter = UsageCounter(user_id=user_id)
        history = await self.get_history(user_id)
        return {
            "current": counter.to_dict(),
            "history": [r.to_dict() for r in history],
        }
