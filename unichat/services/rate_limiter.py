import logging

from unichat.config import Settings
from unichat.errors import RateLimitExceeded
from unichat.services.usage_ledger import UsageLedger

logger = logging.getLogger(__name__)


class RateLimiter:
    """Rejects a user once their current usage window holds ``limit`` requests.

    The check reads the ledger outside the transaction that later records the
    request, so concurrent requests at ``limit - 1`` can all be admitted and
    overshoot the limit by the number of requests in flight.
    """

    def __init__(self, settings: Settings, ledger: UsageLedger):
        self._limit = settings.rate_limit_requests
        self._ledger = ledger

    async def check_and_admit(self, user_id: str):
        counter = await self._ledger.current_window(user_id)
        if counter is None or not self._ledger.is_window_active(counter):
            return
        if counter.request_count >= self._limit:
            logger.info(
                "Rate limit hit for user %s (%d requests)",
                user_id, counter.request_count,
            )
            raise RateLimitExceeded(user_id, self._limit)
