from functools import lru_cache
from typing import Optional

from fastapi import Depends, Header

from unichat.config import Settings, get_settings
from unichat.errors import Unauthenticated
from unichat.services.chat_orchestrator import ChatOrchestrator
from unichat.services.cost_tracker import CostTracker
from unichat.services.llm_router import LLMRouter, build_providers
from unichat.services.rate_limiter import RateLimiter
from unichat.services.usage_ledger import UsageLedger


def get_current_user(x_user_id: Optional[str] = Header(default=None)) -> str:
    """Trust the user id forwarded by the identity provider."""
    if not x_user_id or not x_user_id.strip():
        raise Unauthenticated()
    return x_user_id.strip()


@lru_cache
def _get_providers():
    return build_providers(get_settings())


def get_llm_router(settings: Settings = Depends(get_settings)) -> LLMRouter:
    return LLMRouter(settings, providers=_get_providers())


def get_cost_tracker(settings: Settings = Depends(get_settings)) -> CostTracker:
    return CostTracker(settings)


def get_usage_ledger(settings: Settings = Depends(get_settings)) -> UsageLedger:
    return UsageLedger(settings)


def get_rate_limiter(
    settings: Settings = Depends(get_settings),
    ledger: UsageLedger = Depends(get_usage_ledger),
) -> RateLimiter:
    return RateLimiter(settings, ledger)


def get_chat_orchestrator(
    llm_router: LLMRouter = Depends(get_llm_router),
    cost_tracker: CostTracker = Depends(get_cost_tracker),
    ledger: UsageLedger = Depends(get_usage_ledger),
    rate_limiter: RateLimiter = Depends(get_rate_limiter),
) -> ChatOrchestrator:
    return ChatOrchestrator(llm_router, cost_tracker, ledger, rate_limiter)
