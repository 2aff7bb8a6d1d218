import logging

from unichat.errors import InvalidArgument, Unauthenticated
from unichat.models.schemas import ChatRequest, ChatResult, TokenUsage
from unichat.services.cost_tracker import CostTracker
from unichat.services.llm_router import LLMRouter
from unichat.services.rate_limiter import RateLimiter
from unichat.services.usage_ledger import UsageLedger

logger = logging.getLogger(__name__)


class ChatOrchestrator:
    """Runs one chat request end to end.

    Stages run in a fixed order: validate, rate check, route, execute,
    compute cost, record usage. Any failure before usage recording aborts the
    request with its own error; nothing is retried.
    """

    def __init__(
        self,
        llm_router: LLMRouter,
        cost_tracker: CostTracker,
        ledger: UsageLedger,
        rate_limiter: RateLimiter,
    ):
        self._router = llm_router
        self._cost_tracker = cost_tracker
        self._ledger = ledger
        self._rate_limiter = rate_limiter

    async def handle(self, user_id: str | None, request: ChatRequest) -> ChatResult:
        if not user_id:
            raise Unauthenticated()
        self._validate(request)

        await self._rate_limiter.check_and_admit(user_id)

        provider = self._router.route(request.model_id)
        response = await provider.chat(
            messages=[m.model_dump() for m in request.messages],
            model=request.model_id,
            temperature=request.temperature,
            max_tokens=request.max_tokens,
        )

        cost = self._cost_tracker.calculate_chat_cost(
            request.model_id, response.input_tokens, response.output_tokens
        )

        try:
            await self._ledger.record_usage(
                user_id=user_id,
                model_id=request.model_id,
                input_tokens=response.input_tokens,
                output_tokens=response.output_tokens,
                cost=cost,
            )
        except Exception:
            # The provider call is already paid for; deliver the response anyway.
            logger.exception("Failed to record usage for user %s", user_id)

        return ChatResult(
            content=response.text,
            model_id=request.model_id,
            usage=TokenUsage(
                input_tokens=response.input_tokens,
                output_tokens=response.output_tokens,
                total_tokens=response.input_tokens + response.output_tokens,
            ),
        )

    @staticmethod
    def _validate(request: ChatRequest):
        if not request.model_id or not request.model_id.strip():
            raise InvalidArgument("model_id is required")
        if not request.messages:
            raise InvalidArgument("messages must be a non-empty list")
