from unichat.config import Settings
from unichat.services.pricing import PriceTable


class CostTracker:
    def __init__(self, settings: Settings):
        self._prices = PriceTable.from_config(settings.pricing_config)

    @property
    def price_table(self) -> PriceTable:
        return self._prices

    def calculate_chat_cost(
        self, model_id: str, input_tokens: int, output_tokens: int
    ) -> float:
        """Calculate cost in USD for a chat completion (per 1M tokens).

        Raises UnknownPricing when no price entry matches the model.
        """
        pricing = self._prices.lookup(model_id)
        return (
            (input_tokens / 1_000_000) * pricing.input_cost_per_million
            + (output_tokens / 1_000_000) * pricing.output_cost_per_million
        )
