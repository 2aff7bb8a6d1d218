from dataclasses import dataclass
from enum import Enum

from unichat.errors import ConfigurationError, UnknownPricing, UnsupportedModel


class ModelFamily(str, Enum):
    """Closed set of provider families the router can dispatch to."""

    ANTHROPIC = "anthropic"
    OPENAI = "openai"
    GOOGLE = "google"


FAMILY_PREFIXES: dict[str, ModelFamily] = {
    "claude-": ModelFamily.ANTHROPIC,
    "gpt-": ModelFamily.OPENAI,
    "gemini-": ModelFamily.GOOGLE,
}

FAMILY_DISPLAY_NAMES = {
    ModelFamily.ANTHROPIC: "Anthropic",
    ModelFamily.OPENAI: "OpenAI",
    ModelFamily.GOOGLE: "Google",
}


def classify_model(model_id: str) -> ModelFamily:
    for prefix, family in FAMILY_PREFIXES.items():
        if model_id.startswith(prefix):
            return family
    raise UnsupportedModel(model_id)


@dataclass(frozen=True)
class PriceEntry:
    prefix: str
    input_cost_per_million: float
    output_cost_per_million: float


class PriceTable:
    """Per-million-token prices keyed by model id prefix.

    Lookups pick the longest prefix that matches, so ``claude-3-opus`` beats
    ``claude-`` while any other Claude model still falls back to the family
    price.
    """

    def __init__(self, entries: list[PriceEntry]):
        for entry in entries:
            if entry.input_cost_per_million < 0 or entry.output_cost_per_million < 0:
                raise ConfigurationError(
                    f"Negative price configured for prefix '{entry.prefix}'"
                )
        self._entries = sorted(entries, key=lambda e: len(e.prefix), reverse=True)

    @classmethod
    def from_config(cls, pricing_config: list[dict]) -> "PriceTable":
        return cls([
            PriceEntry(
                prefix=item["prefix"],
                input_cost_per_million=float(item.get("input", 0.0)),
                output_cost_per_million=float(item.get("output", 0.0)),
            )
            for item in pricing_config
        ])

    def lookup(self, model_id: str) -> PriceEntry:
        for entry in self._entries:
            if model_id.startswith(entry.prefix):
                return entry
        raise UnknownPricing(model_id)


def build_catalog(models_config: list[dict], price_table: PriceTable) -> list[dict]:
    """Derive the public model list from the configured models and prices.

    Fails loudly when a configured model has no provider family or no price,
    rather than publishing a model the router or cost calculator cannot serve.
    """
    catalog = []
    for model_cfg in models_config:
        model_id = model_cfg["id"]
        try:
            family = classify_model(model_id)
            price = price_table.lookup(model_id)
        except (UnsupportedModel, UnknownPricing) as e:
            raise ConfigurationError(
                f"Catalog model '{model_id}' is misconfigured: {e.message}"
            ) from e
        catalog.append({
            "id": model_id,
            "name": model_cfg.get("name", model_id),
            "provider": FAMILY_DISPLAY_NAMES[family],
            "description": model_cfg.get("description", ""),
            "input_cost": price.input_cost_per_million,
            "output_cost": price.output_cost_per_million,
            "max_tokens": model_cfg.get("max_tokens", 4096),
        })
    return catalog
