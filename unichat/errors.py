"""Error taxonomy shared by the services and the HTTP layer.

Every error carries a stable ``code`` so that clients can branch on the kind
of failure (quota vs. model vs. provider) instead of parsing messages.
"""


class ChatServiceError(Exception):
    code = "internal"
    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def to_dict(self) -> dict:
        return {"error": {"code": self.code, "message": self.message}}


class Unauthenticated(ChatServiceError):
    code = "unauthenticated"
    status_code = 401

    def __init__(self, message: str = "User must be authenticated"):
        super().__init__(message)


class InvalidArgument(ChatServiceError):
    code = "invalid_argument"
    status_code = 400


class RateLimitExceeded(ChatServiceError):
    code = "rate_limit_exceeded"
    status_code = 429

    def __init__(self, user_id: str, limit: int = 100):
        self.user_id = user_id
        self.limit = limit
        super().__init__(
            f"Rate limit exceeded. Maximum {limit} requests per hour."
        )


class UnsupportedModel(ChatServiceError):
    code = "unsupported_model"
    status_code = 400

    def __init__(self, model_id: str):
        self.model_id = model_id
        super().__init__(f"Unsupported model: {model_id}")


class ProviderError(ChatServiceError):
    code = "provider_error"
    status_code = 502

    def __init__(self, provider: str, detail: str):
        self.provider = provider
        self.detail = detail
        super().__init__(f"{provider} request failed: {detail}")

    def to_dict(self) -> dict:
        body = super().to_dict()
        body["error"]["provider"] = self.provider
        return body


class UnknownPricing(ChatServiceError):
    code = "unknown_pricing"
    status_code = 500

    def __init__(self, model_id: str):
        self.model_id = model_id
        super().__init__(f"No pricing configured for model: {model_id}")


class NotFound(ChatServiceError):
    code = "not_found"
    status_code = 404


class PermissionDenied(ChatServiceError):
    code = "permission_denied"
    status_code = 403


class ConfigurationError(ChatServiceError):
    """Raised at startup when the model catalog and price table disagree."""

    code = "configuration_error"
