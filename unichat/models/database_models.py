from dataclasses import dataclass, asdict
from datetime import datetime


@dataclass
class UsageCounter:
    user_id: str
    request_count: int = 0
    total_tokens: int = 0
    total_cost: float = 0.0
    window_start: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_row(cls, row) -> "UsageCounter":
        return cls(
            user_id=row["user_id"],
            request_count=row["request_count"],
            total_tokens=row["total_tokens"],
            total_cost=row["total_cost"],
            window_start=datetime.fromisoformat(row["window_start"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class UsageHistoryRecord:
    user_id: str
    model_id: str
    input_tokens: int
    output_tokens: int
    cost: float
    timestamp: datetime

    @classmethod
    def from_row(cls, row) -> "UsageHistoryRecord":
        return cls(
            user_id=row["user_id"],
            model_id=row["model_id"],
            input_tokens=row["input_tokens"],
            output_tokens=row["output_tokens"],
            cost=row["cost"],
            timestamp=datetime.fromisoformat(row["timestamp"]),
        )

    def to_dict(self) -> dict:
        return asdict(self)
