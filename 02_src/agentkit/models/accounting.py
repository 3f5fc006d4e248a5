"""Token usage and accounting data models."""

from dataclasses import dataclass, field
from datetime import datetime

from .timestamps import from_iso, to_iso, utc_now


@dataclass
class TokenUsage:
    """Token counts for one invocation (or an aggregate of many)."""

    input_tokens: int = 0
    output_tokens: int = 0
    total_tokens: int = 0
    cost: float | None = None  # USD

    def to_dict(self) -> dict:
        return {
            "input_tokens": self.input_tokens,
            "output_tokens": self.output_tokens,
            "total_tokens": self.total_tokens,
            "cost": self.cost,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "TokenUsage":
        return cls(
            input_tokens=int(data.get("input_tokens", 0)),
            output_tokens=int(data.get("output_tokens", 0)),
            total_tokens=int(data.get("total_tokens", 0)),
            cost=data.get("cost"),
        )


@dataclass
class Budget:
    """Daily token budget."""

    daily_limit: int
    warning_fraction: float = 0.8
    enabled: bool = True

    def to_dict(self) -> dict:
        return {
            "daily_limit": self.daily_limit,
            "warning_fraction": self.warning_fraction,
            "enabled": self.enabled,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Budget":
        return cls(
            daily_limit=int(data["daily_limit"]),
            warning_fraction=float(data.get("warning_fraction", 0.8)),
            enabled=bool(data.get("enabled", True)),
        )


@dataclass
class AccountingSnapshot:
    """Process-wide token and cost totals."""

    total_input_tokens: int = 0
    total_output_tokens: int = 0
    total_tokens: int = 0
    total_cost: float = 0.0
    session_count: int = 0
    by_role: dict[str, TokenUsage] = field(default_factory=dict)
    last_updated: datetime = field(default_factory=utc_now)
    session_started_at: datetime = field(default_factory=utc_now)
    last_reset_at: datetime = field(default_factory=utc_now)
    daily_tokens: int = 0
    daily_reset_at: datetime | None = None
    budget: Budget | None = None

    def to_dict(self) -> dict:
        return {
            "total_input_tokens": self.total_input_tokens,
            "total_output_tokens": self.total_output_tokens,
            "total_tokens": self.total_tokens,
            "total_cost": self.total_cost,
            "session_count": self.session_count,
            "by_role": {role: usage.to_dict() for role, usage in self.by_role.items()},
            "last_updated": to_iso(self.last_updated),
            "session_started_at": to_iso(self.session_started_at),
            "last_reset_at": to_iso(self.last_reset_at),
            "daily_tokens": self.daily_tokens,
            "daily_reset_at": to_iso(self.daily_reset_at),
            "budget": self.budget.to_dict() if self.budget else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "AccountingSnapshot":
        """Build a snapshot from persisted data; missing fields take defaults."""
        now = utc_now()
        budget = data.get("budget")
        return cls(
            total_input_tokens=int(data.get("total_input_tokens", 0)),
            total_output_tokens=int(data.get("total_output_tokens", 0)),
            total_tokens=int(data.get("total_tokens", 0)),
            total_cost=float(data.get("total_cost", 0.0)),
            session_count=int(data.get("session_count", 0)),
            by_role={
                role: TokenUsage.from_dict(usage)
                for role, usage in (data.get("by_role") or {}).items()
            },
            last_updated=from_iso(data.get("last_updated")) or now,
            session_started_at=from_iso(data.get("session_started_at")) or now,
            last_reset_at=from_iso(data.get("last_reset_at")) or now,
            daily_tokens=int(data.get("daily_tokens", 0)),
            daily_reset_at=from_iso(data.get("daily_reset_at")),
            budget=Budget.from_dict(budget) if budget else None,
        )
