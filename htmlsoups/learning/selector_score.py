"""
Selector score model.

Tracks one selector's record for a content-type and the multiplicative
confidence update applied on every reported outcome.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

SUCCESS_FACTOR = 1.1
FAILURE_FACTOR = 0.9


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class SelectorCandidate:
    """A CSS selector with its confidence and usage counters."""

    selector: str
    confidence: float = 1.0
    success_count: int = 0
    total_attempts: int = 0
    last_used: datetime = field(default_factory=_utcnow)

    def __post_init__(self) -> None:
        if self.success_count < 0 or self.total_attempts < 0:
            raise ValueError("Selector counters must be non-negative")
        if self.success_count > self.total_attempts:
            raise ValueError(
                f"success_count ({self.success_count}) exceeds "
                f"total_attempts ({self.total_attempts}) for {self.selector!r}"
            )

    @property
    def success_rate(self) -> float:
        """Fraction of attempts that succeeded; 0.0 before any attempt."""
        if self.total_attempts == 0:
            return 0.0
        return self.success_count / self.total_attempts

    def updated(self, success: bool) -> "SelectorCandidate":
        """
        Return a new candidate reflecting one more attempt.

        Confidence grows by 10% on success and shrinks by 10% on failure,
        so it approaches zero under repeated failure but never goes negative.
        """
        return SelectorCandidate(
            selector=self.selector,
            confidence=self.confidence * (SUCCESS_FACTOR if success else FAILURE_FACTOR),
            success_count=self.success_count + (1 if success else 0),
            total_attempts=self.total_attempts + 1,
            last_used=_utcnow(),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "selector": self.selector,
            "confidence": self.confidence,
            "success_count": self.success_count,
            "total_attempts": self.total_attempts,
            "last_used": self.last_used.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SelectorCandidate":
        """Create from dictionary."""
        last_used = data.get("last_used")
        if isinstance(last_used, str):
            last_used = datetime.fromisoformat(last_used)
        else:
            last_used = _utcnow()

        return cls(
            selector=data["selector"],
            confidence=float(data.get("confidence", 1.0)),
            success_count=int(data.get("success_count", 0)),
            total_attempts=int(data.get("total_attempts", 0)),
            last_used=last_used,
        )
