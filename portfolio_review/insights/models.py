from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class RiskLevel(str, Enum):
    LOW = "Low"
    MODERATE = "Moderate"
    HIGH = "High"


@dataclass(frozen=True)
class Allocation:
    """Asset allocation percentages. No sum-to-100 constraint is applied."""

    equity: float = 0.0
    debt: float = 0.0
    cash: float = 0.0
    others: float = 0.0

    def to_dict(self) -> dict[str, float]:
        return {
            "equity": self.equity,
            "debt": self.debt,
            "cash": self.cash,
            "others": self.others,
        }


@dataclass(frozen=True)
class Insight:
    """Structured analysis result attached to a completed session."""

    summary: str
    current_value: float = 0.0
    annual_return: float = 0.0
    risk_level: RiskLevel = RiskLevel.MODERATE
    asset_count: int = 0
    allocation: Allocation = field(default_factory=Allocation)
    recommendations: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Render the camelCase JSON shape served to polling clients."""
        return {
            "summary": self.summary,
            "currentValue": self.current_value,
            "annualReturn": self.annual_return,
            "riskLevel": self.risk_level.value,
            "assetCount": self.asset_count,
            "allocation": self.allocation.to_dict(),
            "recommendations": list(self.recommendations),
        }
