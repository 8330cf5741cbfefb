"""Example interpretation client adapter.

Use this module as a reference when implementing new provider adapters.
Implement BaseInterpretationClient and register the provider in
InterpreterFactory.
"""

import json
from typing import Any, ClassVar

from portfolio_review.interpretation.client_base import BaseInterpretationClient


class ExampleClientAdapter(BaseInterpretationClient):
    """Adapter that replies with a fixed analysis without network calls.

    Used for local development, tests, and whenever no provider key is
    configured. The default reply is structured JSON; pass ``reply`` to
    simulate a free-text provider.
    """

    DEFAULT_RESPONSE: ClassVar[dict[str, Any]] = {
        "summary": (
            "This is a balanced portfolio with a mix of equity and debt funds. "
            "The portfolio has shown good performance over the past year with "
            "moderate risk."
        ),
        "currentValue": 298325,
        "annualReturn": 12.5,
        "riskLevel": "Moderate",
        "assetCount": 3,
        "recommendations": [
            "Consider increasing equity allocation for better long-term returns",
            "Rebalance your debt portfolio to include more corporate bonds",
            "Add more diversification with international equity funds",
            "Consider adding a gold ETF for hedging against market volatility",
            "Consolidate overlapping funds to reduce expense ratios",
            "Set up systematic investment plans for regular investments",
        ],
        "allocation": {"equity": 65, "debt": 25, "cash": 5, "others": 5},
    }

    def __init__(self, reply: str | None = None) -> None:
        self._reply = reply if reply is not None else json.dumps(self.DEFAULT_RESPONSE)

    async def create_chat_completion(
        self,
        *,
        model: str,
        temperature: float,
        system_prompt: str,
        user_prompt: str,
    ) -> str:
        _ = model, temperature, system_prompt, user_prompt
        return self._reply
