from abc import ABC, abstractmethod

from portfolio_review.interpretation.models import InterpretationResult


class BaseInterpreter(ABC):
    """Contract for the interpretation service."""

    @abstractmethod
    async def interpret(self, text: str) -> InterpretationResult:
        """Analyze extracted portfolio text.

        Args:
            text: Plain text extracted from the uploaded document.

        Returns:
            Free-text analysis or an Insight-shaped mapping.

        Raises:
            InterpretationError: on any failure.
        """
