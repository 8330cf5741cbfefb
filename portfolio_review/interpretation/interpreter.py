"""AI-powered portfolio interpreter."""

import json
from pathlib import Path
from typing import Any

from portfolio_review.interpretation.base import BaseInterpreter
from portfolio_review.interpretation.client_base import BaseInterpretationClient
from portfolio_review.interpretation.exceptions import InterpretationError
from portfolio_review.interpretation.models import InterpretationResult
from portfolio_review.interpretation.prompt_loader import (
    load_prompt_template,
    load_system_prompt,
)
from portfolio_review.logging.logger import Log


class Interpreter(BaseInterpreter):
    """Asks a chat model to analyze extracted portfolio text.

    A reply that is a JSON object is returned as structured data; anything else
    is returned as free text for the text parser.
    """

    def __init__(
        self,
        *,
        client: BaseInterpretationClient,
        model: str,
        temperature: float = 0.2,
        max_input_chars: int = 20000,
        prompt_template_path: Path | None = None,
        system_prompt_path: Path | None = None,
    ) -> None:
        self._client = client
        self._model = model
        self._temperature = max(0.0, min(1.0, temperature))
        self._max_input_chars = max_input_chars
        self._prompt_template = load_prompt_template(prompt_template_path)
        self._system_prompt = load_system_prompt(system_prompt_path)

    async def interpret(self, text: str) -> InterpretationResult:
        if not text.strip():
            raise InterpretationError("Nothing to interpret: document text is empty")

        prompt = self._build_prompt(text)
        Log.debug(f"Interpretation prompt:\n{prompt}")

        raw_response = await self._client.create_chat_completion(
            model=self._model,
            temperature=self._temperature,
            system_prompt=self._system_prompt,
            user_prompt=prompt,
        )
        Log.debug(f"AI raw response:\n{raw_response}")

        structured = self._parse_json_object(raw_response)
        if structured is not None:
            Log.info("Interpretation returned structured insights")
            return InterpretationResult(structured=structured)

        Log.info(f"Interpretation returned {len(raw_response)} chars of analysis text")
        return InterpretationResult(text=raw_response)

    def _build_prompt(self, text: str) -> str:
        if len(text) > self._max_input_chars:
            Log.warning(
                f"Truncating document text from {len(text)} to {self._max_input_chars} chars"
            )
            text = text[: self._max_input_chars]
        return self._prompt_template.replace("{portfolio_text}", text)

    @staticmethod
    def _parse_json_object(raw: str) -> dict[str, Any] | None:
        cleaned = raw.strip()
        if cleaned.startswith("```"):
            lines = cleaned.splitlines()
            if lines and lines[0].startswith("```"):
                lines = lines[1:]
            if lines and lines[-1].strip() == "```":
                lines = lines[:-1]
            cleaned = "\n".join(lines).strip()

        if not cleaned.startswith("{"):
            return None
        try:
            parsed = json.loads(cleaned)
        except json.JSONDecodeError:
            return None
        return parsed if isinstance(parsed, dict) else None
