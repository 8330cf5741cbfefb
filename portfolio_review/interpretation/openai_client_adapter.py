import httpx
import openai

from portfolio_review.interpretation.client_base import BaseInterpretationClient
from portfolio_review.interpretation.exceptions import (
    InterpretationError,
    InterpretationNetworkError,
)


class OpenAIClientAdapter(BaseInterpretationClient):
    """Interpretation client built on the OpenAI-compatible chat API."""

    def __init__(
        self,
        *,
        api_key: str,
        timeout_seconds: int,
        base_url: str | None = None,
    ) -> None:
        self._client: openai.AsyncOpenAI = openai.AsyncOpenAI(
            api_key=api_key,
            timeout=timeout_seconds,
            base_url=base_url,
        )

    async def create_chat_completion(
        self,
        *,
        model: str,
        temperature: float,
        system_prompt: str,
        user_prompt: str,
    ) -> str:
        try:
            response = await self._client.chat.completions.create(
                model=model,
                temperature=temperature,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
            )
        except (openai.APIConnectionError, httpx.ConnectError, httpx.TimeoutException) as exc:
            raise InterpretationNetworkError(
                f"AI provider network error: {exc}"
            ) from exc
        except openai.APIError as exc:
            raise InterpretationNetworkError(
                f"AI provider API error: {exc}"
            ) from exc

        if not response.choices:
            raise InterpretationError("AI returned no choices")
        content = response.choices[0].message.content
        if not content:
            raise InterpretationError("AI returned empty response")
        return content


class AzureOpenAIClientAdapter(OpenAIClientAdapter):
    """Interpretation client for an Azure OpenAI deployment.

    Azure addresses models by deployment name, so ``model`` passed to
    ``create_chat_completion`` must be the deployment.
    """

    def __init__(
        self,
        *,
        api_key: str,
        endpoint: str,
        api_version: str,
        timeout_seconds: int,
    ) -> None:
        self._client = openai.AsyncAzureOpenAI(
            api_key=api_key,
            azure_endpoint=endpoint,
            api_version=api_version,
            timeout=timeout_seconds,
        )
