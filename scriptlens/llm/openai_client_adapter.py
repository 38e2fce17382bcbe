import httpx
import openai

from scriptlens.llm.client_base import BaseGenerationClient, RemoteModel
from scriptlens.llm.exceptions import (
    EmptyResponseError,
    GenerationNetworkError,
    ModelNotFoundError,
)


class OpenAIGenerationClient(BaseGenerationClient):
    """Generation client built on the OpenAI-compatible chat API (Ollama serves /v1)."""

    def __init__(
        self,
        *,
        api_key: str,
        timeout_seconds: int,
        base_url: str | None = None,
    ) -> None:
        self._client = openai.AsyncOpenAI(
            api_key=api_key,
            timeout=timeout_seconds,
            base_url=base_url,
            max_retries=0,
        )

    async def list_models(self) -> list[RemoteModel]:
        try:
            page = await self._client.models.list()
        except (openai.APIConnectionError, httpx.ConnectError, httpx.TimeoutException) as exc:
            raise GenerationNetworkError(f"Model endpoint network error: {exc}") from exc
        except openai.APIError as exc:
            raise GenerationNetworkError(f"Model endpoint API error: {exc}") from exc
        return [RemoteModel(id=m.id, owned_by=getattr(m, "owned_by", "") or "") for m in page.data]

    async def generate(
        self,
        *,
        model: str,
        prompt: str,
        temperature: float,
        max_tokens: int,
        system_prompt: str = "",
        json_output: bool = False,
    ) -> str:
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})
        extra = {"response_format": {"type": "json_object"}} if json_output else {}

        try:
            response = await self._client.chat.completions.create(
                model=model,
                temperature=temperature,
                max_tokens=max_tokens,
                messages=messages,
                **extra,
            )
        except openai.NotFoundError as exc:
            raise ModelNotFoundError(f"Model {model} not found: {exc}") from exc
        except (openai.APIConnectionError, httpx.ConnectError, httpx.TimeoutException) as exc:
            raise GenerationNetworkError(f"Model endpoint network error: {exc}") from exc
        except openai.APIError as exc:
            raise GenerationNetworkError(f"Model endpoint API error: {exc}") from exc

        if not response.choices:
            raise EmptyResponseError("Model returned no choices")
        content = response.choices[0].message.content
        if not content or not content.strip():
            raise EmptyResponseError("Model returned empty response")
        return content

    async def close(self) -> None:
        await self._client.close()
