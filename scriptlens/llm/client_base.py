from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class RemoteModel:
    """A model as reported by the serving endpoint."""

    id: str
    owned_by: str = ""


class BaseGenerationClient(ABC):
    """Contract for provider-specific text-generation clients."""

    @abstractmethod
    async def list_models(self) -> list[RemoteModel]:
        """Return the models the endpoint currently serves.

        Raises:
            GenerationNetworkError: if the endpoint cannot be reached.
        """

    @abstractmethod
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
        """Return the completion text for a single prompt."""

    async def close(self) -> None:
        """Release transport resources, if any."""
