"""Example generation client adapter.

Use this module as a reference when implementing new provider adapters.
Implement BaseGenerationClient and register the provider in GenerationClientFactory.
"""

import json
from typing import ClassVar

from scriptlens.analysis.prompt_builder import TEST_EXPECTED_RESPONSE, TEST_PROMPT
from scriptlens.llm.client_base import BaseGenerationClient, RemoteModel


class ExampleGenerationClient(BaseGenerationClient):
    """Example adapter that returns fixed, well-formed analyses.

    No network calls. Useful for local development, tests, and as a template
    for building real provider adapters.
    """

    MODEL_ID: ClassVar[str] = "example"

    DEFAULT_SUMMARY: ClassVar[str] = (
        "## PLOT OVERVIEW\n"
        "A retired detective is pulled back into one last case when a string of "
        "disappearances mirrors the investigation that ended her career.\n\n"
        "## MAIN CHARACTERS\n"
        "SARAH - protagonist, a retired detective haunted by an unsolved case\n"
        "MARCUS - supporting role, her former partner now running the precinct\n\n"
        "## THEMES\n"
        "- Redemption and second chances\n"
        "- The cost of obsession\n\n"
        "## PRODUCTION NOTES\n"
        "- Night exterior location work in an urban setting requires permits\n"
        "- Small cast keeps the budget low, suitable for an independent production\n\n"
        "## GENRE\n"
        "Thriller\n\n"
        "## TONE AND STYLE\n"
        "Bleak, restrained and procedural with moments of dry humour.\n"
    )

    DEFAULT_JSON: ClassVar[dict[str, dict[str, object]]] = {
        "characters": {
            "characters": [
                {
                    "name": "SARAH",
                    "description": "A retired detective haunted by an unsolved case",
                    "importance": "protagonist",
                    "relationships": ["Former partner of MARCUS"],
                    "traits": ["stubborn", "observant"],
                }
            ]
        },
        "productionNotes": {
            "productionNotes": [
                {
                    "category": "location",
                    "content": "Night exteriors in a dense urban setting",
                    "priority": "high",
                    "budgetImpact": "moderate",
                    "requirements": ["Street filming permits"],
                }
            ]
        },
        "themes": {"themes": ["Redemption: a last chance to close an old wound"]},
    }

    def __init__(self) -> None:
        pass

    async def list_models(self) -> list[RemoteModel]:
        return [RemoteModel(id=self.MODEL_ID, owned_by="scriptlens")]

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
        _ = model, temperature, max_tokens, system_prompt
        if prompt == TEST_PROMPT:
            return TEST_EXPECTED_RESPONSE
        if json_output:
            for key, payload in self.DEFAULT_JSON.items():
                if f'"{key}"' in prompt:
                    return json.dumps(payload)
            return "{}"
        return self.DEFAULT_SUMMARY
