from scriptlens.llm.client_base import BaseGenerationClient
from scriptlens.llm.factory import GenerationClientFactory
from scriptlens.llm.orchestrator import SummaryOrchestrator

__all__ = ["BaseGenerationClient", "GenerationClientFactory", "SummaryOrchestrator"]
