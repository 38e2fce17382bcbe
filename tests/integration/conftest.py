import pytest

from scriptlens.documents.registry import ProcessorRegistry
from scriptlens.llm.cancellation import OperationRegistry
from scriptlens.llm.example_client_adapter import ExampleGenerationClient
from scriptlens.llm.orchestrator import SummaryOrchestrator


@pytest.fixture()
def registry() -> ProcessorRegistry:
    return ProcessorRegistry()


@pytest.fixture()
def orchestrator() -> SummaryOrchestrator:
    """Orchestrator wired to the offline example client with no backoff."""
    return SummaryOrchestrator(
        client=ExampleGenerationClient(),
        model=ExampleGenerationClient.MODEL_ID,
        registry=OperationRegistry(),
        retry_base_delay=0,
    )
