import asyncio
import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from scriptlens.analysis.exceptions import AnalysisValidationError
from scriptlens.analysis.models import AnalysisOptions, ParsedResponse
from scriptlens.analysis.prompt_builder import TEST_EXPECTED_RESPONSE
from scriptlens.analysis.response_parser import ResponseParser
from scriptlens.config.settings import Settings
from scriptlens.llm.client_base import BaseGenerationClient, RemoteModel
from scriptlens.llm.example_client_adapter import ExampleGenerationClient
from scriptlens.llm.exceptions import (
    EmptyResponseError,
    GenerationCancelledError,
    GenerationNetworkError,
    ModelNotFoundError,
    NoModelSelectedError,
    ServiceUnavailableError,
)
from scriptlens.llm.models import GenerationProgress, GenerationStage
from scriptlens.llm.orchestrator import (
    SummaryOrchestrator,
    describe_model,
    estimate_parameter_count,
    quality_score,
)

SCRIPT = "SARAH: I told you I was done.\nMARCUS (V.O.): Then why come back?"
SUMMARY_TEXT = ExampleGenerationClient.DEFAULT_SUMMARY


def _make_client(models: list[str] | None = None) -> AsyncMock:
    client = AsyncMock(spec=BaseGenerationClient)
    client.list_models.return_value = [RemoteModel(m) for m in (models or ["llama3:8b"])]
    return client


def _make_orchestrator(client: AsyncMock, **kwargs: object) -> SummaryOrchestrator:
    params: dict[str, object] = {"model": "llama3:8b", "retry_base_delay": 0}
    params.update(kwargs)
    return SummaryOrchestrator(client=client, **params)


class TestHelpers:
    @pytest.mark.parametrize(
        ("model_id", "expected"),
        [("codellama:13b", "13B"), ("mistral:7b-instruct", "7B"), ("llama3:8b", "Unknown")],
    )
    def test_estimate_parameter_count(self, model_id: str, expected: str) -> None:
        assert estimate_parameter_count(model_id) == expected

    def test_describe_model(self) -> None:
        info = describe_model(RemoteModel("codellama:13b"))
        assert info.version == "13b"
        assert info.parameter_count == "13B"
        assert info.capabilities == ["text_analysis", "structured_output", "code_understanding"]
        assert describe_model(RemoteModel("mistral")).version == "latest"

    def test_quality_score(self) -> None:
        assert quality_score("  Hello, I am working correctly. ", TEST_EXPECTED_RESPONSE) == 1.0
        assert quality_score("I am working", "I am working correctly") == 0.75


class TestServiceAndModels:
    def test_service_status_running(self) -> None:
        status = asyncio.run(_make_orchestrator(_make_client(["a", "b"])).service_status())
        assert status.is_running
        assert status.available_models == 2
        assert status.warnings == []

    def test_service_status_down(self) -> None:
        client = _make_client()
        client.list_models.side_effect = GenerationNetworkError("refused")
        orchestrator = _make_orchestrator(client)
        status = asyncio.run(orchestrator.service_status())
        assert not status.is_running
        assert status.warnings == ["Service connection failed: refused"]
        assert asyncio.run(orchestrator.is_available()) is False

    def test_list_models_propagates_errors(self) -> None:
        client = _make_client()
        client.list_models.side_effect = GenerationNetworkError("refused")
        with pytest.raises(GenerationNetworkError):
            asyncio.run(_make_orchestrator(client).list_models())

    def test_set_active_model(self) -> None:
        orchestrator = _make_orchestrator(_make_client(["llama3:8b", "mistral"]), model=None)
        assert asyncio.run(orchestrator.current_model()) is None
        asyncio.run(orchestrator.set_active_model("mistral"))
        current = asyncio.run(orchestrator.current_model())
        assert current is not None
        assert current.id == "mistral"

    def test_set_unknown_model(self) -> None:
        with pytest.raises(ModelNotFoundError, match="Model gpt-9 not found"):
            asyncio.run(_make_orchestrator(_make_client()).set_active_model("gpt-9"))

    def test_test_model_success(self) -> None:
        client = _make_client()
        client.generate.return_value = TEST_EXPECTED_RESPONSE
        result = asyncio.run(_make_orchestrator(client).test_model("llama3:8b"))
        assert result.success
        assert result.quality_score == 1.0
        assert result.response_time_ms >= 1.0
        assert client.generate.call_args.kwargs["temperature"] == 0.1
        assert client.generate.call_args.kwargs["max_tokens"] == 50

    def test_test_model_failure(self) -> None:
        client = _make_client()
        client.generate.side_effect = ModelNotFoundError("Model x not found")
        result = asyncio.run(_make_orchestrator(client).test_model("x"))
        assert not result.success
        assert result.error == "Model x not found"

    def test_close(self) -> None:
        client = _make_client()
        asyncio.run(_make_orchestrator(client).close())
        client.close.assert_awaited_once()

    def test_from_settings(self) -> None:
        env = {"LLM_PROVIDER": "example", "LLM_MODEL_NAME": "example", "LLM_MAX_RETRIES": "1"}
        with patch.dict("os.environ", env, clear=True):
            orchestrator = SummaryOrchestrator.from_settings(Settings(_env_file=None))
        summary = asyncio.run(orchestrator.generate_summary(SCRIPT, AnalysisOptions()))
        assert summary.model_used == "example"


class TestGenerateSummary:
    def test_happy_path_reports_progress(self) -> None:
        client = _make_client()
        client.generate.return_value = SUMMARY_TEXT
        orchestrator = _make_orchestrator(client)
        events: list[GenerationProgress] = []

        summary = asyncio.run(
            orchestrator.generate_summary(
                SCRIPT, AnalysisOptions(), operation_id="op_test", on_progress=events.append
            )
        )

        assert summary.genre == "Thriller"
        assert summary.model_used == "llama3:8b"
        assert [e.stage for e in events] == [
            GenerationStage.INITIALIZING,
            GenerationStage.ANALYZING_CONTENT,
            GenerationStage.EXTRACTING_PLOT,
            GenerationStage.FINALIZING,
            GenerationStage.COMPLETE,
        ]
        assert [e.progress for e in events] == [0, 10, 30, 90, 100]
        assert {e.operation_id for e in events} == {"op_test"}
        assert events[-1].cancellable is False
        assert orchestrator.registry.active_operations() == []

    def test_uses_defaults_and_option_overrides(self) -> None:
        client = _make_client()
        client.generate.return_value = SUMMARY_TEXT
        orchestrator = _make_orchestrator(client, default_temperature=0.6, default_max_tokens=900)

        asyncio.run(orchestrator.generate_summary(SCRIPT, AnalysisOptions()))
        kwargs = client.generate.call_args.kwargs
        assert (kwargs["model"], kwargs["temperature"], kwargs["max_tokens"]) == ("llama3:8b", 0.6, 900)
        assert SCRIPT in kwargs["prompt"]

        asyncio.run(
            orchestrator.generate_summary(SCRIPT, AnalysisOptions(temperature=0.0, max_tokens=300))
        )
        kwargs = client.generate.call_args.kwargs
        assert (kwargs["temperature"], kwargs["max_tokens"]) == (0.0, 300)

    def test_service_unavailable(self) -> None:
        client = _make_client()
        client.list_models.side_effect = GenerationNetworkError("refused")
        with pytest.raises(ServiceUnavailableError, match="Generation service is not available"):
            asyncio.run(_make_orchestrator(client).generate_summary(SCRIPT, AnalysisOptions()))
        client.generate.assert_not_called()

    def test_no_model_selected(self) -> None:
        client = _make_client()
        with pytest.raises(NoModelSelectedError, match="No model selected"):
            asyncio.run(
                _make_orchestrator(client, model=None).generate_summary(SCRIPT, AnalysisOptions())
            )
        client.generate.assert_not_called()

    def test_transient_errors_are_retried(self) -> None:
        client = _make_client()
        client.generate.side_effect = [
            GenerationNetworkError("blip"),
            EmptyResponseError("Model returned empty response"),
            SUMMARY_TEXT,
        ]
        summary = asyncio.run(_make_orchestrator(client).generate_summary(SCRIPT, AnalysisOptions()))
        assert summary.genre == "Thriller"
        assert client.generate.await_count == 3

    def test_transport_exhaustion_is_terminal(self) -> None:
        client = _make_client()
        client.generate.side_effect = GenerationNetworkError("down")
        orchestrator = _make_orchestrator(client, max_retries=2)
        events: list[GenerationProgress] = []
        with pytest.raises(GenerationNetworkError, match="down"):
            asyncio.run(
                orchestrator.generate_summary(SCRIPT, AnalysisOptions(), on_progress=events.append)
            )
        assert client.generate.await_count == 3
        assert events[-1].stage == GenerationStage.ERROR
        assert orchestrator.registry.active_operations() == []

    def test_model_not_found_is_not_retried(self) -> None:
        client = _make_client()
        client.generate.side_effect = ModelNotFoundError("Model llama3:8b not found")
        with pytest.raises(ModelNotFoundError):
            asyncio.run(_make_orchestrator(client).generate_summary(SCRIPT, AnalysisOptions()))
        assert client.generate.await_count == 1

    def test_parse_failures_end_in_fallback(self) -> None:
        client = _make_client()
        client.generate.side_effect = ["first", "second", "third"]
        parser = MagicMock(spec=ResponseParser)
        parser.parse_with_retry.return_value = ParsedResponse(success=False, error="bad format")
        fallback = ResponseParser().parse_with_fallback("third", SCRIPT, AnalysisOptions(), "m")
        parser.parse_with_fallback.return_value = fallback
        orchestrator = _make_orchestrator(client, parser=parser, max_retries=2)

        summary = asyncio.run(orchestrator.generate_summary(SCRIPT, AnalysisOptions()))

        assert summary is fallback.summary
        assert [c.kwargs["retry_count"] for c in parser.parse_with_retry.call_args_list] == [0, 1, 2]
        assert parser.parse_with_fallback.call_args.args[0] == "third"
        assert client.generate.await_count == 3

    def test_early_parse_failure_degrades_without_regenerating(self) -> None:
        client = _make_client()
        client.generate.return_value = "unusable"
        with patch.object(ResponseParser, "_parse_sections", side_effect=RuntimeError("boom")):
            summary = asyncio.run(
                _make_orchestrator(client).generate_summary(SCRIPT, AnalysisOptions())
            )
        assert summary.plot_overview == "unusable"
        assert [c.name for c in summary.main_characters] == ["SARAH", "MARCUS"]
        assert client.generate.await_count == 1

    def test_cancellation(self) -> None:
        client = _make_client()
        started = asyncio.Event()

        async def hang(**_: object) -> str:
            started.set()
            await asyncio.Event().wait()
            return ""

        client.generate.side_effect = hang
        orchestrator = _make_orchestrator(client)
        events: list[GenerationProgress] = []

        async def scenario() -> None:
            run = asyncio.create_task(
                orchestrator.generate_summary(
                    SCRIPT, AnalysisOptions(), operation_id="op_cancel", on_progress=events.append
                )
            )
            await started.wait()
            assert orchestrator.registry.active_operations() == ["op_cancel"]
            assert orchestrator.cancel("op_cancel") is True
            with pytest.raises(GenerationCancelledError, match="op_cancel"):
                await run

        asyncio.run(scenario())
        assert events[-1].stage == GenerationStage.CANCELLED
        assert orchestrator.registry.active_operations() == []
        assert client.generate.await_count == 1

    def test_duplicate_operation_id_is_rejected_without_generating(self) -> None:
        client = _make_client()
        started = asyncio.Event()
        release = asyncio.Event()

        async def wait_for_release(**_: object) -> str:
            started.set()
            await release.wait()
            return SUMMARY_TEXT

        client.generate.side_effect = wait_for_release
        orchestrator = _make_orchestrator(client)

        async def scenario() -> None:
            first = asyncio.create_task(
                orchestrator.generate_summary(SCRIPT, AnalysisOptions(), operation_id="op_dup")
            )
            await started.wait()
            with pytest.raises(ValueError, match="op_dup"):
                await orchestrator.generate_summary(
                    SCRIPT, AnalysisOptions(), operation_id="op_dup"
                )
            assert orchestrator.registry.active_operations() == ["op_dup"]
            release.set()
            summary = await first
            assert summary.genre == "Thriller"

        asyncio.run(scenario())
        assert client.generate.await_count == 1
        assert orchestrator.registry.active_operations() == []

    def test_cancel_unknown_operation(self) -> None:
        assert _make_orchestrator(_make_client()).cancel("op_nope") is False

    def test_outer_cancellation_propagates(self) -> None:
        client = _make_client()
        started = asyncio.Event()

        async def hang(**_: object) -> str:
            started.set()
            await asyncio.Event().wait()
            return ""

        client.generate.side_effect = hang
        orchestrator = _make_orchestrator(client)

        async def scenario() -> None:
            run = asyncio.create_task(orchestrator.generate_summary(SCRIPT, AnalysisOptions()))
            await started.wait()
            run.cancel()
            with pytest.raises(asyncio.CancelledError):
                await run

        asyncio.run(scenario())
        assert orchestrator.registry.active_operations() == []


class TestSubAnalyses:
    def test_analyze_characters(self) -> None:
        client = _make_client()
        client.generate.return_value = json.dumps(
            {"characters": [{"name": "SARAH", "importance": "protagonist"}]}
        )
        events: list[GenerationProgress] = []
        characters = asyncio.run(
            _make_orchestrator(client).analyze_characters(SCRIPT, on_progress=events.append)
        )
        assert [c.name for c in characters] == ["SARAH"]
        assert client.generate.call_args.kwargs["json_output"] is True
        assert [e.stage for e in events] == [
            GenerationStage.INITIALIZING,
            GenerationStage.IDENTIFYING_CHARACTERS,
            GenerationStage.FINALIZING,
            GenerationStage.COMPLETE,
        ]

    def test_analyze_production_notes_retries_bad_json(self) -> None:
        client = _make_client()
        client.generate.side_effect = [
            "no json here",
            "{broken",
            json.dumps({"productionNotes": [{"category": "cast", "content": "Child actor"}]}),
        ]
        notes = asyncio.run(_make_orchestrator(client).analyze_production_notes(SCRIPT))
        assert notes[0].content == "Child actor"
        assert client.generate.await_count == 3

    def test_analyze_themes_validation_exhaustion(self) -> None:
        client = _make_client()
        client.generate.return_value = json.dumps({"themes": "not a list"})
        with pytest.raises(AnalysisValidationError):
            asyncio.run(_make_orchestrator(client, max_retries=1).analyze_themes(SCRIPT))
        assert client.generate.await_count == 2

    def test_analyze_themes_stage(self) -> None:
        client = _make_client()
        client.generate.return_value = '{"themes": ["Grief"]}'
        events: list[GenerationProgress] = []
        themes = asyncio.run(
            _make_orchestrator(client).analyze_themes(SCRIPT, on_progress=events.append)
        )
        assert themes == ["Grief"]
        assert GenerationStage.ANALYZING_THEMES in [e.stage for e in events]
