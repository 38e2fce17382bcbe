"""Drives prompt -> generation -> parse cycles against a model-serving endpoint."""

import asyncio
import time
from collections.abc import Awaitable, Callable
from typing import TypeVar

from scriptlens.analysis.exceptions import ResponseParseError
from scriptlens.analysis.json_extraction import parse_json_response
from scriptlens.analysis.models import AnalysisOptions, Character, ProductionNote, Summary
from scriptlens.analysis.prompt_builder import TEST_EXPECTED_RESPONSE, PromptBuilder
from scriptlens.analysis.response_parser import ResponseParser
from scriptlens.analysis.validator import build_characters, build_production_notes, build_themes
from scriptlens.config.settings import Settings
from scriptlens.llm.cancellation import OperationRegistry, new_operation_id
from scriptlens.llm.client_base import BaseGenerationClient, RemoteModel
from scriptlens.llm.exceptions import (
    GenerationCancelledError,
    GenerationError,
    ModelNotFoundError,
    NoModelSelectedError,
    ServiceUnavailableError,
)
from scriptlens.llm.factory import GenerationClientFactory
from scriptlens.llm.models import (
    GenerationProgress,
    GenerationStage,
    ModelInfo,
    ModelTestResult,
    ServiceStatus,
)
from scriptlens.llm.retry import retrying
from scriptlens.logging.logger import Log

T = TypeVar("T")

ProgressCallback = Callable[[GenerationProgress], None]

TEST_TEMPERATURE = 0.1
TEST_MAX_TOKENS = 50

_PARAMETER_SIZES = ("7b", "13b", "30b", "70b", "3b", "1b")
_CAPABILITY_HINTS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("code", "coder"), "code_understanding"),
    (("creative", "writer"), "creative_writing"),
    (("long", "context"), "long_context"),
)


def estimate_parameter_count(model_id: str) -> str:
    name = model_id.lower()
    for size in _PARAMETER_SIZES:
        if size in name:
            return size.upper()
    return "Unknown"


def describe_model(remote: RemoteModel) -> ModelInfo:
    name = remote.id.lower()
    capabilities = ["text_analysis", "structured_output"]
    capabilities.extend(cap for hints, cap in _CAPABILITY_HINTS if any(h in name for h in hints))
    _, _, tag = remote.id.partition(":")
    return ModelInfo(
        id=remote.id,
        name=remote.id,
        description=f"Model: {remote.id}",
        version=tag or "latest",
        parameter_count=estimate_parameter_count(remote.id),
        capabilities=capabilities,
    )


def quality_score(actual: str, expected: str) -> float:
    """Share of the expected words found in the actual response."""
    actual_lower = actual.lower().strip()
    expected_lower = expected.lower().strip()
    if expected_lower in actual_lower:
        return 1.0
    words = expected_lower.split(" ")
    return sum(1 for word in words if word in actual_lower) / len(words)


class SummaryOrchestrator:
    """Generates screenplay summaries with retries, fallback and cancellation.

    A generation request first checks the endpoint and the selected model,
    then runs the whole prompt -> generate -> parse cycle inside a task
    registered under an operation id. Transport and parse failures are
    retried with exponential backoff; once parse retries are exhausted the
    parser's fallback path produces a degraded summary, while exhausted
    transport retries are terminal.
    """

    def __init__(
        self,
        *,
        client: BaseGenerationClient,
        model: str | None = None,
        prompt_builder: PromptBuilder | None = None,
        parser: ResponseParser | None = None,
        registry: OperationRegistry | None = None,
        max_retries: int = 3,
        retry_base_delay: float = 1.0,
        default_temperature: float = 0.7,
        default_max_tokens: int = 2000,
    ) -> None:
        self._client = client
        self._model = model or None
        self._prompt_builder = prompt_builder or PromptBuilder()
        self._parser = parser or ResponseParser()
        self._registry = registry or OperationRegistry()
        self._max_retries = max_retries
        self._retry_base_delay = retry_base_delay
        self._default_temperature = default_temperature
        self._default_max_tokens = default_max_tokens

    @classmethod
    def from_settings(cls, settings: Settings) -> "SummaryOrchestrator":
        return cls(
            client=GenerationClientFactory.create(settings),
            model=settings.llm_model_name,
            max_retries=settings.llm_max_retries,
            retry_base_delay=settings.llm_retry_base_delay_seconds,
            default_temperature=settings.llm_default_temperature,
            default_max_tokens=settings.llm_default_max_tokens,
        )

    @property
    def registry(self) -> OperationRegistry:
        return self._registry

    async def service_status(self) -> ServiceStatus:
        try:
            models = await self._client.list_models()
        except GenerationError as exc:
            Log.warning(f"Generation service health check failed: {exc}")
            return ServiceStatus(
                is_running=False,
                warnings=[f"Service connection failed: {exc}"],
            )
        return ServiceStatus(is_running=True, available_models=len(models))

    async def is_available(self) -> bool:
        status = await self.service_status()
        return status.is_running

    async def list_models(self) -> list[ModelInfo]:
        return [describe_model(remote) for remote in await self._client.list_models()]

    async def current_model(self) -> ModelInfo | None:
        if not self._model:
            return None
        for model in await self.list_models():
            if model.id == self._model:
                return model
        return None

    async def set_active_model(self, model_id: str) -> None:
        models = await self.list_models()
        model = next((m for m in models if m.id == model_id), None)
        if model is None:
            raise ModelNotFoundError(f"Model {model_id} not found")
        if not model.is_available:
            raise ModelNotFoundError(f"Model {model_id} is not available")
        self._model = model_id
        Log.info(f"Active model set to {model_id}")

    async def test_model(self, model_id: str) -> ModelTestResult:
        started = time.perf_counter()
        try:
            output = await self._client.generate(
                model=model_id,
                prompt=self._prompt_builder.build_test_prompt(),
                temperature=TEST_TEMPERATURE,
                max_tokens=TEST_MAX_TOKENS,
            )
        except GenerationError as exc:
            return ModelTestResult(
                success=False,
                response_time_ms=_elapsed_ms(started),
                error=str(exc),
            )
        return ModelTestResult(
            success=True,
            response_time_ms=_elapsed_ms(started),
            quality_score=quality_score(output, TEST_EXPECTED_RESPONSE),
            sample_output=output,
        )

    def cancel(self, operation_id: str) -> bool:
        """Cancel an in-flight operation. Callable from any thread."""
        return self._registry.cancel(operation_id)

    async def generate_summary(
        self,
        content: str,
        options: AnalysisOptions,
        *,
        operation_id: str | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> Summary:
        """Generate a Summary for screenplay text.

        Raises:
            ServiceUnavailableError: if the endpoint cannot be reached.
            NoModelSelectedError: if no model is active.
            GenerationCancelledError: if cancel() was called for the operation.
            GenerationError: when transport retries are exhausted.
        """
        model = await self._require_ready()
        return await self._run_operation(
            operation_id or new_operation_id(),
            lambda op_id: self._summarize(content, options, model, op_id, on_progress),
            on_progress,
        )

    async def analyze_characters(
        self,
        content: str,
        *,
        operation_id: str | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> list[Character]:
        model = await self._require_ready()
        prompt = self._prompt_builder.build_character_analysis_prompt(content)
        return await self._run_operation(
            operation_id or new_operation_id(),
            lambda op_id: self._json_analysis(
                prompt,
                model,
                build_characters,
                op_id,
                on_progress,
                GenerationStage.IDENTIFYING_CHARACTERS,
                "Identifying characters",
            ),
            on_progress,
        )

    async def analyze_production_notes(
        self,
        content: str,
        *,
        operation_id: str | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> list[ProductionNote]:
        model = await self._require_ready()
        prompt = self._prompt_builder.build_production_notes_prompt(content)
        return await self._run_operation(
            operation_id or new_operation_id(),
            lambda op_id: self._json_analysis(
                prompt,
                model,
                build_production_notes,
                op_id,
                on_progress,
                GenerationStage.GENERATING_PRODUCTION_NOTES,
                "Generating production notes",
            ),
            on_progress,
        )

    async def analyze_themes(
        self,
        content: str,
        *,
        operation_id: str | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> list[str]:
        model = await self._require_ready()
        prompt = self._prompt_builder.build_theme_analysis_prompt(content)
        return await self._run_operation(
            operation_id or new_operation_id(),
            lambda op_id: self._json_analysis(
                prompt,
                model,
                build_themes,
                op_id,
                on_progress,
                GenerationStage.ANALYZING_THEMES,
                "Analyzing themes",
            ),
            on_progress,
        )

    async def close(self) -> None:
        await self._client.close()

    async def _require_ready(self) -> str:
        if not await self.is_available():
            raise ServiceUnavailableError("Generation service is not available")
        if not self._model:
            raise NoModelSelectedError("No model selected. Please set an active model first.")
        return self._model

    async def _run_operation(
        self,
        operation_id: str,
        work: Callable[[str], Awaitable[T]],
        on_progress: ProgressCallback | None,
    ) -> T:
        _emit(on_progress, operation_id, 0, GenerationStage.INITIALIZING, "Starting operation")
        task = asyncio.create_task(work(operation_id))
        try:
            self._registry.register(operation_id, task, asyncio.get_running_loop())
        except ValueError:
            # the task has not started yet, so no model call is made
            task.cancel()
            await asyncio.wait({task})
            raise
        try:
            result = await task
        except asyncio.CancelledError:
            current = asyncio.current_task()
            if current is not None and current.cancelling():
                raise
            Log.info(f"Operation {operation_id} was cancelled")
            _emit(
                on_progress,
                operation_id,
                0,
                GenerationStage.CANCELLED,
                "Operation was cancelled",
                cancellable=False,
            )
            raise GenerationCancelledError(f"Operation {operation_id} was cancelled") from None
        except Exception as exc:
            Log.error(f"Operation {operation_id} failed: {exc}")
            _emit(
                on_progress,
                operation_id,
                0,
                GenerationStage.ERROR,
                str(exc),
                cancellable=False,
            )
            raise
        finally:
            self._registry.remove(operation_id)

        _emit(
            on_progress,
            operation_id,
            100,
            GenerationStage.COMPLETE,
            "Operation complete",
            cancellable=False,
        )
        return result

    async def _summarize(
        self,
        content: str,
        options: AnalysisOptions,
        model: str,
        operation_id: str,
        on_progress: ProgressCallback | None,
    ) -> Summary:
        prompt = self._prompt_builder.build_summary_prompt(content, options)
        temperature = (
            options.temperature if options.temperature is not None else self._default_temperature
        )
        max_tokens = options.max_tokens or self._default_max_tokens
        _emit(
            on_progress,
            operation_id,
            10,
            GenerationStage.ANALYZING_CONTENT,
            f"Prompt ready ({len(prompt)} characters)",
        )

        raw = ""
        try:
            async for attempt in retrying(self._max_retries, self._retry_base_delay):
                with attempt:
                    retry_count = attempt.retry_state.attempt_number - 1
                    _emit(
                        on_progress,
                        operation_id,
                        30,
                        GenerationStage.EXTRACTING_PLOT,
                        f"Generating with {model} (attempt {retry_count + 1})",
                    )
                    Log.info(f"Generation attempt {retry_count + 1} with {model}")
                    raw = await self._client.generate(
                        model=model,
                        prompt=prompt,
                        temperature=temperature,
                        max_tokens=max_tokens,
                    )
                    _emit(
                        on_progress,
                        operation_id,
                        90,
                        GenerationStage.FINALIZING,
                        "Parsing model response",
                    )
                    result = self._parser.parse_with_retry(
                        raw, content, options, model, retry_count=retry_count
                    )
                    if not result.success:
                        raise ResponseParseError(result.error or "Failed to parse model response")
        except ResponseParseError as exc:
            Log.warning(f"Parse retries exhausted, using fallback: {exc}")
            result = self._parser.parse_with_fallback(raw, content, options, model)

        if result.warnings:
            Log.info(f"Summary parsed with {len(result.warnings)} warnings: {result.warnings}")
        return result.summary

    async def _json_analysis(
        self,
        prompt: str,
        model: str,
        build: Callable[[dict], T],
        operation_id: str,
        on_progress: ProgressCallback | None,
        stage: GenerationStage,
        message: str,
    ) -> T:
        async for attempt in retrying(self._max_retries, self._retry_base_delay):
            with attempt:
                _emit(on_progress, operation_id, 30, stage, message)
                raw = await self._client.generate(
                    model=model,
                    prompt=prompt,
                    temperature=self._default_temperature,
                    max_tokens=self._default_max_tokens,
                    json_output=True,
                )
                _emit(on_progress, operation_id, 90, GenerationStage.FINALIZING, "Reading JSON")
                value = build(parse_json_response(raw))
        return value


def _elapsed_ms(started: float) -> float:
    return max(1.0, (time.perf_counter() - started) * 1000)


def _emit(
    callback: ProgressCallback | None,
    operation_id: str,
    progress: int,
    stage: GenerationStage,
    message: str,
    *,
    cancellable: bool = True,
) -> None:
    if callback is None:
        return
    callback(
        GenerationProgress(
            operation_id=operation_id,
            progress=progress,
            stage=stage,
            message=message,
            cancellable=cancellable,
        )
    )
