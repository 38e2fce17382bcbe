from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import StrEnum


class GenerationStage(StrEnum):
    INITIALIZING = "initializing"
    ANALYZING_CONTENT = "analyzing_content"
    EXTRACTING_PLOT = "extracting_plot"
    IDENTIFYING_CHARACTERS = "identifying_characters"
    ANALYZING_THEMES = "analyzing_themes"
    GENERATING_PRODUCTION_NOTES = "generating_production_notes"
    FINALIZING = "finalizing"
    COMPLETE = "complete"
    ERROR = "error"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class GenerationProgress:
    operation_id: str
    progress: int  # 0-100
    stage: GenerationStage
    message: str
    cancellable: bool = True


@dataclass(frozen=True)
class ModelInfo:
    id: str
    name: str
    description: str
    version: str
    parameter_count: str = "Unknown"
    is_available: bool = True
    capabilities: list[str] = field(default_factory=list)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class ServiceStatus:
    is_running: bool
    version: str = "Unknown"
    available_models: int = 0
    last_health_check: datetime = field(default_factory=_utcnow)
    warnings: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class ModelTestResult:
    success: bool
    response_time_ms: float
    quality_score: float | None = None
    error: str | None = None
    sample_output: str | None = None
