from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import StrEnum


class SummaryLength(StrEnum):
    BRIEF = "brief"
    STANDARD = "standard"
    DETAILED = "detailed"
    COMPREHENSIVE = "comprehensive"


class FocusArea(StrEnum):
    PLOT = "plot"
    CHARACTERS = "characters"
    THEMES = "themes"
    DIALOGUE = "dialogue"
    STRUCTURE = "structure"
    GENRE = "genre"
    PRODUCTION = "production"
    MARKETABILITY = "marketability"
    TECHNICAL = "technical"
    LEGAL = "legal"


class CharacterImportance(StrEnum):
    PROTAGONIST = "protagonist"
    MAIN = "main"
    SUPPORTING = "supporting"
    MINOR = "minor"


class ProductionCategory(StrEnum):
    BUDGET = "budget"
    LOCATION = "location"
    CAST = "cast"
    TECHNICAL = "technical"
    LEGAL = "legal"
    SCHEDULING = "scheduling"
    EQUIPMENT = "equipment"
    POST_PRODUCTION = "post-production"


class Priority(StrEnum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class BudgetImpact(StrEnum):
    MINIMAL = "minimal"
    MODERATE = "moderate"
    SIGNIFICANT = "significant"
    MAJOR = "major"


class BudgetCategory(StrEnum):
    MICRO = "micro"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    BLOCKBUSTER = "blockbuster"


@dataclass(frozen=True)
class AnalysisOptions:
    """Knobs that shape the prompt and are stamped onto the resulting summary."""

    length: SummaryLength = SummaryLength.STANDARD
    focus_areas: frozenset[FocusArea] = frozenset()
    target_audience: str | None = None
    custom_instructions: str | None = None
    include_production_notes: bool = True
    analyze_character_relationships: bool = True
    identify_themes: bool = True
    assess_marketability: bool = False
    temperature: float | None = None
    max_tokens: int | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "length", SummaryLength(self.length))
        object.__setattr__(
            self, "focus_areas", frozenset(FocusArea(area) for area in self.focus_areas)
        )
        if self.temperature is not None and not 0.0 <= self.temperature <= 1.0:
            raise ValueError(f"temperature must be within [0, 1], got {self.temperature}")
        if self.max_tokens is not None and self.max_tokens <= 0:
            raise ValueError(f"max_tokens must be positive, got {self.max_tokens}")

    def to_dict(self) -> dict[str, object]:
        return {
            "length": str(self.length),
            "focus_areas": [str(area) for area in FocusArea if area in self.focus_areas],
            "target_audience": self.target_audience,
            "custom_instructions": self.custom_instructions,
            "include_production_notes": self.include_production_notes,
            "analyze_character_relationships": self.analyze_character_relationships,
            "identify_themes": self.identify_themes,
            "assess_marketability": self.assess_marketability,
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }


@dataclass(frozen=True)
class Character:
    name: str
    description: str
    importance: CharacterImportance = CharacterImportance.MINOR
    relationships: list[str] = field(default_factory=list)
    character_arc: str | None = None
    age_range: str | None = None
    traits: list[str] | None = None


@dataclass(frozen=True)
class ProductionNote:
    category: ProductionCategory
    content: str
    priority: Priority = Priority.MEDIUM
    budget_impact: BudgetImpact | None = None
    requirements: list[str] | None = None


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Summary:
    """Structured analysis of one screenplay.

    The three list fields are always present, possibly empty.
    """

    plot_overview: str
    main_characters: list[Character]
    themes: list[str]
    production_notes: list[ProductionNote]
    genre: str
    model_used: str
    generation_options: AnalysisOptions
    estimated_budget: BudgetCategory | None = None
    target_audience: str | None = None
    tone_and_style: str | None = None
    key_scenes: list[str] | None = None
    production_challenges: list[str] | None = None
    marketability: str | None = None
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    def to_dict(self) -> dict[str, object]:
        return {
            "plot_overview": self.plot_overview,
            "main_characters": [
                {
                    "name": c.name,
                    "description": c.description,
                    "importance": str(c.importance),
                    "relationships": list(c.relationships),
                    "character_arc": c.character_arc,
                    "age_range": c.age_range,
                    "traits": c.traits,
                }
                for c in self.main_characters
            ],
            "themes": list(self.themes),
            "production_notes": [
                {
                    "category": str(n.category),
                    "content": n.content,
                    "priority": str(n.priority),
                    "budget_impact": str(n.budget_impact) if n.budget_impact else None,
                    "requirements": n.requirements,
                }
                for n in self.production_notes
            ],
            "genre": self.genre,
            "estimated_budget": str(self.estimated_budget) if self.estimated_budget else None,
            "target_audience": self.target_audience,
            "tone_and_style": self.tone_and_style,
            "key_scenes": self.key_scenes,
            "production_challenges": self.production_challenges,
            "marketability": self.marketability,
            "model_used": self.model_used,
            "generation_options": self.generation_options.to_dict(),
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }


@dataclass(frozen=True)
class ParsedResponse:
    """Result of turning raw model text into a Summary."""

    success: bool
    summary: Summary | None = None
    error: str | None = None
    warnings: list[str] | None = None
    used_fallback: bool = False
