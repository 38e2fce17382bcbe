"""Builds typed analysis objects from sub-prompt JSON."""

from typing import Any

from scriptlens.analysis.exceptions import AnalysisValidationError
from scriptlens.analysis.models import (
    BudgetImpact,
    Character,
    CharacterImportance,
    Priority,
    ProductionCategory,
    ProductionNote,
)

_MAX_ITEMS = 50


def build_characters(data: dict[str, Any]) -> list[Character]:
    """Build characters from {"characters": [...]}.

    Raises:
        AnalysisValidationError: on any structural problem.
    """
    raw = _require_list(data, "characters")
    return [_build_character(item, i) for i, item in enumerate(raw)]


def build_production_notes(data: dict[str, Any]) -> list[ProductionNote]:
    """Build notes from {"productionNotes": [...]}.

    Raises:
        AnalysisValidationError: on any structural problem.
    """
    raw = _require_list(data, "productionNotes")
    return [_build_production_note(item, i) for i, item in enumerate(raw)]


def build_themes(data: dict[str, Any]) -> list[str]:
    raw = _require_list(data, "themes")
    themes = []
    for i, item in enumerate(raw):
        if not isinstance(item, str) or not item.strip():
            raise AnalysisValidationError(f"Theme at index {i} must be a non-empty string")
        themes.append(item.strip())
    return themes


def _require_list(data: dict[str, Any], key: str) -> list[Any]:
    if key not in data:
        raise AnalysisValidationError(f"Missing required top-level field: {key}")
    raw = data[key]
    if not isinstance(raw, list):
        raise AnalysisValidationError(f"'{key}' must be a list")
    if len(raw) > _MAX_ITEMS:
        raise AnalysisValidationError(f"Too many {key}: {len(raw)} (max {_MAX_ITEMS})")
    return raw


def _build_character(raw: Any, index: int) -> Character:
    if not isinstance(raw, dict):
        raise AnalysisValidationError(f"Character at index {index} must be an object")
    name = _require_str(raw, "name", f"Character at index {index}")
    description = _optional_str(raw, "description", f"Character at index {index}") or ""
    return Character(
        name=name,
        description=description,
        importance=_enum_value(
            CharacterImportance, raw.get("importance"), CharacterImportance.MINOR
        ),
        relationships=_str_list(raw, "relationships", f"Character at index {index}") or [],
        character_arc=_optional_str(raw, "characterArc", f"Character at index {index}"),
        age_range=_optional_str(raw, "ageRange", f"Character at index {index}"),
        traits=_str_list(raw, "traits", f"Character at index {index}"),
    )


def _build_production_note(raw: Any, index: int) -> ProductionNote:
    if not isinstance(raw, dict):
        raise AnalysisValidationError(f"Production note at index {index} must be an object")
    where = f"Production note at index {index}"
    category = raw.get("category")
    try:
        category = ProductionCategory(str(category).strip().lower())
    except ValueError as exc:
        raise AnalysisValidationError(
            f"{where}: 'category' must be one of "
            f"{[str(c) for c in ProductionCategory]}, got {category!r}"
        ) from exc
    budget_impact = raw.get("budgetImpact")
    return ProductionNote(
        category=category,
        content=_require_str(raw, "content", where),
        priority=_enum_value(Priority, raw.get("priority"), Priority.MEDIUM),
        budget_impact=(
            _enum_value(BudgetImpact, budget_impact, BudgetImpact.MODERATE)
            if budget_impact is not None
            else None
        ),
        requirements=_str_list(raw, "requirements", where),
    )


def _require_str(raw: dict[str, Any], key: str, where: str) -> str:
    value = raw.get(key)
    if not value or not isinstance(value, str):
        raise AnalysisValidationError(f"{where}: '{key}' must be a non-empty string")
    return value


def _optional_str(raw: dict[str, Any], key: str, where: str) -> str | None:
    value = raw.get(key)
    if value is not None and not isinstance(value, str):
        raise AnalysisValidationError(f"{where}: '{key}' must be a string or null")
    return value


def _str_list(raw: dict[str, Any], key: str, where: str) -> list[str] | None:
    value = raw.get(key)
    if value is None:
        return None
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise AnalysisValidationError(f"{where}: '{key}' must be a list of strings")
    return list(value)


def _enum_value(enum_cls, value: Any, default):
    """Case-insensitive enum lookup; unknown or missing values give the default."""
    if not isinstance(value, str):
        return default
    try:
        return enum_cls(value.strip().lower())
    except ValueError:
        return default
