"""Ordered keyword tables for classifying free text.

Each table is evaluated top to bottom; the first row with a keyword contained
in the lower-cased text wins, otherwise the default applies.
"""

from typing import TypeVar

from scriptlens.analysis.models import (
    BudgetCategory,
    BudgetImpact,
    CharacterImportance,
    Priority,
    ProductionCategory,
)

T = TypeVar("T")

KeywordTable = tuple[tuple[tuple[str, ...], T], ...]

IMPORTANCE_RULES: KeywordTable[CharacterImportance] = (
    (("protagonist", "main character"), CharacterImportance.PROTAGONIST),
    (("supporting",), CharacterImportance.SUPPORTING),
    (("main", "lead"), CharacterImportance.MAIN),
)

CATEGORY_RULES: KeywordTable[ProductionCategory] = (
    (("budget", "cost", "expensive"), ProductionCategory.BUDGET),
    (("location", "setting", "venue"), ProductionCategory.LOCATION),
    (("cast", "actor", "performer"), ProductionCategory.CAST),
    (("legal", "permit", "rights"), ProductionCategory.LEGAL),
    (("schedule", "timing", "deadline"), ProductionCategory.SCHEDULING),
    (("equipment", "camera", "gear"), ProductionCategory.EQUIPMENT),
    (("post", "edit", "vfx"), ProductionCategory.POST_PRODUCTION),
)

PRIORITY_RULES: KeywordTable[Priority] = (
    (("critical", "essential", "must"), Priority.CRITICAL),
    (("important", "high", "significant"), Priority.HIGH),
    (("minor", "low", "optional"), Priority.LOW),
)

BUDGET_IMPACT_RULES: KeywordTable[BudgetImpact] = (
    (("expensive", "costly", "major cost"), BudgetImpact.MAJOR),
    (("significant cost", "substantial"), BudgetImpact.SIGNIFICANT),
    (("minimal cost", "cheap", "low cost"), BudgetImpact.MINIMAL),
)

BUDGET_CATEGORY_RULES: KeywordTable[BudgetCategory] = (
    (("blockbuster", "major studio"), BudgetCategory.BLOCKBUSTER),
    (("high budget", "expensive"), BudgetCategory.HIGH),
    (("medium budget", "moderate cost"), BudgetCategory.MEDIUM),
    (("low budget", "independent"), BudgetCategory.LOW),
    (("micro budget", "very low cost"), BudgetCategory.MICRO),
)

KNOWN_GENRES: tuple[str, ...] = (
    "drama",
    "comedy",
    "thriller",
    "horror",
    "action",
    "romance",
    "sci-fi",
    "science fiction",
    "fantasy",
    "mystery",
    "crime",
    "documentary",
    "biographical",
    "historical",
    "western",
    "musical",
    "animation",
    "adventure",
    "family",
    "war",
    "sports",
)


def classify(text: str, rules: KeywordTable[T], default: T) -> T:
    lowered = text.lower()
    for keywords, result in rules:
        if any(keyword in lowered for keyword in keywords):
            return result
    return default


def classify_importance(text: str) -> CharacterImportance:
    return classify(text, IMPORTANCE_RULES, CharacterImportance.MINOR)


def classify_category(text: str) -> ProductionCategory:
    return classify(text, CATEGORY_RULES, ProductionCategory.TECHNICAL)


def classify_priority(text: str) -> Priority:
    return classify(text, PRIORITY_RULES, Priority.MEDIUM)


def classify_budget_impact(text: str) -> BudgetImpact:
    return classify(text, BUDGET_IMPACT_RULES, BudgetImpact.MODERATE)


def classify_budget_category(text: str) -> BudgetCategory | None:
    return classify(text, BUDGET_CATEGORY_RULES, None)


def find_genre(text: str) -> str | None:
    """First known genre mentioned in the text, capitalised."""
    lowered = text.lower()
    for genre in KNOWN_GENRES:
        if genre in lowered:
            return genre[0].upper() + genre[1:]
    return None
