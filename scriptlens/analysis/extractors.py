"""Per-section extraction of typed values from a split model response.

Every extractor is a pure function of the section map. Missing or unusable
sections degrade to a documented default plus a warning; nothing here raises
for "found nothing".
"""

import re
from dataclasses import dataclass, field
from typing import Generic, TypeVar

from scriptlens.analysis import classifiers
from scriptlens.analysis.models import BudgetCategory, Character, ProductionNote
from scriptlens.analysis.sections import GENERAL, section_key

T = TypeVar("T")

PLOT_LIMIT = 500
DESCRIPTION_LIMIT = 500
NOTE_LIMIT = 500
AUDIENCE_LIMIT = 200
TONE_LIMIT = 300
MARKETABILITY_LIMIT = 500
LIST_ITEM_LIMIT = 200

MAX_THEMES = 10
MAX_NOTES = 20
MAX_LIST_ITEMS = 10
MAX_FALLBACK_CHARACTERS = 10

PLOT_UNAVAILABLE = "Plot overview not available"

_PLOT = section_key("PLOT OVERVIEW")
_CHARACTERS = section_key("MAIN CHARACTERS")
_THEMES = section_key("THEMES")
_NOTES = section_key("PRODUCTION NOTES")
_CHALLENGES = section_key("PRODUCTION CHALLENGES")
_GENRE = section_key("GENRE")
_MARKET = section_key("MARKETABILITY")
_TONE = section_key("TONE AND STYLE")
_SCENES = section_key("KEY SCENES")

_LIST_MARKER_RE = re.compile(r"^[-*•]\s*")
_NUMBER_MARKER_RE = re.compile(r"^\d+\.?\s*")
_CHARACTER_RE = re.compile(r"^(?:\d+\.?\s*)?([A-Z][A-Z\s]*[A-Z])(?:\s*[-:]|\s|$)")
_CHARACTER_PREFIX_RE = re.compile(r"^(?:\d+\.?\s*)?[A-Z][A-Z\s]*[A-Z](?:\s*[-:]|\s)")
_AUDIENCE_RE = re.compile(
    r"(?:target audience|aimed at|appeals to|audience of)\s*:?\s*([^.\n]+)", re.IGNORECASE
)
# Speaker cues in screenplay text: "SARAH:" or "SARAH (V.O.)".
_SPEAKER_RE = re.compile(r"^([A-Z][A-Z ]{2,}?)(?:\s*\(|:)", re.MULTILINE)


@dataclass(frozen=True)
class Extracted(Generic[T]):
    value: T
    warnings: list[str] = field(default_factory=list)


def strip_list_marker(line: str) -> str:
    return _NUMBER_MARKER_RE.sub("", _LIST_MARKER_RE.sub("", line)).strip()


def _section(sections: dict[str, str], *keys: str) -> str:
    for key in keys:
        if sections.get(key):
            return sections[key]
    return ""


def _lines(text: str) -> list[str]:
    return [line.strip() for line in text.split("\n") if line.strip()]


def extract_plot_overview(sections: dict[str, str]) -> Extracted[str]:
    plot_section = _section(sections, _PLOT, GENERAL)
    if not plot_section:
        return Extracted(PLOT_UNAVAILABLE, ["No plot overview found in response"])

    paragraphs = [p.strip() for p in plot_section.split("\n\n") if len(p.strip()) > 50]
    if not paragraphs:
        return Extracted(
            plot_section[:PLOT_LIMIT], ["Plot overview appears to be too brief"]
        )
    return Extracted(paragraphs[0])


def parse_character_line(line: str) -> Character | None:
    """Parse 'NAME - description' into a Character, or None if no name leads."""
    match = _CHARACTER_RE.match(line)
    if match is None:
        return None
    description = _CHARACTER_PREFIX_RE.sub("", line, count=1).strip()
    return Character(
        name=match.group(1).strip(),
        description=description[:DESCRIPTION_LIMIT],
        importance=classifiers.classify_importance(line),
        traits=[],
    )


def extract_characters(sections: dict[str, str]) -> Extracted[list[Character]]:
    character_section = sections.get(_CHARACTERS, "")
    if not character_section:
        return Extracted([], ["No character information found in response"])

    characters = []
    for line in _lines(character_section):
        if len(line) <= 10:
            continue
        character = parse_character_line(line)
        if character is not None:
            characters.append(character)

    if not characters:
        return Extracted([], ["Could not parse character information from response"])
    return Extracted(characters)


def extract_themes(sections: dict[str, str]) -> Extracted[list[str]]:
    theme_section = sections.get(_THEMES, "")
    if not theme_section:
        return Extracted([], ["No theme information found in response"])

    themes = [theme for theme in map(strip_list_marker, _lines(theme_section)) if len(theme) > 5]
    return Extracted(themes[:MAX_THEMES])


def parse_production_note(line: str) -> ProductionNote:
    text = strip_list_marker(line)
    return ProductionNote(
        category=classifiers.classify_category(text),
        content=text[:NOTE_LIMIT],
        priority=classifiers.classify_priority(text),
        budget_impact=classifiers.classify_budget_impact(text),
        requirements=[],
    )


def extract_production_notes(sections: dict[str, str]) -> Extracted[list[ProductionNote]]:
    notes_section = _section(sections, _NOTES, _CHALLENGES)
    if not notes_section:
        return Extracted([], ["No production notes found in response"])

    notes = [
        parse_production_note(line)
        for line in _lines(notes_section)
        if len(strip_list_marker(line)) >= 20
    ]
    return Extracted(notes[:MAX_NOTES])


def extract_genre(sections: dict[str, str]) -> Extracted[str]:
    genre = classifiers.find_genre(_section(sections, _GENRE, GENERAL))
    if genre is None:
        return Extracted("Unknown", ["Could not determine genre from response"])
    return Extracted(genre)


def extract_budget_category(sections: dict[str, str]) -> BudgetCategory | None:
    return classifiers.classify_budget_category(_section(sections, _NOTES, GENERAL))


def extract_target_audience(sections: dict[str, str]) -> str | None:
    match = _AUDIENCE_RE.search(_section(sections, _MARKET, GENERAL))
    if match is None:
        return None
    return match.group(1).strip()[:AUDIENCE_LIMIT]


def extract_tone_and_style(sections: dict[str, str]) -> str | None:
    tone_section = _section(sections, _TONE, GENERAL)
    if len(tone_section) > 20:
        return tone_section[:TONE_LIMIT]
    return None


def extract_marketability(sections: dict[str, str]) -> str | None:
    market_section = sections.get(_MARKET, "")
    if len(market_section) > 20:
        return market_section[:MARKETABILITY_LIMIT]
    return None


def _bullet_items(text: str) -> list[str] | None:
    items = []
    for line in _lines(text):
        if len(line) <= 20:
            continue
        item = strip_list_marker(line)
        if len(item) > 10:
            items.append(item[:LIST_ITEM_LIMIT])
    return items[:MAX_LIST_ITEMS] or None


def extract_key_scenes(sections: dict[str, str]) -> list[str] | None:
    return _bullet_items(sections.get(_SCENES, ""))


def extract_production_challenges(sections: dict[str, str]) -> list[str] | None:
    return _bullet_items(sections.get(_CHALLENGES, ""))


def extract_speaker_names(script: str) -> list[str]:
    """All-caps speaker cues from screenplay text, de-duplicated, in order."""
    names: list[str] = []
    for match in _SPEAKER_RE.finditer(script):
        name = match.group(1).strip()
        if 1 < len(name) < 30 and name not in names:
            names.append(name)
        if len(names) == MAX_FALLBACK_CHARACTERS:
            break
    return names
