"""Cleaning and sectioning of free-form model output."""

import re

PLOT_OVERVIEW = "PLOT OVERVIEW"
MAIN_CHARACTERS = "MAIN CHARACTERS"
THEMES = "THEMES"
PRODUCTION_NOTES = "PRODUCTION NOTES"
MARKETABILITY = "MARKETABILITY"
GENRE = "GENRE"
TONE_AND_STYLE = "TONE AND STYLE"
KEY_SCENES = "KEY SCENES"
PRODUCTION_CHALLENGES = "PRODUCTION CHALLENGES"
OVERALL_ASSESSMENT = "OVERALL ASSESSMENT"

# Order matters: the first header contained in a line wins.
SECTION_HEADERS: tuple[str, ...] = (
    PLOT_OVERVIEW,
    MAIN_CHARACTERS,
    THEMES,
    PRODUCTION_NOTES,
    MARKETABILITY,
    GENRE,
    TONE_AND_STYLE,
    KEY_SCENES,
    PRODUCTION_CHALLENGES,
    OVERALL_ASSESSMENT,
)

GENERAL = "general"

_CLEANUP_RULES: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"^(?:Here's|Here is|Based on|Analysis:)", re.IGNORECASE), ""),
    (re.compile(r"\*\*(.*?)\*\*"), r"\1"),
    (re.compile(r"\*(.*?)\*"), r"\1"),
    (re.compile(r"```.*?```", re.DOTALL), ""),
    (re.compile(r"^[ \t]*[-*][ \t]*", re.MULTILINE), ""),
    (re.compile(r"\n{3,}"), "\n\n"),
)

_HEADING_RES: dict[str, re.Pattern[str]] = {
    header: re.compile(rf"^#{{1,3}}\s*{re.escape(header)}", re.IGNORECASE)
    for header in SECTION_HEADERS
}


def section_key(header: str) -> str:
    """Map a header such as TONE AND STYLE to its key, tone_and_style."""
    return re.sub(r"\s+", "_", header.lower())


def clean_response(response: str) -> str:
    """Strip filler, markdown emphasis, code fences and bullet markers."""
    text = response
    for pattern, replacement in _CLEANUP_RULES:
        text = pattern.sub(replacement, text)
    return text.strip()


def match_header(line: str) -> str | None:
    stripped = line.strip()
    upper = stripped.upper()
    for header in SECTION_HEADERS:
        if header in upper or _HEADING_RES[header].match(stripped):
            return header
    return None


def split_sections(text: str) -> dict[str, str]:
    """Split cleaned text into sections keyed by section_key().

    Text before the first recognised header lands under "general". Empty
    sections are omitted; a repeated header replaces the earlier content.
    """
    sections: dict[str, str] = {}
    current = GENERAL
    buffer: list[str] = []

    for line in text.split("\n"):
        header = match_header(line)
        if header is None:
            buffer.append(line)
            continue
        content = "\n".join(buffer).strip()
        if content:
            sections[current] = content
        current = section_key(header)
        buffer = []

    content = "\n".join(buffer).strip()
    if content:
        sections[current] = content
    return sections
