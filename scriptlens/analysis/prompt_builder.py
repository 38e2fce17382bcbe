"""Deterministic prompt construction for screenplay analysis."""

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from scriptlens.analysis import sections
from scriptlens.analysis.models import AnalysisOptions, FocusArea, SummaryLength
from scriptlens.analysis.prompt_loader import load_prompt_template

DEFAULT_AUDIENCE = "film directors and producers"
VALIDATION_EXCERPT_CHARS = 500
TEST_PROMPT = "Please respond with 'Hello, I am working correctly.' to test the connection."
TEST_EXPECTED_RESPONSE = "Hello, I am working correctly."

FOCUS_AREA_DESCRIPTIONS: dict[FocusArea, str] = {
    FocusArea.PLOT: "Pay special attention to plot structure, pacing, and narrative coherence",
    FocusArea.CHARACTERS: (
        "Focus on character development, relationships, and casting considerations"
    ),
    FocusArea.THEMES: "Identify and analyze the central themes and their execution",
    FocusArea.DIALOGUE: "Evaluate dialogue quality, authenticity, and character voice",
    FocusArea.STRUCTURE: "Analyze the three-act structure, scene transitions, and overall flow",
    FocusArea.GENRE: "Consider genre conventions and how well the script fits its category",
    FocusArea.PRODUCTION: (
        "Emphasize production challenges, budget implications, and technical requirements"
    ),
    FocusArea.MARKETABILITY: "Assess commercial viability and target audience appeal",
    FocusArea.TECHNICAL: (
        "Focus on technical aspects like cinematography opportunities and special effects"
    ),
    FocusArea.LEGAL: "Identify potential legal issues, rights clearances, and compliance concerns",
}

LENGTH_GUIDES: dict[SummaryLength, str] = {
    SummaryLength.BRIEF: (
        "Keep your analysis concise but comprehensive. Aim for 200-400 words total."
    ),
    SummaryLength.STANDARD: "Provide a thorough analysis. Aim for 400-800 words total.",
    SummaryLength.DETAILED: (
        "Give an in-depth analysis with specific examples. Aim for 800-1200 words total."
    ),
    SummaryLength.COMPREHENSIVE: (
        "Provide exhaustive analysis with detailed examples and insights. "
        "Aim for 1200+ words total."
    ),
}

SCRIPT_TYPE_INSTRUCTIONS: dict[str, str] = {
    "feature": (
        "This is a feature-length screenplay. Pay attention to three-act structure, "
        "character arcs, and commercial viability."
    ),
    "short": (
        "This is a short film script. Focus on concise storytelling, single themes, "
        "and production feasibility for limited budgets."
    ),
    "tv_episode": (
        "This is a television episode. Consider series continuity, character consistency, "
        "and episodic structure."
    ),
    "pilot": (
        "This is a television pilot. Evaluate world-building, character introductions, "
        "and series potential."
    ),
    "web_series": (
        "This is a web series episode. Consider digital platform requirements "
        "and shorter attention spans."
    ),
    "documentary": (
        "This is a documentary script. Focus on factual accuracy, narrative structure, "
        "and interview opportunities."
    ),
    "commercial": (
        "This is a commercial script. Emphasize brand messaging, target audience, "
        "and production efficiency."
    ),
    "music_video": (
        "This is a music video treatment. Focus on visual storytelling, rhythm, "
        "and artistic expression."
    ),
}
DEFAULT_SCRIPT_TYPE_INSTRUCTION = (
    "Analyze this script according to its specific format and intended use."
)


def _always(_: AnalysisOptions) -> bool:
    return True


@dataclass(frozen=True)
class _Section:
    header: str
    outline: str
    placeholder: str
    enabled: Callable[[AnalysisOptions], bool] = _always


# Single source for both the outline and the output template.
_SECTIONS: tuple[_Section, ...] = (
    _Section(
        sections.PLOT_OVERVIEW,
        "A concise summary of the story",
        "[Comprehensive plot summary]",
    ),
    _Section(
        sections.MAIN_CHARACTERS,
        "Key characters with descriptions and relationships",
        "[Character analysis with relationships]",
        lambda o: o.analyze_character_relationships,
    ),
    _Section(
        sections.THEMES,
        "Central themes and their significance",
        "[Theme identification and analysis]",
        lambda o: o.identify_themes,
    ),
    _Section(
        sections.PRODUCTION_NOTES,
        "Budget, location, casting, and technical considerations",
        "[Production considerations and challenges]",
        lambda o: o.include_production_notes,
    ),
    _Section(
        sections.MARKETABILITY,
        "Commercial potential and target audience",
        "[Commercial viability assessment]",
        lambda o: o.assess_marketability,
    ),
    _Section(
        sections.GENRE,
        "Primary genre and any subgenres",
        "[Genre classification]",
    ),
    _Section(
        sections.TONE_AND_STYLE,
        "Overall tone, writing style, and atmosphere",
        "[Tone and style analysis]",
    ),
    _Section(
        sections.KEY_SCENES,
        "Notable or pivotal scenes",
        "[Notable or pivotal scenes]",
    ),
    _Section(
        sections.PRODUCTION_CHALLENGES,
        "Specific challenges for production",
        "[Specific challenges for production]",
        lambda o: o.include_production_notes,
    ),
    _Section(
        sections.OVERALL_ASSESSMENT,
        "Final evaluation and recommendations",
        "[Final evaluation and recommendations]",
    ),
)


def enabled_headers(options: AnalysisOptions) -> list[str]:
    return [section.header for section in _SECTIONS if section.enabled(options)]


class PromptBuilder:
    """Builds the prompts sent to the generation service.

    All methods are pure: the same content and options always produce the
    same prompt. Document content is never truncated here.
    """

    def __init__(self, prompt_dir: Path | None = None) -> None:
        self._prompt_dir = prompt_dir

    def build_summary_prompt(self, content: str, options: AnalysisOptions) -> str:
        parts = [self._system_instruction(options)]
        if options.focus_areas:
            parts.append(self._focus_area_instructions(options))
        parts.append(LENGTH_GUIDES[options.length])
        parts.append(self._format_instructions(options))
        if options.custom_instructions:
            parts.append(f"Additional Instructions: {options.custom_instructions}")
        parts.append(f"\n--- SCRIPT CONTENT ---\n{content}\n--- END SCRIPT ---\n")
        parts.append(self._output_template(options))
        return "\n\n".join(parts)

    def build_script_type_prompt(
        self, content: str, script_type: str, options: AnalysisOptions
    ) -> str:
        instruction = SCRIPT_TYPE_INSTRUCTIONS.get(script_type, DEFAULT_SCRIPT_TYPE_INSTRUCTION)
        return f"{instruction}\n\n{self.build_summary_prompt(content, options)}"

    def build_production_notes_prompt(self, content: str) -> str:
        return self._render("production_notes", script_content=content)

    def build_character_analysis_prompt(self, content: str) -> str:
        return self._render("character_analysis", script_content=content)

    def build_theme_analysis_prompt(self, content: str) -> str:
        return self._render("theme_analysis", script_content=content)

    def build_validation_prompt(self, content: str) -> str:
        return self._render("validation", excerpt=content[:VALIDATION_EXCERPT_CHARS])

    @staticmethod
    def build_test_prompt() -> str:
        return TEST_PROMPT

    def _render(self, template_name: str, **values: str) -> str:
        return load_prompt_template(template_name, self._prompt_dir).format(**values)

    @staticmethod
    def _system_instruction(options: AnalysisOptions) -> str:
        audience = options.target_audience or DEFAULT_AUDIENCE
        return (
            f"You are an expert script analyst working for {audience}. "
            "Your task is to provide a comprehensive, professional analysis of the "
            "provided script. Be thorough, insightful, and focus on elements that would "
            "be most valuable for production decision-making."
        )

    @staticmethod
    def _focus_area_instructions(options: AnalysisOptions) -> str:
        descriptions = [
            FOCUS_AREA_DESCRIPTIONS[area] for area in FocusArea if area in options.focus_areas
        ]
        return f"Focus Areas: {'. '.join(descriptions)}."

    @staticmethod
    def _format_instructions(options: AnalysisOptions) -> str:
        lines = ["Structure your response with the following sections:"]
        enabled = [section for section in _SECTIONS if section.enabled(options)]
        for number, section in enumerate(enabled, start=1):
            lines.append(f"{number}. {section.header} - {section.outline}")
        return "\n".join(lines)

    @staticmethod
    def _output_template(options: AnalysisOptions) -> str:
        blocks = [
            f"## {section.header}\n{section.placeholder}"
            for section in _SECTIONS
            if section.enabled(options)
        ]
        return "Please provide your analysis in the following structured format:\n\n" + (
            "\n\n".join(blocks)
        )
