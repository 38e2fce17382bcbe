"""Recovers a typed Summary from free-form model output."""

from typing import Any

from scriptlens.analysis import extractors
from scriptlens.analysis.json_extraction import parse_json_response
from scriptlens.analysis.models import (
    AnalysisOptions,
    Character,
    CharacterImportance,
    ParsedResponse,
    Summary,
)
from scriptlens.analysis.sections import clean_response, split_sections
from scriptlens.logging.logger import Log

FALLBACK_WARNING = "Used fallback parsing due to response format issues"
FALLBACK_PLOT = "Summary not available"
FALLBACK_CHARACTER_DESCRIPTION = "Character details not available"
FALLBACK_RETRY_LIMIT = 2


class ResponseParser:
    """Section-based parsing with an unconditional fallback.

    parse_response() may fail (success=False) on non-conforming text;
    parse_with_fallback() never does.
    """

    def parse_response(
        self,
        response: str,
        original_content: str,
        options: AnalysisOptions,
        model_used: str,
    ) -> ParsedResponse:
        try:
            summary, warnings = self._parse_sections(response, options, model_used)
        except Exception as exc:
            Log.exception(f"Section parsing failed: {exc}")
            return ParsedResponse(success=False, error=f"Failed to parse response: {exc}")
        return ParsedResponse(success=True, summary=summary, warnings=warnings or None)

    def parse_with_retry(
        self,
        response: str,
        original_content: str,
        options: AnalysisOptions,
        model_used: str,
        retry_count: int = 0,
    ) -> ParsedResponse:
        """Parse, degrading to the fallback path on the first attempts.

        Once retry_count reaches FALLBACK_RETRY_LIMIT the failed result is
        returned as-is so the caller can decide whether to regenerate.
        """
        result = self.parse_response(response, original_content, options, model_used)
        if result.success:
            return result
        if retry_count < FALLBACK_RETRY_LIMIT:
            return self.parse_with_fallback(response, original_content, options, model_used)
        return result

    def parse_with_fallback(
        self,
        response: str,
        original_content: str,
        options: AnalysisOptions,
        model_used: str,
    ) -> ParsedResponse:
        """Always succeeds: raw text as plot, speaker cues from the script as characters."""
        characters = [
            Character(
                name=name,
                description=FALLBACK_CHARACTER_DESCRIPTION,
                importance=CharacterImportance.MINOR,
            )
            for name in extractors.extract_speaker_names(original_content)
        ]
        summary = Summary(
            plot_overview=response[: extractors.PLOT_LIMIT].strip() or FALLBACK_PLOT,
            main_characters=characters,
            themes=[],
            production_notes=[],
            genre="Unknown",
            model_used=model_used,
            generation_options=options,
        )
        Log.warning(f"Fallback parsing used, {len(characters)} characters from script text")
        return ParsedResponse(
            success=True, summary=summary, warnings=[FALLBACK_WARNING], used_fallback=True
        )

    def parse_json(self, response: str) -> dict[str, Any]:
        return parse_json_response(response)

    @staticmethod
    def _parse_sections(
        response: str, options: AnalysisOptions, model_used: str
    ) -> tuple[Summary, list[str]]:
        sections = split_sections(clean_response(response))
        warnings: list[str] = []

        plot = extractors.extract_plot_overview(sections)
        characters = extractors.extract_characters(sections)
        themes = extractors.extract_themes(sections)
        notes = extractors.extract_production_notes(sections)
        genre = extractors.extract_genre(sections)
        for extracted in (plot, characters, themes, notes, genre):
            warnings.extend(extracted.warnings)

        summary = Summary(
            plot_overview=plot.value,
            main_characters=characters.value,
            themes=themes.value,
            production_notes=notes.value,
            genre=genre.value,
            estimated_budget=extractors.extract_budget_category(sections),
            target_audience=extractors.extract_target_audience(sections),
            tone_and_style=extractors.extract_tone_and_style(sections),
            key_scenes=extractors.extract_key_scenes(sections),
            production_challenges=extractors.extract_production_challenges(sections),
            marketability=extractors.extract_marketability(sections),
            model_used=model_used,
            generation_options=options,
        )
        return summary, warnings
