from scriptlens.analysis import extractors
from scriptlens.analysis.models import (
    BudgetCategory,
    BudgetImpact,
    CharacterImportance,
    ProductionCategory,
)

LONG_PLOT = (
    "A burned-out detective returns to the precinct she swore she would never "
    "see again to find a missing girl."
)


class TestPlotOverview:
    def test_first_long_paragraph(self) -> None:
        result = extractors.extract_plot_overview({"plot_overview": f"Short.\n\n{LONG_PLOT}"})
        assert result.value == LONG_PLOT
        assert result.warnings == []

    def test_too_brief(self) -> None:
        result = extractors.extract_plot_overview({"plot_overview": "Too short"})
        assert result.value == "Too short"
        assert result.warnings == ["Plot overview appears to be too brief"]

    def test_falls_back_to_general(self) -> None:
        assert extractors.extract_plot_overview({"general": LONG_PLOT}).value == LONG_PLOT

    def test_missing(self) -> None:
        result = extractors.extract_plot_overview({})
        assert result.value == extractors.PLOT_UNAVAILABLE
        assert result.warnings


class TestCharacters:
    def test_parse_character_line(self) -> None:
        character = extractors.parse_character_line("SARAH - The protagonist, a detective")
        assert character is not None
        assert character.name == "SARAH"
        assert character.description == "The protagonist, a detective"
        assert character.importance == CharacterImportance.PROTAGONIST

    def test_multi_word_name_and_colon(self) -> None:
        character = extractors.parse_character_line("MARCUS DEAN: Her former partner")
        assert character is not None
        assert character.name == "MARCUS DEAN"
        assert character.description == "Her former partner"

    def test_numbered_line(self) -> None:
        character = extractors.parse_character_line("1. SARAH - lead investigator")
        assert character is not None
        assert character.name == "SARAH"
        assert character.importance == CharacterImportance.MAIN

    def test_lowercase_line_is_not_a_character(self) -> None:
        assert extractors.parse_character_line("the detective") is None

    def test_missing_section(self) -> None:
        result = extractors.extract_characters({})
        assert result.value == []
        assert result.warnings == ["No character information found in response"]

    def test_unparseable_section(self) -> None:
        result = extractors.extract_characters({"main_characters": "a lowercase description"})
        assert result.value == []
        assert result.warnings == ["Could not parse character information from response"]

    def test_skips_short_lines(self) -> None:
        section = "BOB - cop\nSARAH - The protagonist, a detective"
        names = [c.name for c in extractors.extract_characters({"main_characters": section}).value]
        assert names == ["SARAH"]


class TestThemes:
    def test_strips_markers_and_short_items(self) -> None:
        section = "1. Redemption and guilt\n- Love\n• Trust between partners"
        result = extractors.extract_themes({"themes": section})
        assert result.value == ["Redemption and guilt", "Trust between partners"]

    def test_capped(self) -> None:
        section = "\n".join(f"Theme number {i}" for i in range(15))
        assert len(extractors.extract_themes({"themes": section}).value) == extractors.MAX_THEMES

    def test_missing(self) -> None:
        assert extractors.extract_themes({}).warnings == ["No theme information found in response"]


class TestProductionNotes:
    def test_classifies_notes(self) -> None:
        section = "- Expensive night exteriors need rain towers\n- Short one"
        notes = extractors.extract_production_notes({"production_notes": section}).value
        assert len(notes) == 1
        assert notes[0].category == ProductionCategory.BUDGET
        assert notes[0].budget_impact == BudgetImpact.MAJOR
        assert notes[0].content == "Expensive night exteriors need rain towers"
        assert notes[0].requirements == []

    def test_falls_back_to_challenges(self) -> None:
        sections = {"production_challenges": "Securing the rooftop location permit early"}
        assert len(extractors.extract_production_notes(sections).value) == 1

    def test_missing(self) -> None:
        assert extractors.extract_production_notes({}).warnings == [
            "No production notes found in response"
        ]


class TestGenreAndOptionalFields:
    def test_genre(self) -> None:
        assert extractors.extract_genre({"genre": "Psychological thriller"}).value == "Thriller"

    def test_unknown_genre(self) -> None:
        result = extractors.extract_genre({"genre": "Hard to say"})
        assert result.value == "Unknown"
        assert result.warnings == ["Could not determine genre from response"]

    def test_budget_category(self) -> None:
        sections = {"production_notes": "A low budget shoot over three weeks"}
        assert extractors.extract_budget_category(sections) == BudgetCategory.LOW

    def test_target_audience(self) -> None:
        sections = {"marketability": "Strong hook. Target audience: adults who love procedurals."}
        assert extractors.extract_target_audience(sections) == "adults who love procedurals"

    def test_tone_requires_some_text(self) -> None:
        assert extractors.extract_tone_and_style({"tone_and_style": "Bleak"}) is None
        tone = "Bleak, rain-soaked noir with dry humour"
        assert extractors.extract_tone_and_style({"tone_and_style": tone}) == tone

    def test_marketability(self) -> None:
        assert extractors.extract_marketability({}) is None
        text = "Strong festival potential with a clear hook"
        assert extractors.extract_marketability({"marketability": text}) == text

    def test_key_scenes(self) -> None:
        sections = {"key_scenes": "1. The rooftop confrontation in the rain\nshort"}
        assert extractors.extract_key_scenes(sections) == ["The rooftop confrontation in the rain"]
        assert extractors.extract_key_scenes({}) is None

    def test_production_challenges(self) -> None:
        sections = {"production_challenges": "Night shoots with a child actor in winter"}
        assert extractors.extract_production_challenges(sections) == [
            "Night shoots with a child actor in winter"
        ]


class TestSpeakerNames:
    def test_extracts_speaker_cues(self) -> None:
        script = "SARAH: Hi.\nMARCUS (V.O.): Hey.\nSARAH: Again.\nINT. ROOM - DAY\nBOB: Yo."
        assert extractors.extract_speaker_names(script) == ["SARAH", "MARCUS", "BOB"]

    def test_does_not_span_lines(self) -> None:
        assert extractors.extract_speaker_names("FADE IN\nSARAH: Hi.") == ["SARAH"]

    def test_capped(self) -> None:
        script = "\n".join(f"{name}: line" for name in [f"SPEAKER {chr(65 + i)}" for i in range(15)])
        assert len(extractors.extract_speaker_names(script)) == extractors.MAX_FALLBACK_CHARACTERS
