from scriptlens.analysis.models import AnalysisOptions, ParsedResponse, Summary
from scriptlens.analysis.prompt_builder import PromptBuilder
from scriptlens.analysis.response_parser import ResponseParser

__all__ = ["AnalysisOptions", "ParsedResponse", "PromptBuilder", "ResponseParser", "Summary"]
