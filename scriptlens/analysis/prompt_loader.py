from pathlib import Path

from scriptlens.analysis.exceptions import PromptTemplateError

_DEFAULT_PROMPT_DIR = Path(__file__).parent / "prompts"


def load_prompt_template(name: str, prompt_dir: Path | None = None) -> str:
    """Load a bundled prompt template by name.

    Args:
        name: Template file stem, e.g. "character_analysis".
        prompt_dir: Directory holding the templates.
                    Defaults to the bundled prompts/ directory.

    Returns:
        The raw template string with str.format placeholders.

    Raises:
        PromptTemplateError: if the file cannot be read.
    """
    path = (prompt_dir or _DEFAULT_PROMPT_DIR) / f"{name}.txt"
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise PromptTemplateError(f"Failed to load prompt template '{name}': {exc}") from exc
