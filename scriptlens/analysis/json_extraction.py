import json
import re
from typing import Any

from scriptlens.analysis.exceptions import MalformedJsonError, NoJsonFoundError

# Greedy: from the first "{" to the last "}".
_JSON_OBJECT_RE = re.compile(r"\{.*\}", re.DOTALL)


def parse_json_response(response: str) -> dict[str, Any]:
    """Locate and decode the JSON object embedded in a model response.

    Raises:
        NoJsonFoundError: if the response contains no brace-delimited object.
        MalformedJsonError: if the located text is not a valid JSON object.
    """
    match = _JSON_OBJECT_RE.search(response)
    if match is None:
        raise NoJsonFoundError("No JSON structure found in response")
    try:
        parsed = json.loads(match.group(0))
    except json.JSONDecodeError as exc:
        raise MalformedJsonError(f"Failed to parse JSON: {exc}") from exc
    if not isinstance(parsed, dict):
        raise MalformedJsonError("JSON response must be an object")
    return parsed
