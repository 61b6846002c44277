import json
import re
from typing import Any, Dict, List, Union, Optional

from app.core.config import settings
from app.utils.logging import get_logger

LOGGER = get_logger(__name__, level=settings.log_level)

JSONValue = Union[Dict[str, Any], List[Any]]

_CODE_FENCE = re.compile(r"^```(?:json|JSON)?\s*|\s*```$")


def strip_code_fences(text: str) -> str:
    """Remove a surrounding markdown code block (```json ... ```)."""
    return _CODE_FENCE.sub("", text.strip()).strip()


def parse_json_safely(text: Optional[str]) -> Optional[JSONValue]:
    """Parse JSON from model output, handling common LLM formatting issues.

    Handles:
    - Markdown code blocks (```json ... ```)
    - Leading/trailing whitespace or prose around a single object
    - Concatenated JSON objects (e.g., {...}\\n{...})

    Args:
        text: The text containing JSON

    Returns:
        Parsed JSON object or array, or None if nothing parseable was found
    """
    if not text or not text.strip():
        return None

    cleaned_text = strip_code_fences(text)

    try:
        return json.loads(cleaned_text)
    except json.JSONDecodeError as e:
        LOGGER.warning(f"Initial JSON parse failed: {e}, attempting repairs...")

    values = _decode_all(cleaned_text)
    if not values:
        LOGGER.error("Failed to parse JSON", extra={"preview": cleaned_text[:200]})
        return None

    if len(values) == 1:
        return values[0]

    LOGGER.info(f"Parsed {len(values)} concatenated JSON values, merging into single result")
    return _merge_json_objects(values)


def _decode_all(text: str) -> List[Any]:
    """Decode every top-level JSON object or array embedded in text."""
    decoder = json.JSONDecoder()
    results: List[Any] = []
    idx = 0

    while idx < len(text):
        starts = [pos for pos in (text.find("{", idx), text.find("[", idx)) if pos != -1]
        if not starts:
            break
        start = min(starts)

        try:
            obj, end_idx = decoder.raw_decode(text, start)
        except json.JSONDecodeError:
            idx = start + 1
            continue

        results.append(obj)
        idx = end_idx

    return results


def _merge_json_objects(objects: List[Any]) -> JSONValue:
    """Merge a list of parsed JSON values into a single result.

    Dicts are merged key by key (lists concatenated, later scalars win) and
    lists are flattened. When dicts and lists are mixed, the lists are
    dropped: bracketed asides in surrounding prose decode as stray arrays.
    """
    dicts = [obj for obj in objects if isinstance(obj, dict)]
    if dicts and len(dicts) < len(objects):
        LOGGER.debug(f"Dropping {len(objects) - len(dicts)} non-object JSON value(s) before merge")
        objects = dicts

    if all(isinstance(obj, dict) for obj in objects):
        merged: Dict[str, Any] = {}
        for obj in objects:
            for key, value in obj.items():
                existing = merged.get(key)
                if isinstance(existing, list) and isinstance(value, list):
                    merged[key] = existing + value
                elif isinstance(existing, dict) and isinstance(value, dict):
                    merged[key] = {**existing, **value}
                else:
                    if key in merged:
                        LOGGER.debug(f"Key conflict during merge: {key}, using later value")
                    merged[key] = value
        return merged

    flattened: List[Any] = []
    for obj in objects:
        flattened.extend(obj)
    return flattened
