"""
Turn raw LLM text into a Suggestions object.

=============================================================================
WHY NOT JUST json.loads()?
=============================================================================

We ask the model for JSON, but what comes back is only *usually* JSON:

    Sure! Here's the analysis:
    ```json
    {
      // overview
      problemAnalysis: {"summary": "...", "complexity": "easy",},
      ...
    }
    ```
    Let me know if you need anything else.

Markdown fences, chatty prose around the object, JavaScript-style comments,
trailing commas, unquoted keys... A strict parser rejects all of these.

=============================================================================
THE REPAIR CHAIN
=============================================================================

We try increasingly aggressive strategies and stop at the first success:

    1. Strip ``` fences
    2. Cut out the text between the first "{" and the last "}"
    3. Parse it as-is
    4. Remove comments and trailing commas, quote bare keys, parse again
    5. Drop every line that looks like a comment, parse again
    6. Give up and return generic suggestions holding the raw text

Each strategy starts from the same isolated text, so a repair that makes
things worse cannot leak into the next attempt.

Whatever parses is then validated into Suggestions, which fills in missing
fields and coerces mistyped ones (see models.py). normalize_response()
never raises: a bad answer from the model becomes a generic answer for the
user, not a stack trace.

Known limitation: the regex repairs in step 4 do not understand JSON
strings, so text like "see http://x" or "a, b: c" inside a value can be
mangled. Step 4 only runs after a strict parse failed, and step 6 still
guarantees a result.
=============================================================================
"""

import json
import logging
import re
from typing import Any, Optional

from pydantic import ValidationError

from .fallback import build_unparsed_suggestions
from .models import Suggestions

logger = logging.getLogger(__name__)

_FENCE_JSON = re.compile(r"```json\s*")
_FENCE = re.compile(r"```\s*")

_LINE_COMMENT = re.compile(r"//.*$", re.MULTILINE)
_BLOCK_COMMENT = re.compile(r"/\*[\s\S]*?\*/")
_TRAILING_COMMA = re.compile(r",(\s*[}\]])")
_BARE_KEY = re.compile(r"([{,]\s*)(\w+):")

_COMMENT_LINE_PREFIXES = ("//", "/*", "*")


# =============================================================================
# STEPS 1-2: ISOLATE THE JSON OBJECT
# =============================================================================

def strip_code_fences(text: str) -> str:
    """Remove markdown code fence markers (with or without a json tag)."""
    text = _FENCE_JSON.sub("", text)
    return _FENCE.sub("", text)


def isolate_json_object(text: str) -> Optional[str]:
    """
    Return the text from the first "{" to the last "}".

    None if there is no such span.
    """
    start = text.find("{")
    end = text.rfind("}")

    if start == -1 or end == -1 or end <= start:
        return None

    return text[start:end + 1]


# =============================================================================
# STEPS 3-5: PARSE ATTEMPTS
# =============================================================================

def _try_parse(text: str) -> Optional[Any]:
    try:
        return json.loads(text)
    except (ValueError, RecursionError):
        return None


def repair_json_text(text: str) -> str:
    """Apply the lenient textual repairs, in order."""
    text = _LINE_COMMENT.sub("", text)
    text = _BLOCK_COMMENT.sub("", text)
    text = _TRAILING_COMMA.sub(r"\1", text)
    text = _BARE_KEY.sub(r'\1"\2":', text)
    return text.strip()


def drop_comment_lines(text: str) -> str:
    """Drop blank lines and lines that start like a comment."""
    kept = []
    for line in text.split("\n"):
        stripped = line.strip()
        if stripped and not stripped.startswith(_COMMENT_LINE_PREFIXES):
            kept.append(line)
    return "\n".join(kept)


def extract_json(raw_text: str) -> Optional[Any]:
    """
    Run steps 1-5 of the repair chain.

    Returns:
        The parsed JSON value, or None if every attempt failed
    """
    cleaned = strip_code_fences(raw_text.strip())

    candidate = isolate_json_object(cleaned)
    if candidate is None:
        logger.debug("No JSON object boundaries found in model output")
        return None

    attempts = [
        ("strict", lambda text: text),
        ("repaired", repair_json_text),
        ("comment lines dropped", drop_comment_lines),
    ]

    for name, transform in attempts:
        parsed = _try_parse(transform(candidate))
        if parsed is not None:
            logger.debug("Parsed model output (%s)", name)
            return parsed
        logger.debug("Parse attempt failed (%s)", name)

    return None


# =============================================================================
# PUBLIC ENTRY POINT
# =============================================================================

def normalize_response(raw_text: str) -> Suggestions:
    """
    Convert raw model output into a fully populated Suggestions object.

    Never raises. Unparseable input gives generic suggestions whose
    raw_response holds the original text.
    """
    if not isinstance(raw_text, str):
        raw_text = "" if raw_text is None else str(raw_text)

    try:
        parsed = extract_json(raw_text)

        if isinstance(parsed, dict):
            try:
                return Suggestions.model_validate(parsed)
            except ValidationError as e:
                logger.warning("Model output did not fit the suggestions schema: %s", e)
        elif parsed is not None:
            logger.warning("Model output parsed to %s, expected an object", type(parsed).__name__)

    except Exception:
        logger.exception("Unexpected error while normalizing model output")

    logger.warning("Could not parse model output, using generic suggestions")
    return build_unparsed_suggestions(raw_text)
