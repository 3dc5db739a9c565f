"""
Parse raw LLM completions into assessments

Purpose: turn the completion text into a tagged ParsedAiResponse, then into an AiAssessment. The model is asked
for JSON but may answer in prose, so parsing never fails: non-JSON text becomes a "malformed" result and the
fallback for it is applied in exactly one place (to_assessment).

Input: completion text (str).

Output: ParsedOk(AiAssessment) | Malformed(raw_text); to_assessment() -> AiAssessment.

Example: '{"general_summary":"G","personalized_summary":"P","status":"danger"}' -> ParsedOk(status=danger, source="")
         "Sorry, I cannot help." -> Malformed -> both summaries "Sorry, I cannot help.", status=safe
"""
import json
import logging

from models import AiAssessment, Malformed, ParsedAiResponse, ParsedOk, SafetyStatus

logger = logging.getLogger(__name__)


def _text(value) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


# parser.py
def parse_completion(text: str) -> ParsedAiResponse:
    """
    Strict JSON parse of the completion text.

    Only a JSON object counts as a well-formed answer. Absent fields default silently:
    status -> safe (also for values outside safe/caution/danger), summaries and source -> "".
    """
    raw = text or ""
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, TypeError, ValueError):
        logger.debug("[PARSE] completion is not JSON (%d chars)", len(raw))
        return Malformed(raw_text=raw)

    if not isinstance(data, dict):
        logger.debug("[PARSE] completion is JSON but not an object: %s", type(data).__name__)
        return Malformed(raw_text=raw)

    if "status" not in data:
        logger.warning("[PARSE] completion has no status, defaulting to safe")

    return ParsedOk(value=AiAssessment(
        general_summary=_text(data.get("general_summary")),
        personalized_summary=_text(data.get("personalized_summary")),
        status=SafetyStatus.coerce(data.get("status"), default=SafetyStatus.SAFE),
        source=_text(data.get("source")),
    ))


def to_assessment(parsed: ParsedAiResponse) -> AiAssessment:
    if isinstance(parsed, ParsedOk):
        return parsed.value
    # Malformed: the raw text stands in for both summaries.
    return AiAssessment(
        general_summary=parsed.raw_text,
        personalized_summary=parsed.raw_text,
        status=SafetyStatus.SAFE,
        source="",
    )
