"""
Text extractor for conversation events of unknown shape.

Transcript producers (STT streams, chat SDKs, realtime agents) each wrap the
spoken text differently. Extraction is an ordered chain of stages; each stage
returns the text it found or None, and the first non-empty result wins.
"""
import logging
from typing import Any, Callable, List, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)

ROLE_FIELDS = ("role", "sender", "speaker")
BOT_ROLE_MARKERS = ("interviewer", "assistant", "bot", "system", "agent")
USER_ROLE_MARKERS = ("candidate", "user", "applicant")

ROLE_BOT = "bot"
ROLE_USER = "user"
ROLE_UNKNOWN = "unknown"

# Direct string fields, checked before any unwrapping
TEXT_FIELDS = ("text", "content", "message")

# Nested containers, unwrapped in this order
NESTED_FIELDS = (
    "payload",
    "delta",
    "message",
    "data",
    "body",
    "parts",
    "args",
    "segment",
    "chunk",
    "value",
)

MAX_DEPTH = 8

Stage = Callable[[Mapping[str, Any]], Optional[str]]


def resolve_role(event: Any) -> str:
    """
    Classify the speaker of an event as 'bot', 'user' or 'unknown'.

    The first non-empty field among role/sender/speaker is lower-cased and
    matched by substring against the interviewer and candidate markers.
    """
    if not isinstance(event, Mapping):
        return ROLE_UNKNOWN

    raw = ""
    for field in ROLE_FIELDS:
        value = event.get(field)
        if value:
            raw = str(value).lower()
            break

    if any(marker in raw for marker in BOT_ROLE_MARKERS):
        return ROLE_BOT
    if any(marker in raw for marker in USER_ROLE_MARKERS):
        return ROLE_USER
    return ROLE_UNKNOWN


def _direct_field_stage(field: str) -> Stage:
    def stage(event: Mapping[str, Any]) -> Optional[str]:
        value = event.get(field)
        if isinstance(value, str) and value:
            return value
        return None
    return stage


def _nested_field_stage(field: str) -> Stage:
    def stage(event: Mapping[str, Any]) -> Optional[str]:
        if field not in event:
            return None
        return _unwrap(event[field], depth=1) or None
    return stage


EXTRACTION_CHAIN: List[Stage] = (
    [_direct_field_stage(field) for field in TEXT_FIELDS]
    + [_nested_field_stage(field) for field in NESTED_FIELDS]
)


def _unwrap(value: Any, depth: int) -> str:
    """Flatten a nested container into text: arrays concatenate, objects recurse."""
    if value is None or depth > MAX_DEPTH:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)):
        return "".join(_unwrap(item, depth + 1) for item in value)
    if isinstance(value, Mapping):
        for field in TEXT_FIELDS:
            candidate = value.get(field)
            if isinstance(candidate, str) and candidate:
                return candidate
        for field in NESTED_FIELDS:
            if field in value:
                text = _unwrap(value[field], depth + 1)
                if text:
                    return text
        return ""
    if isinstance(value, bool):
        return ""
    return str(value)


def extract_text(event: Any) -> str:
    """
    Return the plain text carried by an event; never raises.

    Args:
        event: Mapping of unknown shape, or a bare string/list

    Returns:
        Extracted text, or "" when nothing usable is found
    """
    if event is None:
        return ""
    if not isinstance(event, Mapping):
        return _unwrap(event, depth=0)

    for stage in EXTRACTION_CHAIN:
        try:
            text = stage(event)
        except Exception as e:
            logger.debug(f"Text extraction stage failed: {e}")
            continue
        if text:
            return text
    return ""


def extract(event: Any) -> Tuple[str, str]:
    """Return (role, text) for one event."""
    return resolve_role(event), extract_text(event)
