# core/response_parser.py
from __future__ import annotations
import json, logging, re
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)

DIAGNOSTIC_CHARS = 500


class FailureReason(str, Enum):
    EMPTY_INPUT = "empty_input"
    NO_JSON_FOUND = "no_json_found"
    MALFORMED_AFTER_RECOVERY = "malformed_after_recovery"
    MISSING_REQUIRED_FIELDS = "missing_required_fields"


class ParseSuccess(BaseModel):
    model_config = ConfigDict(frozen=True)

    record: Dict[str, Any]

    @property
    def ok(self) -> bool:
        return True


class ParseFailure(BaseModel):
    model_config = ConfigDict(frozen=True)

    reason: FailureReason
    detail: str = ""

    @property
    def ok(self) -> bool:
        return False


ParseOutcome = Union[ParseSuccess, ParseFailure]
RecoveryStage = Callable[[str], Union[str, ParseFailure]]

# ---------- Regexes ----------
_FENCE_RE = re.compile(r"^[ \t]*```[A-Za-z0-9_+\-]*", re.M)
_STRING_RE = re.compile(r'"(?:[^"\\]|\\.)*"', re.S)
_CONTROL_RE = re.compile(r"[\x00-\x1f\x7f-\x9f]")
_TRAILING_COMMA_RE = re.compile(r",(\s*[}\]])")
_BARE_KEY_RE = re.compile(r"([{,]\s*)([A-Za-z_][A-Za-z0-9_]*)(\s*):")
_QUOTE_RUN_RE = re.compile(r'"{2,}')


def _outside_strings(text: str, repair: Callable[[str], str]) -> str:
    """Apply `repair` only to the spans of `text` that sit between string literals."""
    parts: List[str] = []
    pos = 0
    for m in _STRING_RE.finditer(text):
        parts.append(repair(text[pos:m.start()]))
        parts.append(m.group(0))
        pos = m.end()
    parts.append(repair(text[pos:]))
    return "".join(parts)


def _is_escaped(text: str, pos: int) -> bool:
    backslashes = len(text[:pos]) - len(text[:pos].rstrip("\\"))
    return backslashes % 2 == 1


def _collapse_quote_run(m: re.Match) -> str:
    run = m.group(0)
    if _is_escaped(m.string, m.start()):
        # \"" is an escaped quote followed by the closing one
        return run if len(run) == 2 else '""'
    if len(run) == 2:
        # keep a real empty string such as  "key": "",  ["", 1]  or  {"": 1}
        before = m.string[:m.start()].rstrip()[-1:]
        after = m.string[m.end():].lstrip()[:1]
        if before in (":", ",", "[", "{") and after in (",", "}", "]", ":"):
            return run
    return '"'


# ---------- Recovery stages ----------
def direct(text: str) -> str:
    return text.strip()


def strip_fences(text: str) -> Union[str, ParseFailure]:
    cleaned = _FENCE_RE.sub("", text).strip()
    start = cleaned.find("{")
    if start == -1:
        return ParseFailure(reason=FailureReason.NO_JSON_FOUND, detail=text[:DIAGNOSTIC_CHARS])
    end = cleaned.rfind("}")
    if end < start:
        # unterminated object; let the repair stage have a go before giving up
        return cleaned[start:]
    return cleaned[start:end + 1]


def strip_control_chars(text: str) -> str:
    return _CONTROL_RE.sub("", text)


def remove_trailing_commas(text: str) -> str:
    return _outside_strings(text, lambda chunk: _TRAILING_COMMA_RE.sub(r"\1", chunk))


def quote_bare_keys(text: str) -> str:
    return _outside_strings(text, lambda chunk: _BARE_KEY_RE.sub(r'\1"\2"\3:', chunk))


def collapse_quote_runs(text: str) -> str:
    return _QUOTE_RUN_RE.sub(_collapse_quote_run, text)


def repair_syntax(text: str) -> str:
    for fix in (strip_control_chars, remove_trailing_commas, quote_bare_keys, collapse_quote_runs):
        text = fix(text)
    return text


RECOVERY_STAGES: List[RecoveryStage] = [direct, strip_fences, repair_syntax]


# ---------- Helpers ----------
def _decode_object(text: str) -> Optional[Dict[str, Any]]:
    try:
        data = json.loads(text)
    except (ValueError, RecursionError):
        # RecursionError: nesting deeper than the decoder's stack allows
        return None
    return data if isinstance(data, dict) else None


def _missing_fields(record: Dict[str, Any], required_fields: Iterable[str]) -> List[str]:
    if isinstance(required_fields, (set, frozenset)):
        required_fields = sorted(required_fields)
    missing: List[str] = []
    for field in required_fields:
        if field not in record and field not in missing:
            missing.append(field)
    return missing


# ---------- Public API ----------
def parse_response(raw: Optional[str], required_fields: Iterable[str] = ()) -> ParseOutcome:
    """
    Recover a JSON object from raw model output.

    Stages run in order, each on the previous stage's text, and a strict decode
    is tried after every stage. Never raises: every outcome is a ParseSuccess or
    a ParseFailure carrying a reason and a diagnostic string.
    """
    if not raw or not raw.strip():
        return ParseFailure(reason=FailureReason.EMPTY_INPUT, detail="")

    text = raw
    for stage in RECOVERY_STAGES:
        result = stage(text)
        if isinstance(result, ParseFailure):
            logger.warning("No JSON object in model output (%d chars)", len(raw))
            return result
        text = result
        record = _decode_object(text)
        if record is None:
            continue
        logger.debug("Model output decoded at stage %s", stage.__name__)
        missing = _missing_fields(record, required_fields)
        if missing:
            logger.warning("Model output missing required fields: %s", missing)
            return ParseFailure(reason=FailureReason.MISSING_REQUIRED_FIELDS, detail=", ".join(missing))
        return ParseSuccess(record=record)

    logger.warning("Model output still malformed after recovery")
    return ParseFailure(reason=FailureReason.MALFORMED_AFTER_RECOVERY, detail=raw[:DIAGNOSTIC_CHARS])


class ResponseRecoveryParser:
    """Holds a default set of required fields; `parse` delegates to parse_response."""

    def __init__(self, required_fields: Iterable[str] = ()):
        self.required_fields = tuple(required_fields)

    def parse(self, raw: Optional[str], required_fields: Optional[Iterable[str]] = None) -> ParseOutcome:
        fields = self.required_fields if required_fields is None else required_fields
        return parse_response(raw, fields)


__all__ = [
    "FailureReason", "ParseSuccess", "ParseFailure", "ParseOutcome",
    "RECOVERY_STAGES", "ResponseRecoveryParser", "parse_response",
    "direct", "strip_fences", "repair_syntax",
    "strip_control_chars", "remove_trailing_commas", "quote_bare_keys", "collapse_quote_runs",
]
