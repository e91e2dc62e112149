"""content.parsing

Tolerant JSON extraction for generator output.

Even with a JSON response mime type, models sometimes wrap the object in a
code fence, prepend a sentence, or leave a trailing comma. We only clean text
and call json.loads; nothing is evaluated.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class ParseResult:
    data: Optional[Dict[str, Any]]
    raw: str
    cleaned: str
    error: str = ""


_FENCE_RE = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL | re.IGNORECASE)
_TRAILING_COMMA_RE = re.compile(r",\s*([}\]])")

_SMART_QUOTES = {
    "\u201c": '"',
    "\u201d": '"',
    "\u2018": "'",
    "\u2019": "'",
    "\u00a0": " ",
}


def strip_code_fences(s: str) -> str:
    s = (s or "").strip()
    m = _FENCE_RE.search(s)
    return (m.group(1) or "").strip() if m else s


def extract_first_object(s: str) -> str:
    """Slice from the first '{' to the last '}' (best effort)."""
    start = s.find("{")
    if start < 0:
        return s
    end = s.rfind("}")
    return s[start:] if end <= start else s[start : end + 1]


def normalize_text(s: str) -> str:
    for src, dst in _SMART_QUOTES.items():
        s = s.replace(src, dst)
    return _TRAILING_COMMA_RE.sub(r"\1", s)


def try_parse_json(raw: str) -> ParseResult:
    """Best-effort parse. Returns ParseResult(data=None, error=...) on failure."""
    raw = (raw or "").strip()
    cleaned = normalize_text(extract_first_object(strip_code_fences(raw)))

    try:
        obj = json.loads(cleaned)
    except json.JSONDecodeError as e:
        return ParseResult(data=None, raw=raw, cleaned=cleaned, error=f"json.loads: {e}")

    # Some models answer with a one-element list.
    if isinstance(obj, list) and len(obj) == 1:
        obj = obj[0]
    if not isinstance(obj, dict):
        return ParseResult(data=None, raw=raw, cleaned=cleaned, error="JSON root is not an object")
    return ParseResult(data=obj, raw=raw, cleaned=cleaned)


def must_parse_json(raw: str) -> Dict[str, Any]:
    res = try_parse_json(raw)
    if res.data is None:
        raise ValueError(res.error or "JSON parse failed")
    return res.data
