"""
Cleanup of raw model output before it is treated as HTML or JSON
"""
import json
import re
from typing import Any

# ``` optionally followed by a language tag and a newline
_FENCE = re.compile(r"```[\w-]*\n?")
_FENCED_BLOCK = re.compile(r"```(?:html)?\s*([\s\S]*?)```", re.IGNORECASE)
_LEADING_FENCE = re.compile(r"^```(?:html)?", re.IGNORECASE)
_TRAILING_FENCE = re.compile(r"```$")


def strip_code_fences(text: str) -> str:
    """Remove every fence delimiter and trim surrounding whitespace."""
    if not text:
        return ""
    return _FENCE.sub("", text).strip()


def extract_fenced_block(text: str) -> str:
    """
    Edit flow: keep the content of the first fenced pair when present,
    otherwise drop a stray leading/trailing fence.
    """
    cleaned = (text or "").strip()
    match = _FENCED_BLOCK.search(cleaned)
    if match and match.group(1):
        return match.group(1).strip()
    cleaned = _LEADING_FENCE.sub("", cleaned)
    cleaned = _TRAILING_FENCE.sub("", cleaned)
    return cleaned.strip()


def looks_like_document(text: str) -> bool:
    lowered = (text or "").lower()
    return "<!doctype" in lowered or "<html" in lowered


def parse_json_payload(text: str) -> Any:
    """Strip fences and decode; raises ValueError on invalid JSON."""
    return json.loads(strip_code_fences(text) or "{}")
