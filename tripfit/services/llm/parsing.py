"""
Turn free-form model output into a validated outfit recommendation.

The model is asked for bare JSON but may wrap it in prose or code fences, or
return something truncated. Extraction tries a strict parse first, then the
outermost ``{...}`` span, and reports a ParseFailure when both fail. Field
validation only insists on top/bottom/shoes; everything else is defaulted.
"""
from __future__ import annotations

import json
import re
from typing import Any

from tripfit.services.llm.types import (
    OutfitRecommendation,
    ParsedRecommendation,
    ParseFailure,
    ParseResult,
    ParseSuccess,
    RecommendationParseError,
)

_FENCE_RE = re.compile(r"```(?:json)?\s*\n?|\n?```", re.IGNORECASE)
_OBJECT_RE = re.compile(r"\{[\s\S]*\}")

REQUIRED_FIELDS = ("top", "bottom", "shoes")
COLOR_FIELDS = ("topColor", "bottomColor", "shoesColor", "accessoriesColor", "outerwearColor")


def strip_code_fences(text: str) -> str:
    return _FENCE_RE.sub("", text).strip()


def _as_object(raw: str, value: Any) -> ParseResult:
    if not isinstance(value, dict):
        return ParseFailure(reason=f"expected a JSON object, got {type(value).__name__}", raw=raw)
    return ParseSuccess(data=value)


def _first_object(text: str) -> dict | None:
    decoder = json.JSONDecoder()
    idx = text.find("{")
    while idx != -1:
        try:
            value, _ = decoder.raw_decode(text, idx)
        except json.JSONDecodeError:
            value = None
        if isinstance(value, dict):
            return value
        idx = text.find("{", idx + 1)
    return None


def extract_json(text: str | None) -> ParseResult:
    raw = text or ""
    cleaned = strip_code_fences(raw)
    if not cleaned:
        return ParseFailure(reason="empty model response", raw=raw)

    try:
        return _as_object(raw, json.loads(cleaned))
    except json.JSONDecodeError:
        pass

    match = _OBJECT_RE.search(cleaned)
    if not match:
        return ParseFailure(reason="no JSON object found in model response", raw=raw)
    try:
        return _as_object(raw, json.loads(match.group(0)))
    except json.JSONDecodeError as e:
        # stray braces in trailing prose widen the greedy span
        found = _first_object(cleaned)
        if found is not None:
            return ParseSuccess(data=found)
        return ParseFailure(reason=f"invalid JSON in model response: {e.msg} at char {e.pos}", raw=raw)


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, (int, float)):
        return str(value)
    return ""


def _accessories(value: Any) -> list[str]:
    if isinstance(value, list):
        return [t for t in (_text(v) for v in value) if t]
    if isinstance(value, str) and value.strip():
        return [value.strip()]
    return []


def validate_recommendation(data: dict) -> ParsedRecommendation:
    missing = [f for f in REQUIRED_FIELDS if not _text(data.get(f))]
    if missing:
        raise RecommendationParseError(f"invalid outfit structure: missing required field(s): {', '.join(missing)}")

    outfit = OutfitRecommendation(
        top=_text(data["top"]),
        bottom=_text(data["bottom"]),
        shoes=_text(data["shoes"]),
        accessories=_accessories(data.get("accessories")),
        outerwear=_text(data.get("outerwear")),
        **{f: _text(data.get(f)) for f in COLOR_FIELDS},
    )
    return ParsedRecommendation(outfit=outfit, cultural_notes=_text(data.get("culturalNotes")))


def parse_recommendation(text: str | None) -> ParsedRecommendation:
    result = extract_json(text)
    if isinstance(result, ParseFailure):
        raise RecommendationParseError(f"failed to parse outfit recommendation: {result.reason}", result)
    return validate_recommendation(result.data)
