"""
Structured extraction of oracle output.

The oracle answers in free text that usually, but not always, contains the
JSON we asked for. ``extract`` finds the first balanced JSON fragment of the
right shape, validates it against the pydantic models and reports problems
as an ``ExtractionError`` value instead of raising.
"""
from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from typing import Any, Literal

from pydantic import BaseModel, ValidationError

from .models import PLACEHOLDER_IMAGES, ContentKind, LocalDiscovery, Suggestion

logger = logging.getLogger(__name__)

_PAIRS = {"[": "]", "{": "}"}
_CLOSERS = {"]", "}"}


class ExtractionError(BaseModel):
    kind: Literal["extraction", "validation"]
    message: str


class ExtractionResult(BaseModel):
    payload: list[Suggestion] | LocalDiscovery | None = None
    error: ExtractionError | None = None
    dropped: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None and self.payload is not None


def _balanced_end(text: str, start: int) -> int | None:
    """Return the index closing the bracket opened at ``start``, or None."""
    stack: list[str] = []
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch in _PAIRS:
            stack.append(_PAIRS[ch])
        elif ch in _CLOSERS:
            if not stack or stack.pop() != ch:
                return None
            if not stack:
                return i
    return None


def iter_json_fragments(text: str, opener: str) -> Iterator[Any]:
    """Yield every well-formed JSON fragment starting with ``opener``, left to right."""
    start = text.find(opener)
    while start != -1:
        end = _balanced_end(text, start)
        if end is not None:
            try:
                yield json.loads(text[start : end + 1])
            except json.JSONDecodeError:
                pass
        start = text.find(opener, start + 1)


def find_json_fragment(text: str, opener: str) -> Any | None:
    """Return the first well-formed fragment starting with ``opener``, or None."""
    return next(iter_json_fragments(text, opener), None)


def _validate_suggestions(data: Any) -> ExtractionResult:
    if not isinstance(data, list):
        return ExtractionResult(
            error=ExtractionError(kind="validation", message="suggestions payload is not a list")
        )

    valid: list[Suggestion] = []
    seen_ids: set[str] = set()
    dropped = 0
    for index, item in enumerate(data):
        try:
            suggestion = Suggestion.model_validate(item)
        except ValidationError as exc:
            dropped += 1
            logger.info("Dropping malformed suggestion #%d: %s", index, exc.errors()[0]["msg"])
            continue
        if suggestion.id in seen_ids:
            dropped += 1
            logger.info("Dropping duplicate suggestion id %r", suggestion.id)
            continue
        seen_ids.add(suggestion.id)
        if not suggestion.photo_url:
            suggestion = suggestion.model_copy(
                update={"photo_url": PLACEHOLDER_IMAGES[suggestion.category]}
            )
        valid.append(suggestion)

    if not valid:
        return ExtractionResult(
            error=ExtractionError(kind="validation", message="no valid suggestions in payload"),
            dropped=dropped,
        )
    return ExtractionResult(payload=valid, dropped=dropped)


def _validate_local_discovery(data: Any) -> ExtractionResult:
    try:
        return ExtractionResult(payload=LocalDiscovery.model_validate(data))
    except ValidationError as exc:
        return ExtractionResult(
            error=ExtractionError(kind="validation", message=f"invalid local discovery: {exc.error_count()} errors")
        )


def extract(raw_text: str, kind: ContentKind) -> ExtractionResult:
    """Locate, parse and validate the payload for ``kind`` inside ``raw_text``."""
    opener = "[" if kind is ContentKind.suggestions else "{"
    data = find_json_fragment(raw_text or "", opener)
    if data is None:
        return ExtractionResult(
            error=ExtractionError(kind="extraction", message=f"no JSON fragment starting with {opener!r} found")
        )

    if kind is ContentKind.suggestions:
        return _validate_suggestions(data)
    return _validate_local_discovery(data)
