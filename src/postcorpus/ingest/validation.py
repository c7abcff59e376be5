"""Validation of parsed frontmatter into typed post metadata."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import TYPE_CHECKING, Any, Final

from postcorpus.date_utils import parse_post_date
from postcorpus.exceptions import InvalidDateError, MissingDateError, MissingTitleError
from postcorpus.text import normalize_tag
from postcorpus.types import Frontmatter, TriageReason, TriageRecord, TriageSeverity

if TYPE_CHECKING:
    from postcorpus.ingest.frontmatter import ParsedSegment
    from postcorpus.ingest.splitter import RawSegment

logger = logging.getLogger(__name__)

KNOWN_FIELDS: Final = frozenset({"title", "date", "excerpt", "tags", "featured", "coverImage"})

_TRUE_STRINGS: Final = frozenset({"true", "yes", "on", "1"})
_FALSE_STRINGS: Final = frozenset({"false", "no", "off", "0", ""})


@dataclass(frozen=True, slots=True)
class ValidatedSegment:
    """A segment whose metadata passed validation, with any recoverable warnings."""

    segment: RawSegment
    frontmatter: Frontmatter
    body: str
    warnings: tuple[TriageRecord, ...] = ()


class _WarningCollector:
    def __init__(self, segment: RawSegment) -> None:
        self.segment = segment
        self.records: list[TriageRecord] = []

    def add(self, reason: TriageReason, detail: str) -> None:
        record = TriageRecord(
            source_path=self.segment.source_path,
            segment_index=self.segment.index,
            reason=reason,
            severity=TriageSeverity.WARNING,
            detail=detail,
        )
        logger.warning("%s#%d: %s (%s)", record.source_path, self.segment.index, reason.value, detail)
        self.records.append(record)


def validate_segment(parsed: ParsedSegment) -> ValidatedSegment:
    """Check required fields and coerce the rest, defaulting what can be defaulted.

    Raises:
        MissingTitleError: ``title`` is absent or blank.
        MissingDateError: ``date`` is absent.
        InvalidDateError: ``date`` does not parse to a calendar date.

    """
    segment = parsed.segment
    fm = parsed.frontmatter
    fields = fm.fields
    warnings = _WarningCollector(segment)

    for issue in fm.issues:
        warnings.add(TriageReason.MALFORMED_LINE, issue)

    title = _coerce_text(fields.get("title"))
    if not title:
        raise MissingTitleError(segment.source_path, segment.index)
    if "title" in fm.invalid:
        warnings.add(TriageReason.MALFORMED_LINE, "title kept as raw text")

    raw_date = fields.get("date")
    if raw_date is None or raw_date == "":
        raise MissingDateError(segment.source_path, segment.index)
    post_date = parse_post_date(raw_date)
    if post_date is None:
        raise InvalidDateError(segment.source_path, segment.index, f"unparseable date {raw_date!r}")

    excerpt = _coerce_text(fields.get("excerpt"))
    if "excerpt" in fm.invalid:
        warnings.add(TriageReason.MALFORMED_LINE, "excerpt kept as raw text")

    cover_image = _coerce_text(fields.get("coverImage")) or None

    frontmatter = Frontmatter(
        title=title,
        date=post_date,
        excerpt=excerpt,
        tags=_coerce_tags(fields.get("tags"), warnings),
        featured=_coerce_featured(fields.get("featured"), warnings),
        cover_image=cover_image,
        extra={key: value for key, value in fields.items() if key not in KNOWN_FIELDS},
    )
    return ValidatedSegment(
        segment=segment,
        frontmatter=frontmatter,
        body=parsed.body,
        warnings=tuple(warnings.records),
    )


def _coerce_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, (int, float, bool)):
        return str(value)
    if isinstance(value, date):
        return value.isoformat()
    return ""


def _coerce_tags(value: Any, warnings: _WarningCollector) -> tuple[str, ...]:
    """Return display tags in source order, dropping blanks and case-insensitive repeats."""
    if value is None:
        return ()

    if isinstance(value, str):
        candidates = value.strip().strip("[]").split(",")
    elif isinstance(value, (list, tuple)):
        candidates = value
    else:
        warnings.add(TriageReason.INVALID_TAGS, f"expected a list, got {type(value).__name__}")
        return ()

    tags: list[str] = []
    seen: set[str] = set()
    for candidate in candidates:
        if isinstance(candidate, (dict, list)):
            warnings.add(TriageReason.INVALID_TAGS, f"ignored nested value {candidate!r}")
            continue
        label = " ".join(str(candidate).strip().strip("'\"").split())
        key = normalize_tag(label)
        if not key or key in seen:
            continue
        seen.add(key)
        tags.append(label)
    return tuple(tags)


def _coerce_featured(value: Any, warnings: _WarningCollector) -> bool:
    if value is None or isinstance(value, bool):
        return bool(value)
    if isinstance(value, str) and value.strip().lower() in _TRUE_STRINGS:
        return True
    if isinstance(value, str) and value.strip().lower() in _FALSE_STRINGS:
        return False
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    warnings.add(TriageReason.INVALID_FEATURED, f"not a boolean: {value!r}")
    return False
