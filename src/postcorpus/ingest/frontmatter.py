"""Helpers for parsing YAML frontmatter from raw post segments."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import yaml

from postcorpus.exceptions import MissingFrontmatterError, UnterminatedFrontmatterError

if TYPE_CHECKING:
    from postcorpus.ingest.splitter import RawSegment

logger = logging.getLogger(__name__)

DELIMITER = "---"

# Free-text fields keep their source spelling even when YAML would type them
# (`title: 2026-01-01` is a date, `excerpt: 3.10` a float).
TEXT_FIELDS = frozenset({"title", "excerpt", "coverImage"})


@dataclass(frozen=True, slots=True)
class ParsedFrontmatter:
    """Frontmatter as read from the segment, before validation.

    Attributes:
        fields: Key to parsed value, in source order. Keys listed in
            ``invalid`` hold the raw, unparsed string instead.
        invalid: Keys whose value could not be parsed.
        issues: Descriptions of lines that were skipped entirely.

    """

    fields: dict[str, Any] = field(default_factory=dict)
    invalid: frozenset[str] = frozenset()
    issues: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class ParsedSegment:
    segment: RawSegment
    frontmatter: ParsedFrontmatter
    body: str


def split_frontmatter(segment: RawSegment) -> tuple[list[str], str]:
    """Locate the ``---`` block at the top of the segment.

    Returns:
        The lines between the delimiters and the body that follows the
        closing delimiter, minus one leading blank line.

    Raises:
        MissingFrontmatterError: If the segment does not start with ``---``.
        UnterminatedFrontmatterError: If no closing ``---`` line follows.

    """
    # Only "\n" separates lines; form feeds and Unicode separators are body text.
    lines = segment.text.strip().split("\n")
    if not lines or lines[0].strip() != DELIMITER:
        raise MissingFrontmatterError(segment.source_path, segment.index)

    for position in range(1, len(lines)):
        if lines[position].strip() == DELIMITER:
            break
    else:
        raise UnterminatedFrontmatterError(
            segment.source_path, segment.index, "no closing '---' line"
        )

    header = lines[1:position]
    body_lines = lines[position + 1 :]
    if body_lines and not body_lines[0].strip(" \t\r"):
        body_lines = body_lines[1:]
    return header, "\n".join(body_lines)


def parse_metadata(header: list[str]) -> ParsedFrontmatter:
    """Parse frontmatter lines into a :class:`ParsedFrontmatter`.

    The block is loaded as YAML first. If that fails, each ``key: value``
    line is loaded on its own so one bad line does not lose the others.
    """
    text = "\n".join(header)
    if not text.strip():
        return ParsedFrontmatter()

    try:
        data = yaml.safe_load(text)
    except (yaml.YAMLError, ValueError) as exc:
        logger.debug("Frontmatter is not valid YAML, parsing line by line: %s", exc)
    else:
        if isinstance(data, dict):
            fields = {str(key): value for key, value in data.items()}
            _restore_source_text(text, fields)
            return ParsedFrontmatter(fields=fields)
        logger.debug("Frontmatter is not a mapping (%s), parsing line by line", type(data).__name__)

    return _parse_lines(header)


def _parse_lines(header: list[str]) -> ParsedFrontmatter:
    fields: dict[str, Any] = {}
    invalid: set[str] = set()
    issues: list[str] = []
    list_key: str | None = None

    for number, line in enumerate(header, start=2):
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue

        # Block list item continuing the previous "key:" line
        if list_key is not None and stripped.startswith("- "):
            item, ok = _load_value(stripped[2:])
            fields[list_key].append(item)
            if not ok:
                invalid.add(list_key)
            continue

        key, sep, raw_value = line.partition(":")
        key = key.strip()
        if not sep or not key or line[:1].isspace():
            issues.append(f"line {number}: expected 'key: value', got {stripped!r}")
            list_key = None
            continue

        raw_value = raw_value.strip()
        invalid.discard(key)
        if not raw_value:
            fields[key] = []
            list_key = key
            continue

        list_key = None
        value, ok = _load_value(raw_value)
        if key in TEXT_FIELDS and value is not None and not isinstance(value, str):
            value = raw_value
        fields[key] = value
        if not ok:
            invalid.add(key)

    # A bare "key:" with no list items underneath is an empty value.
    for key, value in fields.items():
        if value == [] and key not in invalid:
            fields[key] = None

    return ParsedFrontmatter(fields=fields, invalid=frozenset(invalid), issues=tuple(issues))


def _restore_source_text(text: str, fields: dict[str, Any]) -> None:
    """Replace typed values of free-text fields with the scalar as written."""
    root = yaml.compose(text, Loader=yaml.SafeLoader)
    for key_node, value_node in root.value:
        if not isinstance(key_node, yaml.ScalarNode) or not isinstance(value_node, yaml.ScalarNode):
            continue
        key = key_node.value
        if key in TEXT_FIELDS and fields.get(key) is not None and not isinstance(fields[key], str):
            fields[key] = value_node.value


def _load_value(raw: str) -> tuple[Any, bool]:
    try:
        value = yaml.safe_load(raw)
    except (yaml.YAMLError, ValueError):
        return raw, False
    # "title: Foo: Bar" loads as {"Foo": "Bar"}; only flow mappings are mappings.
    if isinstance(value, dict) and not raw.startswith("{"):
        return raw, True
    return value, True


def parse_segment(segment: RawSegment) -> ParsedSegment:
    """Extract frontmatter and body from one raw segment."""
    header, body = split_frontmatter(segment)
    return ParsedSegment(segment=segment, frontmatter=parse_metadata(header), body=body)
