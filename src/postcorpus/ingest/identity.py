"""Stable, unique post identifiers."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import TYPE_CHECKING

from postcorpus.text import slugify
from postcorpus.types import TriageReason, TriageRecord, TriageSeverity

if TYPE_CHECKING:
    from postcorpus.ingest.validation import ValidatedSegment

logger = logging.getLogger(__name__)

# e.g. 2026-02-08-database-replication-strategies.md
_DATED_STEM = re.compile(r"^\d{4}-\d{2}-\d{2}-.*[A-Za-z0-9]")


@dataclass(frozen=True, slots=True)
class ResolvedIdentity:
    validated: ValidatedSegment
    slug: str


def path_slug(source_path: str) -> str | None:
    """Slug encoded in a date-prefixed file name, or ``None`` if the name has none."""
    stem = PurePosixPath(source_path).stem
    if not _DATED_STEM.match(stem):
        return None
    return slugify(stem)


def base_slug(validated: ValidatedSegment) -> str:
    """Derive a post's slug before collision handling.

    A date-prefixed file name wins for single-post files. Posts that share a
    file with others are always named after their title.
    """
    segment = validated.segment
    if segment.count == 1:
        from_path = path_slug(segment.source_path)
        if from_path:
            return from_path
    return slugify(validated.frontmatter.title)


def resolve_identities(
    validated: Iterable[ValidatedSegment],
) -> tuple[list[ResolvedIdentity], list[TriageRecord]]:
    """Assign every validated segment a corpus-unique slug.

    Segments are ordered by ``(source_path, index)``; the first one to claim a
    slug keeps it and later claimants get ``-2``, ``-3``, ... skipping any
    suffix that another post already uses as its natural slug.

    Returns:
        Identities in ``(source_path, index)`` order and one ``SlugCollision``
        warning per renamed post.

    """
    ordered = sorted(validated, key=lambda item: (item.segment.source_path, item.segment.index))
    bases = [base_slug(item) for item in ordered]
    taken = set(bases)
    claimed: set[str] = set()

    identities: list[ResolvedIdentity] = []
    warnings: list[TriageRecord] = []
    for item, slug in zip(ordered, bases, strict=True):
        if slug in claimed:
            suffix = 2
            while f"{slug}-{suffix}" in taken:
                suffix += 1
            renamed = f"{slug}-{suffix}"
            taken.add(renamed)
            warnings.append(
                TriageRecord(
                    source_path=item.segment.source_path,
                    segment_index=item.segment.index,
                    reason=TriageReason.SLUG_COLLISION,
                    severity=TriageSeverity.WARNING,
                    detail=f"slug {slug!r} already used, renamed to {renamed!r}",
                )
            )
            logger.warning(
                "Slug collision on %r, renamed %s#%d to %r",
                slug,
                item.segment.source_path,
                item.segment.index,
                renamed,
            )
            slug = renamed
        claimed.add(slug)
        identities.append(ResolvedIdentity(validated=item, slug=slug))

    return identities, warnings
