"""Core data types for the post corpus."""

from __future__ import annotations

import datetime as dt
from collections.abc import Mapping
from enum import Enum
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator
from pydantic.alias_generators import to_camel

from postcorpus.text import normalize_tag, tag_slug

_JSON_MAPPING: TypeAdapter[dict[str, Any]] = TypeAdapter(dict[str, Any])


class _FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class TriageReason(str, Enum):
    """Stable reason codes for the triage report."""

    MISSING_FRONTMATTER = "MissingFrontmatter"
    UNTERMINATED_FRONTMATTER = "UnterminatedFrontmatter"
    MISSING_TITLE = "MissingTitle"
    MISSING_DATE = "MissingDate"
    INVALID_DATE = "InvalidDate"
    MALFORMED_LINE = "MalformedLine"
    INVALID_TAGS = "InvalidTags"
    INVALID_FEATURED = "InvalidFeatured"
    SLUG_COLLISION = "SlugCollision"
    UNREADABLE_FILE = "UnreadableFile"
    INVALID_ENCODING = "InvalidEncoding"


class TriageSeverity(str, Enum):
    ERROR = "error"  # excluded from the corpus
    WARNING = "warning"  # included, value defaulted or flagged


class TriageRecord(_FrozenModel):
    """One excluded or flagged segment (or file, when ``segment_index`` is None)."""

    source_path: str
    segment_index: int | None = None
    reason: TriageReason
    severity: TriageSeverity = TriageSeverity.ERROR
    detail: str = ""

    @property
    def is_fatal(self) -> bool:
        return self.severity == TriageSeverity.ERROR


class Frontmatter(_FrozenModel):
    """Validated post metadata.

    Known fields are typed; anything else is kept verbatim in ``extra`` so
    new frontmatter keys survive without pipeline changes.
    """

    title: str
    date: dt.date
    excerpt: str = ""
    tags: tuple[str, ...] = ()
    featured: bool = False
    cover_image: str | None = None
    extra: Mapping[str, Any] = Field(default_factory=dict)

    @field_validator("extra")
    @classmethod
    def freeze_extra(cls, value: Mapping[str, Any]) -> Mapping[str, Any]:
        return MappingProxyType(dict(value))

    @property
    def tag_keys(self) -> frozenset[str]:
        """Normalized tags, as used for indexing and relatedness."""
        return frozenset(normalize_tag(tag) for tag in self.tags)


class Post(_FrozenModel):
    id: str
    source_path: str
    segment_index: int
    frontmatter: Frontmatter
    body: str
    word_count: int
    reading_time: int = 1
    related_ids: tuple[str, ...] = ()

    @property
    def title(self) -> str:
        return self.frontmatter.title

    @property
    def date(self) -> dt.date:
        return self.frontmatter.date

    @property
    def tags(self) -> tuple[str, ...]:
        return self.frontmatter.tags

    @property
    def featured(self) -> bool:
        return self.frontmatter.featured

    def to_payload(self) -> dict[str, Any]:
        """Flatten the post into the JSON-compatible shape consumed by renderers."""
        fm = self.frontmatter
        return {
            "id": self.id,
            "title": fm.title,
            "date": fm.date.isoformat(),
            "excerpt": fm.excerpt,
            "tags": list(fm.tags),
            "featured": fm.featured,
            "coverImage": fm.cover_image,
            "body": self.body,
            "relatedIds": list(self.related_ids),
            "sourcePath": self.source_path,
            "segmentIndex": self.segment_index,
            "wordCount": self.word_count,
            "readingTime": self.reading_time,
            "extra": _JSON_MAPPING.dump_python(dict(fm.extra), mode="json"),
        }


class RelatedLink(_FrozenModel):
    """Directed, scored relationship between two posts."""

    from_id: str
    to_id: str
    score: float


class Corpus(_FrozenModel):
    """Validated posts plus the indices derived from them.

    ``posts`` and ``date_order`` are both newest first. Built once per run;
    the tag mappings are read-only views. Use :meth:`to_payload` to hand a
    mutable snapshot downstream.
    """

    posts: tuple[Post, ...] = ()
    tag_index: Mapping[str, tuple[str, ...]] = Field(default_factory=dict)
    tag_labels: Mapping[str, str] = Field(default_factory=dict)
    date_order: tuple[str, ...] = ()
    featured_ids: tuple[str, ...] = ()

    @field_validator("tag_index", "tag_labels")
    @classmethod
    def freeze_indices(cls, value: Mapping[str, Any]) -> Mapping[str, Any]:
        return MappingProxyType(dict(value))

    def _posts_by_id(self) -> Mapping[str, Post]:
        return {post.id: post for post in self.posts}

    def __len__(self) -> int:
        return len(self.posts)

    def get(self, post_id: str) -> Post | None:
        return self._posts_by_id().get(post_id)

    def tag_slugs(self) -> dict[str, str]:
        """Tag page URL segment for every normalized tag."""
        return {tag: tag_slug(tag) for tag in self.tag_index}

    def posts_by_tag(self, tag: str) -> list[Post]:
        """Posts carrying ``tag``, newest first.

        ``tag`` may be any spelling of the tag or its tag page slug, so
        ``"Open Source"`` and ``"open-source"`` find the same posts.
        """
        key = normalize_tag(tag)
        if key not in self.tag_index:
            key = next((name for name, slug in self.tag_slugs().items() if slug == key), key)
        by_id = self._posts_by_id()
        return [by_id[post_id] for post_id in self.tag_index.get(key, ())]

    def all_tags(self) -> list[str]:
        """Display labels of every tag in the corpus, sorted."""
        return sorted(self.tag_labels.values(), key=str.lower)

    def featured_posts(self) -> list[Post]:
        by_id = self._posts_by_id()
        return [by_id[post_id] for post_id in self.featured_ids]

    def recent_posts(self, limit: int = 3) -> list[Post]:
        return list(self.posts[:limit])

    def related_posts(self, post_id: str) -> list[Post]:
        by_id = self._posts_by_id()
        post = by_id.get(post_id)
        if post is None:
            return []
        return [by_id[related_id] for related_id in post.related_ids]

    def to_payload(self) -> dict[str, Any]:
        """Return a fresh JSON-compatible snapshot of the corpus."""
        return {
            "posts": [post.to_payload() for post in self.posts],
            "tagIndex": {tag: list(ids) for tag, ids in self.tag_index.items()},
            "tagLabels": dict(self.tag_labels),
            "tagSlugs": self.tag_slugs(),
            "dateOrder": list(self.date_order),
            "featuredIds": list(self.featured_ids),
        }
