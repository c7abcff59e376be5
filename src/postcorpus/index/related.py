"""Related-post ranking by shared tags and temporal proximity."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Final

from postcorpus.date_utils import days_between
from postcorpus.types import Post, RelatedLink

TAG_WEIGHT: Final = 10
DAYS_PER_YEAR: Final = 365
DEFAULT_RELATED_LIMIT: Final = 3


def score(first: Post, second: Post) -> float:
    """Each shared tag is worth 10 points; every year between the posts costs one."""
    shared = len(first.frontmatter.tag_keys & second.frontmatter.tag_keys)
    return shared * TAG_WEIGHT - days_between(first.date, second.date) / DAYS_PER_YEAR


def related_links(posts: Sequence[Post], limit: int = DEFAULT_RELATED_LIMIT) -> list[RelatedLink]:
    """Top ``limit`` links out of every post, best first, ties by target id."""
    links: list[RelatedLink] = []
    if limit <= 0:
        return links

    for post in posts:
        candidates = sorted(
            ((score(post, other), other.id) for other in posts if other.id != post.id),
            key=lambda item: (-item[0], item[1]),
        )
        links.extend(
            RelatedLink(from_id=post.id, to_id=to_id, score=value)
            for value, to_id in candidates[:limit]
        )
    return links


def resolve_related(posts: Sequence[Post], limit: int = DEFAULT_RELATED_LIMIT) -> list[Post]:
    """Return copies of ``posts`` with ``related_ids`` filled in.

    Needs the complete post set, so it runs once after every file is parsed.
    """
    related: dict[str, list[str]] = {post.id: [] for post in posts}
    for link in related_links(posts, limit):
        related[link.from_id].append(link.to_id)
    return [post.model_copy(update={"related_ids": tuple(related[post.id])}) for post in posts]
