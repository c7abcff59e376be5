"""Corpus-wide indices over validated posts."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from postcorpus.text import normalize_tag
from postcorpus.types import Corpus, Post

logger = logging.getLogger(__name__)


def date_sort_key(post: Post) -> tuple[int, str]:
    """Newest first; same-day posts by id ascending."""
    return (-post.date.toordinal(), post.id)


def order_by_date(posts: Sequence[Post]) -> list[Post]:
    return sorted(posts, key=date_sort_key)


def build_tag_index(posts: Sequence[Post]) -> tuple[dict[str, tuple[str, ...]], dict[str, str]]:
    """Map each normalized tag to the ids carrying it.

    Args:
        posts: Posts already in date order; ids per tag keep that order.

    Returns:
        The tag index and, for each normalized tag, the first display label
        seen for it. Both are keyed in sorted order.

    """
    index: dict[str, list[str]] = {}
    labels: dict[str, str] = {}
    for post in posts:
        for label in post.tags:
            key = normalize_tag(label)
            if not key:
                continue
            ids = index.setdefault(key, [])
            if post.id not in ids:
                ids.append(post.id)
            labels.setdefault(key, label.strip())
    return (
        {key: tuple(index[key]) for key in sorted(index)},
        {key: labels[key] for key in sorted(labels)},
    )


def assemble_corpus(posts: Sequence[Post]) -> Corpus:
    """Assemble the immutable :class:`Corpus` from posts with final ids."""
    ordered = order_by_date(posts)
    tag_index, tag_labels = build_tag_index(ordered)
    corpus = Corpus(
        posts=tuple(ordered),
        tag_index=tag_index,
        tag_labels=tag_labels,
        date_order=tuple(post.id for post in ordered),
        featured_ids=tuple(post.id for post in ordered if post.featured),
    )
    logger.info(
        "Indexed %d post(s), %d tag(s), %d featured",
        len(corpus.posts),
        len(tag_index),
        len(corpus.featured_ids),
    )
    return corpus
