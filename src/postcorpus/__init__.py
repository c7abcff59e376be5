"""postcorpus: ingestion pipeline for markdown blog posts with frontmatter."""

from postcorpus.config import CorpusSettings
from postcorpus.exceptions import EmptyCorpusError, PostCorpusError
from postcorpus.pipeline import BuildResult, build_corpus, build_from_texts, run
from postcorpus.types import Corpus, Frontmatter, Post, RelatedLink, TriageReason, TriageRecord

__version__ = "0.1.0"
__all__ = [
    "BuildResult",
    "Corpus",
    "CorpusSettings",
    "EmptyCorpusError",
    "Frontmatter",
    "Post",
    "PostCorpusError",
    "RelatedLink",
    "TriageReason",
    "TriageRecord",
    "build_corpus",
    "build_from_texts",
    "run",
]
