"""Centralized exceptions for the postcorpus pipeline."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from postcorpus.types import TriageRecord


class PostCorpusError(Exception):
    """Base exception for all postcorpus errors."""


class ConfigError(PostCorpusError):
    """Raised when the configuration file cannot be loaded."""


class SegmentError(PostCorpusError):
    """Base exception for problems that exclude a single segment from the corpus.

    Attributes:
        source_path: Path of the originating file, relative to the content directory.
        segment_index: Position of the segment inside its file.
        reason: Stable triage reason code.

    """

    reason: ClassVar[str] = "SegmentError"

    def __init__(self, source_path: str, segment_index: int, detail: str = "") -> None:
        self.source_path = source_path
        self.segment_index = segment_index
        self.detail = detail
        message = f"{source_path}#{segment_index}: {self.reason}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class FrontmatterError(SegmentError):
    """Base exception for frontmatter block detection failures."""


class MissingFrontmatterError(FrontmatterError):
    """Raised when a segment does not open with a ``---`` line."""

    reason = "MissingFrontmatter"


class UnterminatedFrontmatterError(FrontmatterError):
    """Raised when the frontmatter block is opened but never closed."""

    reason = "UnterminatedFrontmatter"


class MetadataError(SegmentError):
    """Base exception for fatal metadata validation failures."""


class MissingTitleError(MetadataError):
    """Raised when ``title`` is absent or blank."""

    reason = "MissingTitle"


class MissingDateError(MetadataError):
    """Raised when ``date`` is absent."""

    reason = "MissingDate"


class InvalidDateError(MetadataError):
    """Raised when ``date`` cannot be parsed to a calendar date."""

    reason = "InvalidDate"


class SourceReadError(PostCorpusError):
    """Raised when a source file cannot be read or decoded."""

    def __init__(self, source_path: str, reason: str, original_exception: Exception) -> None:
        self.source_path = source_path
        self.reason = reason
        self.original_exception = original_exception
        super().__init__(f"Could not read {source_path}: {original_exception}")


class EmptyCorpusError(PostCorpusError):
    """Raised when a build produces no posts at all.

    This points at a misconfiguration (wrong content directory or sentinel)
    rather than at content-level noise.
    """

    def __init__(self, content_dir: str, triage: Sequence[TriageRecord] = ()) -> None:
        self.content_dir = content_dir
        self.triage = tuple(triage)
        super().__init__(
            f"No valid posts found in {content_dir} ({len(self.triage)} triage record(s))."
        )
