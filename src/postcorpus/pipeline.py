"""Batch ingestion pipeline: source files in, validated corpus out.

Per-file work (read, split, parse, validate) is independent and may run on a
thread pool. Identity resolution, indexing and related-post ranking need the
complete set of posts, so they run once after every file has been collected.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path

from postcorpus.config import CorpusSettings
from postcorpus.exceptions import EmptyCorpusError, SegmentError, SourceReadError
from postcorpus.index.indexer import assemble_corpus
from postcorpus.index.related import resolve_related
from postcorpus.ingest.frontmatter import parse_segment
from postcorpus.ingest.identity import ResolvedIdentity, resolve_identities
from postcorpus.ingest.loader import discover_sources, read_source, relative_source_path
from postcorpus.ingest.splitter import split_segments
from postcorpus.ingest.validation import ValidatedSegment, validate_segment
from postcorpus.logging_setup import configure_logging
from postcorpus.report import render_triage
from postcorpus.store import write_corpus
from postcorpus.text import count_words, reading_minutes
from postcorpus.types import Corpus, Post, TriageReason, TriageRecord, TriageSeverity

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class FileResult:
    """Everything one source file contributed before the global merge."""

    source_path: str
    segments: tuple[ValidatedSegment, ...] = ()
    triage: tuple[TriageRecord, ...] = ()


@dataclass(frozen=True, slots=True)
class BuildResult:
    corpus: Corpus
    triage: tuple[TriageRecord, ...] = ()

    @property
    def errors(self) -> list[TriageRecord]:
        return [record for record in self.triage if record.severity == TriageSeverity.ERROR]

    @property
    def warnings(self) -> list[TriageRecord]:
        return [record for record in self.triage if record.severity == TriageSeverity.WARNING]


def process_text(source_path: str, text: str, settings: CorpusSettings) -> FileResult:
    """Split, parse and validate one file's contents.

    Fatal segment problems become ``error`` triage records; the remaining
    segments still make it through.
    """
    validated: list[ValidatedSegment] = []
    triage: list[TriageRecord] = []

    for segment in split_segments(source_path, text, settings.sentinel, settings.sentinel_mode):
        try:
            result = validate_segment(parse_segment(segment))
        except SegmentError as exc:
            logger.error("Excluding %s", exc)
            triage.append(
                TriageRecord(
                    source_path=exc.source_path,
                    segment_index=exc.segment_index,
                    reason=TriageReason(exc.reason),
                    detail=exc.detail,
                )
            )
            continue
        validated.append(result)
        triage.extend(result.warnings)

    logger.debug("%s: %d segment(s) accepted", source_path, len(validated))
    return FileResult(source_path=source_path, segments=tuple(validated), triage=tuple(triage))


def process_file(path: Path, settings: CorpusSettings) -> FileResult:
    """Read and process one source file; read failures exclude only this file."""
    source_path = relative_source_path(path, settings.abs_content_dir)
    try:
        text = read_source(path, source_path)
    except SourceReadError as exc:
        logger.error("Excluding file %s", exc)
        record = TriageRecord(
            source_path=source_path,
            reason=TriageReason(exc.reason),
            detail=str(exc.original_exception),
        )
        return FileResult(source_path=source_path, triage=(record,))
    return process_text(source_path, text, settings)


def _triage_sort_key(record: TriageRecord) -> tuple[str, int]:
    return (record.source_path, -1 if record.segment_index is None else record.segment_index)


def _make_post(identity: ResolvedIdentity, settings: CorpusSettings) -> Post:
    validated = identity.validated
    word_count = count_words(validated.body)
    return Post(
        id=identity.slug,
        source_path=validated.segment.source_path,
        segment_index=validated.segment.index,
        frontmatter=validated.frontmatter,
        body=validated.body,
        word_count=word_count,
        reading_time=reading_minutes(word_count, settings.words_per_minute),
    )


def merge_results(results: Iterable[FileResult], settings: CorpusSettings) -> BuildResult:
    """Reduce per-file results into the final corpus.

    Raises:
        EmptyCorpusError: If no segment survived validation.

    """
    results = list(results)
    validated = [segment for result in results for segment in result.segments]
    triage = [record for result in results for record in result.triage]

    if not validated:
        raise EmptyCorpusError(str(settings.abs_content_dir), triage)

    identities, collisions = resolve_identities(validated)
    triage.extend(collisions)

    posts = [_make_post(identity, settings) for identity in identities]
    corpus = assemble_corpus(resolve_related(posts, settings.related_limit))

    triage.sort(key=_triage_sort_key)
    logger.info(
        "Built corpus of %d post(s) from %d file(s); %d excluded, %d flagged",
        len(corpus),
        len(results),
        sum(1 for record in triage if record.is_fatal),
        sum(1 for record in triage if not record.is_fatal),
    )
    return BuildResult(corpus=corpus, triage=tuple(triage))


def build_from_texts(sources: Mapping[str, str], settings: CorpusSettings | None = None) -> BuildResult:
    """Build a corpus from in-memory ``{source_path: text}`` pairs."""
    settings = settings or CorpusSettings()
    results = [process_text(path, sources[path], settings) for path in sorted(sources)]
    return merge_results(results, settings)


def build_corpus(settings: CorpusSettings) -> BuildResult:
    """Run the full pipeline over ``settings.abs_content_dir``."""
    content_dir = settings.abs_content_dir
    paths = discover_sources(content_dir, settings.extensions)
    logger.info("Ingesting %d source file(s) from %s", len(paths), content_dir)

    if settings.max_workers > 1 and len(paths) > 1:
        with ThreadPoolExecutor(max_workers=settings.max_workers) as executor:
            # map() yields in submission order, keeping the merge deterministic
            results = list(executor.map(lambda path: process_file(path, settings), paths))
    else:
        results = [process_file(path, settings) for path in paths]

    return merge_results(results, settings)


def run(site_root: Path | None = None, *, write: bool = True) -> BuildResult:
    """Entry point for site build hooks.

    Configures logging, loads settings for ``site_root``, builds the corpus,
    writes it to ``output_path`` and prints the triage report.
    """
    configure_logging()
    settings = CorpusSettings.load(site_root)
    result = build_corpus(settings)
    if write:
        write_corpus(result, settings.abs_output_path)
    render_triage(result.triage)
    return result
