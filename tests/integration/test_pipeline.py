"""End-to-end tests for the ingestion pipeline."""

import json
from datetime import date

import pytest

from postcorpus.config import CorpusSettings
from postcorpus.exceptions import EmptyCorpusError
from postcorpus.pipeline import build_corpus, build_from_texts, run
from postcorpus.types import TriageReason, TriageSeverity
from tests.helpers.documents import SENTINEL, join_sources, post_source


def _reasons(result):
    return [(record.source_path, record.segment_index, record.reason) for record in result.triage]


class TestScenarios:
    def test_composite_file_yields_two_mutually_related_posts(self, settings):
        text = join_sources(
            post_source("A", "2026-01-01", ["x"], body="Alpha body."),
            post_source("B", "2026-01-02", ["x"], body="Beta body."),
        )

        result = build_from_texts({"composite.md": text}, settings)

        corpus = result.corpus
        assert corpus.date_order == ("b", "a")
        assert corpus.get("a").related_ids == ("b",)
        assert corpus.get("b").related_ids == ("a",)
        assert corpus.get("a").segment_index == 0
        assert corpus.get("b").segment_index == 1
        assert corpus.get("a").body == "Alpha body."
        assert all(SENTINEL not in post.body for post in corpus.posts)
        assert corpus.tag_index == {"x": ("b", "a")}
        assert result.triage == ()

    def test_unterminated_frontmatter_is_excluded_and_reported(self, settings):
        broken = "---\ntitle: Broken\ndate: 2026-01-05\n\nNo closing delimiter here."
        text = join_sources(post_source("Good"), broken)

        result = build_from_texts({"mixed.md": text}, settings)

        assert [post.id for post in result.corpus.posts] == ["good"]
        assert _reasons(result) == [("mixed.md", 1, TriageReason.UNTERMINATED_FRONTMATTER)]
        assert result.triage[0].severity == TriageSeverity.ERROR

    def test_missing_title_is_excluded_with_reason(self, settings):
        result = build_from_texts(
            {"one.md": post_source("Kept"), "two.md": post_source(title=None)},
            settings,
        )

        assert [post.id for post in result.corpus.posts] == ["kept"]
        assert _reasons(result) == [("two.md", 0, TriageReason.MISSING_TITLE)]

    def test_date_shaped_title_is_kept_as_text(self, settings):
        result = build_from_texts({"p.md": "---\ntitle: 2026-01-01\ndate: 2026-01-02\n---\nBody"}, settings)

        assert [post.title for post in result.corpus.posts] == ["2026-01-01"]
        assert result.triage == ()

    def test_partial_date_is_excluded_whatever_the_build_day(self, settings):
        result = build_from_texts(
            {"one.md": post_source("Kept"), "two.md": post_source("Vague", '"March 2026"')},
            settings,
        )

        assert [post.id for post in result.corpus.posts] == ["kept"]
        assert _reasons(result) == [("two.md", 0, TriageReason.INVALID_DATE)]

    def test_segment_without_frontmatter_is_excluded(self, settings):
        text = join_sources(post_source("Real Post"), "Just some stray prose.")

        result = build_from_texts({"stray.md": text}, settings)

        assert len(result.corpus) == 1
        assert _reasons(result) == [("stray.md", 1, TriageReason.MISSING_FRONTMATTER)]

    def test_invalid_date_is_excluded(self, settings):
        result = build_from_texts(
            {"ok.md": post_source("Fine"), "bad.md": post_source("Bad Date", "not-a-date")},
            settings,
        )

        assert [post.id for post in result.corpus.posts] == ["fine"]
        assert _reasons(result) == [("bad.md", 0, TriageReason.INVALID_DATE)]

    def test_recoverable_problems_keep_the_post(self, settings):
        text = post_source("Flagged", tags=None, extra_lines=["featured: maybe"])

        result = build_from_texts({"flagged.md": text}, settings)

        post = result.corpus.get("flagged")
        assert post.tags == ()
        assert post.featured is False
        assert _reasons(result) == [("flagged.md", 0, TriageReason.INVALID_FEATURED)]
        assert result.errors == []


def test_empty_corpus_is_a_build_failure(settings):
    with pytest.raises(EmptyCorpusError) as excinfo:
        build_from_texts({"junk.md": "no frontmatter at all"}, settings)

    assert [record.reason for record in excinfo.value.triage] == [TriageReason.MISSING_FRONTMATTER]


def test_missing_content_directory_is_a_build_failure(settings):
    with pytest.raises(EmptyCorpusError):
        build_corpus(settings)


class TestContentDirectory:
    @pytest.fixture
    def populated(self, content_dir):
        (content_dir / "2026-02-08-database-replication.md").write_text(
            post_source("Database Replication Strategies", "2026-02-08", ["Databases", "Architecture"]),
            encoding="utf-8",
        )
        (content_dir / "roundup.md").write_text(
            join_sources(
                post_source("Weekly Notes", "2026-01-10", ["databases"], featured=True),
                post_source("Weekly Notes", "2026-01-17", ["Rust"]),
                post_source("Caching Layers", "2026-01-24", ["architecture", "Databases"]),
            ),
            encoding="utf-8",
        )
        nested = content_dir / "archive"
        nested.mkdir()
        (nested / "old.mdx").write_text(post_source("Weekly Notes", "2024-05-01", ["misc"]), encoding="utf-8")
        (content_dir / "broken.md").write_bytes(b"---\ntitle: \xff\xfe\n---\n")
        (content_dir / "README.txt").write_text("not a post", encoding="utf-8")
        return content_dir

    def test_full_build(self, populated, settings):
        result = build_corpus(settings)
        corpus = result.corpus

        assert corpus.date_order == (
            "2026-02-08-database-replication",
            "caching-layers",
            "weekly-notes-3",
            "weekly-notes-2",
            "weekly-notes",
        )
        # archive/old.mdx sorts first, so it keeps the bare slug
        assert corpus.get("weekly-notes").source_path == "archive/old.mdx"
        assert corpus.get("weekly-notes-2").segment_index == 0
        assert corpus.get("weekly-notes-3").segment_index == 1
        assert corpus.featured_ids == ("weekly-notes-2",)
        assert corpus.tag_index["databases"] == (
            "2026-02-08-database-replication",
            "caching-layers",
            "weekly-notes-2",
        )
        assert corpus.tag_labels["databases"] == "Databases"
        assert corpus.get("caching-layers").related_ids[0] == "2026-02-08-database-replication"

        assert _reasons(result) == [
            ("broken.md", None, TriageReason.INVALID_ENCODING),
            ("roundup.md", 0, TriageReason.SLUG_COLLISION),
            ("roundup.md", 1, TriageReason.SLUG_COLLISION),
        ]

    def test_parallel_build_matches_sequential(self, populated, settings):
        sequential = build_corpus(settings)
        parallel = build_corpus(settings.model_copy(update={"max_workers": 4}))

        assert parallel.corpus == sequential.corpus
        assert parallel.triage == sequential.triage

    def test_rebuilding_is_deterministic(self, populated, settings):
        first = build_corpus(settings)
        second = build_corpus(settings)

        assert first.corpus.to_payload() == second.corpus.to_payload()

    def test_run_writes_output(self, populated, tmp_path):
        (tmp_path / ".postcorpus.toml").write_text('output_path = "build/posts.json"\nrelated_limit = 1\n')

        result = run(tmp_path)

        data = json.loads((tmp_path / "build" / "posts.json").read_text(encoding="utf-8"))
        assert data["dateOrder"] == list(result.corpus.date_order)
        assert all(len(post["relatedIds"]) == 1 for post in data["posts"])
        assert data["triage"][0]["reason"] == "InvalidEncoding"


def test_line_mode_keeps_inline_sentinel_mentions(tmp_path):
    settings = CorpusSettings(site_root=tmp_path, sentinel_mode="line")
    body = f"We split files on the `{SENTINEL}` token."
    text = join_sources(post_source("Meta Post", body=body), post_source("Second"))

    result = build_from_texts({"meta.md": text}, settings)

    assert result.corpus.get("meta-post").body == body
    assert result.corpus.get("second") is not None


def test_word_count_and_reading_time(settings):
    body = " ".join(["word"] * 450)

    result = build_from_texts({"long.md": post_source("Long Read", body=body)}, settings)

    post = result.corpus.get("long-read")
    assert post.word_count == 450
    assert post.reading_time == 3
    assert post.date == date(2026, 1, 1)
