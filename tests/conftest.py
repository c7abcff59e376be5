"""Shared fixtures for the postcorpus test suite."""

from __future__ import annotations

import pytest

from postcorpus.config import CorpusSettings
from tests.helpers.posts import build_post


@pytest.fixture
def settings(tmp_path) -> CorpusSettings:
    return CorpusSettings(site_root=tmp_path)


@pytest.fixture
def content_dir(settings: CorpusSettings):
    path = settings.abs_content_dir
    path.mkdir(parents=True)
    return path


@pytest.fixture
def make_post():
    """Factory for already-validated posts."""
    return build_post
