"""Discovery and reading of source files."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from postcorpus.exceptions import SourceReadError
from postcorpus.types import TriageReason

logger = logging.getLogger(__name__)


def discover_sources(content_dir: Path, extensions: Iterable[str] = (".md", ".mdx")) -> list[Path]:
    """Return every source file under ``content_dir``, sorted by relative path.

    A missing directory yields no files; the pipeline reports that as an
    empty corpus.
    """
    if not content_dir.is_dir():
        logger.warning("Content directory %s does not exist", content_dir)
        return []

    suffixes = {ext.lower() for ext in extensions}
    return sorted(
        (path for path in content_dir.rglob("*") if path.is_file() and path.suffix.lower() in suffixes),
        key=lambda path: path.relative_to(content_dir).as_posix(),
    )


def relative_source_path(path: Path, content_dir: Path) -> str:
    return path.relative_to(content_dir).as_posix()


def read_source(path: Path, source_path: str, *, encoding: str = "utf-8-sig") -> str:
    """Read a source file as text, dropping a leading byte-order mark.

    Raises:
        SourceReadError: If the file cannot be read or is not valid ``encoding``.

    """
    try:
        return path.read_text(encoding=encoding)
    except UnicodeDecodeError as exc:
        raise SourceReadError(source_path, TriageReason.INVALID_ENCODING.value, exc) from exc
    except OSError as exc:
        raise SourceReadError(source_path, TriageReason.UNREADABLE_FILE.value, exc) from exc
