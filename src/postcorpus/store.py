"""Serialized form of a build, as handed to the renderer."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from postcorpus.pipeline import BuildResult

logger = logging.getLogger(__name__)


def build_payload(result: BuildResult) -> dict[str, Any]:
    """Corpus payload plus the triage report, all JSON-compatible."""
    payload = result.corpus.to_payload()
    payload["triage"] = [record.model_dump(mode="json", by_alias=True) for record in result.triage]
    return payload


def write_corpus(result: BuildResult, path: Path) -> Path:
    """Write the build to ``path`` as UTF-8 JSON, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(build_payload(result), indent=2, ensure_ascii=False) + "\n",
        encoding="utf-8",
    )
    logger.info("Wrote %d post(s) to %s", len(result.corpus), path)
    return path
