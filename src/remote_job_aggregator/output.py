import json
import logging
from pathlib import Path
from typing import Any

from remote_job_aggregator.models import ResultDocument

logger = logging.getLogger(__name__)

# Regenerated on every run, so it never counts as a change
VOLATILE_FIELDS = ("updated_at",)


def serialize_document(document: ResultDocument) -> str:
    return json.dumps(document.model_dump(mode="json"), indent=2, ensure_ascii=False)


def _stable_view(data: Any) -> Any:
    if isinstance(data, dict):
        return {key: value for key, value in data.items() if key not in VOLATILE_FIELDS}
    return data


def has_changed(new_content: str, path: Path) -> bool:
    """
    Compare serialized content with the document already at path,
    ignoring volatile fields. Missing or unreadable files count as changed.
    """
    if not path.exists():
        return True

    try:
        previous = path.read_text(encoding="utf-8")
    except OSError as e:
        logger.warning(f"Could not read existing {path}: {e}")
        return True

    if previous.strip() == new_content.strip():
        return False

    try:
        return _stable_view(json.loads(previous)) != _stable_view(json.loads(new_content))
    except json.JSONDecodeError:
        return True


def write_document(document: ResultDocument, path: str | Path) -> bool:
    """
    Write the document as JSON, creating parent directories as needed.

    Returns True if new content was written, False if the existing file
    already holds the same jobs and the write was skipped.
    """
    path = Path(path)
    content = serialize_document(document)

    if not has_changed(content, path):
        logger.info(f"No changes detected in {path}, skipping write")
        return False

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content + "\n", encoding="utf-8")
    logger.info(f"Successfully wrote {document.total_jobs} jobs to {path}")
    return True
