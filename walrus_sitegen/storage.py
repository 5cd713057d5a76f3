"""Writing generated project files to disk."""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Iterable
from pathlib import Path

from walrus_sitegen.models import GeneratedFile
from walrus_sitegen.utils import determine_file_type

logger = logging.getLogger(__name__)

DEFAULT_ROOT = "tmp"

_HTML_ESCAPES = {
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}


def _reject_constant(name: str) -> None:
    raise ValueError(f"invalid JSON literal {name}")


def _format_json(content: str) -> str:
    data = json.loads(content, parse_constant=_reject_constant)
    text = json.dumps(data, indent=2, sort_keys=True, ensure_ascii=False)
    for char, escaped in _HTML_ESCAPES.items():
        text = text.replace(char, escaped)
    return text


def save_files_to_disk(
    project_id: str,
    generated_files: Iterable[GeneratedFile],
    root: str | os.PathLike[str] = DEFAULT_ROOT,
) -> int:
    """Write the files under ``root`` and return how many were written.

    JSON files are re-indented when they parse. A file that cannot be written
    is logged and skipped.
    """
    files = list(generated_files)
    saved = 0
    for file in files:
        file_type = file.type or determine_file_type(file.filename)
        file_path = Path(os.path.normpath(os.fspath(root) + os.sep + file.filename))
        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            logger.error("Failed to create directory path: %s", exc)
            continue

        content = file.content
        if file_type == "json" or file.filename.lower().endswith(".json"):
            try:
                content = _format_json(content)
            except ValueError as exc:
                logger.warning(
                    "File %s has .json extension but contains invalid JSON: %s",
                    file.filename,
                    exc,
                )

        try:
            file_path.write_bytes(content.encode("utf-8"))
        except OSError as exc:
            logger.error("Failed to write file %s: %s", file_path, exc)
            continue

        logger.info("File saved: %s", file_path)
        saved += 1

    logger.info("Successfully stored project %s: %d files created", project_id, saved)
    if saved != len(files):
        logger.warning(
            "Mismatch between parsed files (%d) and stored files (%d) for project %s.",
            len(files),
            saved,
            project_id,
        )
    return saved


def save_to_rag(
    project_id: str, generated_files: Iterable[GeneratedFile]
) -> tuple[int, int]:
    """Report the retrieval store for a project and return (files, embeddings) stored.

    No retrieval store is configured, so nothing is stored and a mismatch is
    reported whenever files were given.
    """
    files = list(generated_files)
    files_count = 0
    embeddings_count = 0
    logger.info(
        "Successfully stored project %s: %d files created, %d embeddings stored.",
        project_id,
        files_count,
        embeddings_count,
    )
    if files_count != len(files):
        logger.warning(
            "Mismatch between parsed files (%d) and stored files (%d) for project %s.",
            len(files),
            files_count,
            project_id,
        )
    return files_count, embeddings_count