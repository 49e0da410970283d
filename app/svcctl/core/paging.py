"""Paging cursor rewriting.

The paging cursor is the ``OFFSET n ROWS [FETCH NEXT m ROWS ONLY]`` clause
of a query stored as a string value in a JSON settings file. This module
locates the clause, computes the new offset and writes the settings file
back, taking a timestamped backup first. Every failure is reported in the
returned PagingRewriteResult; nothing is raised.
"""

import json
import logging
import os
import re
import shutil
from datetime import UTC, datetime
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Any

from svcctl.core.audit import Severity, log_line
from svcctl.models.paging import PagingAction, PagingRewriteResult
from svcctl.models.policy import PagingSpec

logger = logging.getLogger(__name__)

OFFSET_PATTERN = re.compile(r"(\bOFFSET\s+)(\d+)(\s+ROWS?\b)", re.IGNORECASE)
FETCH_PATTERN = re.compile(
    r"(\bFETCH\s+(?:NEXT|FIRST)\s+)(\d+)(\s+ROWS?\s+ONLY\b)",
    re.IGNORECASE,
)

BACKUP_TIMESTAMP_FORMAT = "%Y%m%dT%H%M%SZ"

_MISSING = object()


def compute_offset(old_offset: int, action: PagingAction, page_size: int) -> int:
    """Compute the offset after a paging action.

    Args:
        old_offset: Current offset.
        action: Paging action.
        page_size: Rows per page.

    Returns:
        New offset, never negative.
    """
    if action == PagingAction.NEXT_PAGE:
        return old_offset + page_size
    if action == PagingAction.PREVIOUS_PAGE:
        return max(0, old_offset - page_size)
    if action == PagingAction.RESTART_FROM_PAGE_1:
        return 0
    return old_offset


def find_offset(text: str) -> int | None:
    """Get the offset of the last ``OFFSET n ROWS`` clause in ``text``."""
    matches = list(OFFSET_PATTERN.finditer(text))
    if not matches:
        return None
    return int(matches[-1].group(2))


def rewrite_query(text: str, new_offset: int, page_size: int, enforce_fetch_next: bool) -> str:
    """Rewrite the paging clause of a query.

    Only the integers are replaced; keywords and spacing are kept. The
    last OFFSET (and FETCH) clause is the one rewritten.

    Args:
        text: Query text containing an OFFSET clause.
        new_offset: Offset to write.
        page_size: Rows per page, used for the FETCH NEXT clause.
        enforce_fetch_next: Replace the FETCH NEXT count, or append the
            clause if the query has none.

    Returns:
        Rewritten query text.

    Raises:
        ValueError: If the text has no OFFSET clause.
    """
    offsets = list(OFFSET_PATTERN.finditer(text))
    if not offsets:
        msg = "OFFSET not found"
        raise ValueError(msg)

    last = offsets[-1]
    new_text = text[: last.start(2)] + str(new_offset) + text[last.end(2) :]

    if enforce_fetch_next:
        fetches = list(FETCH_PATTERN.finditer(new_text))
        if fetches:
            fetch = fetches[-1]
            new_text = new_text[: fetch.start(2)] + str(page_size) + new_text[fetch.end(2) :]
        else:
            # Keep a statement terminator after the appended clause
            body = new_text.rstrip()
            tail = ";" if body.endswith(";") else ""
            body = body.removesuffix(";").rstrip()
            new_text = f"{body} FETCH NEXT {page_size} ROWS ONLY{tail}"

    return new_text


def rewrite_paging_cursor(
    settings_path: Path,
    key: str,
    action: PagingAction,
    page_size: int,
    enforce_fetch_next: bool = True,
    dry_run: bool = False,
) -> PagingRewriteResult:
    """Move the paging cursor stored in a settings file.

    Args:
        settings_path: JSON settings file.
        key: Key of the query value; a dotted path reaches nested objects.
        action: Paging action to apply.
        page_size: Rows per page (must be positive).
        enforce_fetch_next: Keep a FETCH NEXT clause in sync with page_size.
        dry_run: Compute and log the rewrite without writing anything.

    Returns:
        PagingRewriteResult. ``backup_path`` is set iff the file was written.
    """
    if action == PagingAction.NO_CHANGE:
        return PagingRewriteResult(action=action, success=True, changed=False)

    if page_size <= 0:
        return _failure(action, settings_path, "Page size must be positive")

    if not settings_path.exists():
        return _failure(action, settings_path, "File not found")

    try:
        document = json.loads(settings_path.read_text(encoding="utf-8-sig"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        return _failure(action, settings_path, f"Invalid settings file: {e}")

    value = _lookup(document, key)
    if value is _MISSING:
        return _failure(action, settings_path, "Key not found")
    if not isinstance(value, str):
        return _failure(action, settings_path, "Value is not text")

    old_offset = find_offset(value)
    if old_offset is None:
        return _failure(action, settings_path, "OFFSET not found")

    new_offset = compute_offset(old_offset, action, page_size)
    new_text = rewrite_query(value, new_offset, page_size, enforce_fetch_next)

    if dry_run:
        log_line(
            f"WhatIf: paging {action.value} {key}: OFFSET {old_offset} -> {new_offset}; "
            f"old text: {value!r}; new text: {new_text!r}"
        )
        return PagingRewriteResult(
            action=action,
            success=True,
            changed=False,
            old_offset=old_offset,
            new_offset=new_offset,
            old_text=value,
            new_text=new_text,
        )

    backup_path = _backup_path(settings_path)
    try:
        shutil.copy2(settings_path, backup_path)
        _assign(document, key, new_text)
        _write_json(settings_path, document)
    except OSError as e:
        log_line(f"Paging {action.value} failed for {settings_path}: {e}", Severity.ERROR)
        return PagingRewriteResult(
            action=action,
            success=False,
            old_offset=old_offset,
            new_offset=new_offset,
            old_text=value,
            new_text=new_text,
            error=f"Failed to write settings: {e}",
        )

    log_line(
        f"Paging {action.value} {key}: OFFSET {old_offset} -> {new_offset} (backup {backup_path})"
    )
    return PagingRewriteResult(
        action=action,
        success=True,
        changed=True,
        old_offset=old_offset,
        new_offset=new_offset,
        old_text=value,
        new_text=new_text,
        backup_path=str(backup_path),
    )


def apply_paging(
    spec: PagingSpec,
    action: PagingAction,
    dry_run: bool = False,
) -> PagingRewriteResult:
    """Move the paging cursor described by a PagingSpec.

    Args:
        spec: Paging settings from the policy.
        action: Paging action to apply.
        dry_run: Compute and log the rewrite without writing anything.

    Returns:
        PagingRewriteResult from :func:`rewrite_paging_cursor`.
    """
    return rewrite_paging_cursor(
        settings_path=spec.settings_path,
        key=spec.settings_key,
        action=action,
        page_size=spec.page_size,
        enforce_fetch_next=spec.enforce_fetch_next,
        dry_run=dry_run,
    )


def _failure(action: PagingAction, settings_path: Path, error: str) -> PagingRewriteResult:
    log_line(f"Paging {action.value} failed for {settings_path}: {error}", Severity.WARN)
    return PagingRewriteResult(action=action, success=False, error=error)


def _backup_path(settings_path: Path) -> Path:
    """Get a timestamped backup path that doesn't exist yet."""
    timestamp = datetime.now(UTC).strftime(BACKUP_TIMESTAMP_FORMAT)
    candidate = settings_path.with_name(f"{settings_path.name}.bak.{timestamp}")
    counter = 1
    while candidate.exists():
        candidate = settings_path.with_name(f"{settings_path.name}.bak.{timestamp}-{counter}")
        counter += 1
    return candidate


def _lookup(document: Any, key: str) -> Any:
    """Find ``key`` in a settings document.

    A top-level key matching exactly wins; otherwise ``key`` is split on
    dots and followed through nested objects.
    """
    if not isinstance(document, dict):
        return _MISSING
    if key in document:
        return document[key]

    node: Any = document
    for part in key.split("."):
        if not isinstance(node, dict) or part not in node:
            return _MISSING
        node = node[part]
    return node


def _assign(document: dict[str, Any], key: str, value: str) -> None:
    """Set ``key`` in a settings document, resolved as in :func:`_lookup`."""
    if key in document:
        document[key] = value
        return

    *parents, leaf = key.split(".")
    node = document
    for part in parents:
        node = node[part]
    node[leaf] = value


def _write_json(path: Path, document: Any) -> None:
    """Write a JSON document atomically next to ``path``."""
    tmp_path: Path | None = None
    try:
        with NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            dir=path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            json.dump(document, f, indent=2, ensure_ascii=False)
            f.write("\n")
        os.replace(str(tmp_path), str(path))
        logger.debug("Wrote settings file %s", path)
    except OSError:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise
