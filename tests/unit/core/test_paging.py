"""Unit tests for paging cursor rewriting."""

import json
import logging
from pathlib import Path

import pytest
from fakes import SAMPLE_QUERY
from svcctl.core.paging import (
    apply_paging,
    compute_offset,
    find_offset,
    rewrite_paging_cursor,
    rewrite_query,
)
from svcctl.models.paging import PagingAction
from svcctl.models.policy import Configuration


def _query(path: Path) -> str:
    return json.loads(path.read_text())["Pager"]["Query"]


class TestComputeOffset:
    """Tests for compute_offset arithmetic."""

    def test_next_page(self) -> None:
        """NextPage advances by one page."""
        assert compute_offset(0, PagingAction.NEXT_PAGE, 1000000) == 1000000

    def test_previous_page_clamps_to_zero(self) -> None:
        """PreviousPage never goes below zero."""
        assert compute_offset(500000, PagingAction.PREVIOUS_PAGE, 1000000) == 0
        assert compute_offset(3000, PagingAction.PREVIOUS_PAGE, 1000) == 2000

    def test_restart_from_page_1(self) -> None:
        """RestartFromPage1 resets to zero."""
        assert compute_offset(7000, PagingAction.RESTART_FROM_PAGE_1, 1000) == 0

    def test_no_change(self) -> None:
        """NoChange keeps the offset."""
        assert compute_offset(7000, PagingAction.NO_CHANGE, 1000) == 7000


class TestRewriteQuery:
    """Tests for find_offset and rewrite_query."""

    def test_find_offset_uses_last_clause(self) -> None:
        """The last OFFSET clause wins."""
        text = "SELECT * FROM (SELECT 1 OFFSET 5 ROWS) t OFFSET 20 ROWS"

        assert find_offset(text) == 20
        assert find_offset("SELECT 1") is None

    def test_replaces_only_numbers(self) -> None:
        """Keywords and spacing are preserved."""
        text = "select * from t offset  10 row fetch first 5 rows only"

        assert rewrite_query(text, 30, 20, True) == (
            "select * from t offset  30 row fetch first 20 rows only"
        )

    def test_appends_fetch_next(self) -> None:
        """A missing FETCH NEXT clause is appended."""
        text = "SELECT * FROM t ORDER BY Id OFFSET 0 ROWS   "

        assert rewrite_query(text, 100, 100, True) == (
            "SELECT * FROM t ORDER BY Id OFFSET 100 ROWS FETCH NEXT 100 ROWS ONLY"
        )

    def test_appends_fetch_next_before_terminator(self) -> None:
        """The appended clause goes before a trailing semicolon."""
        text = "SELECT * FROM T ORDER BY Id OFFSET 0 ROWS;"

        assert rewrite_query(text, 10, 10, True) == (
            "SELECT * FROM T ORDER BY Id OFFSET 10 ROWS FETCH NEXT 10 ROWS ONLY;"
        )

    def test_fetch_untouched_when_not_enforced(self) -> None:
        """Without enforcement, FETCH is left as is."""
        text = "SELECT * FROM t OFFSET 0 ROWS FETCH NEXT 5 ROWS ONLY"

        assert rewrite_query(text, 10, 10, False) == (
            "SELECT * FROM t OFFSET 10 ROWS FETCH NEXT 5 ROWS ONLY"
        )

    def test_missing_offset_raises(self) -> None:
        """Queries without OFFSET cannot be rewritten."""
        with pytest.raises(ValueError, match="OFFSET not found"):
            rewrite_query("SELECT 1", 0, 10, True)


class TestRewritePagingCursor:
    """Tests for rewrite_paging_cursor on a settings file."""

    def test_next_page_writes_and_backs_up(self, settings_file: Path) -> None:
        """A real rewrite updates the value and leaves a backup of the original."""
        original = settings_file.read_text()

        result = rewrite_paging_cursor(
            settings_file, "Pager.Query", PagingAction.NEXT_PAGE, 1000000
        )

        assert result.success and result.changed
        assert result.old_offset == 0
        assert result.new_offset == 1000000
        assert _query(settings_file) == SAMPLE_QUERY.replace("OFFSET 0", "OFFSET 1000000")
        assert result.backup_path is not None
        backup = Path(result.backup_path)
        assert backup.name.startswith("appsettings.json.bak.")
        assert backup.read_text() == original
        assert json.loads(settings_file.read_text())["Other"] == 1

    def test_backups_do_not_collide(self, settings_file: Path) -> None:
        """Two rewrites in the same second keep both backups."""
        first = rewrite_paging_cursor(settings_file, "Pager.Query", PagingAction.NEXT_PAGE, 10)
        second = rewrite_paging_cursor(settings_file, "Pager.Query", PagingAction.NEXT_PAGE, 10)

        assert first.backup_path != second.backup_path
        assert second.old_offset == 10
        assert second.new_offset == 20

    def test_top_level_key(self, tmp_path: Path) -> None:
        """Exact top-level keys are found, even when they contain dots."""
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"Pager.Query": "SELECT 1 OFFSET 4 ROWS"}))

        result = rewrite_paging_cursor(path, "Pager.Query", PagingAction.RESTART_FROM_PAGE_1, 2)

        assert result.success
        assert json.loads(path.read_text())["Pager.Query"] == (
            "SELECT 1 OFFSET 0 ROWS FETCH NEXT 2 ROWS ONLY"
        )

    def test_dry_run_writes_nothing(
        self, settings_file: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Dry-run computes the rewrite but neither writes nor backs up."""
        before = settings_file.read_text()

        with caplog.at_level(logging.INFO, logger="svcctl.audit"):
            result = rewrite_paging_cursor(
                settings_file, "Pager.Query", PagingAction.NEXT_PAGE, 1000, dry_run=True
            )

        assert result.success
        assert not result.changed
        assert result.new_offset == 1000
        assert result.backup_path is None
        assert settings_file.read_text() == before
        assert list(settings_file.parent.iterdir()) == [settings_file]
        assert len(caplog.messages) == 1
        assert caplog.messages[0].startswith("WhatIf: paging next Pager.Query")

    def test_no_change_is_noop(self, settings_file: Path) -> None:
        """NoChange succeeds without reading the file."""
        result = rewrite_paging_cursor(
            settings_file.with_name("missing.json"), "k", PagingAction.NO_CHANGE, 10
        )

        assert result.success
        assert not result.changed

    @pytest.mark.parametrize(
        ("content", "key", "error"),
        [
            ("{not json", "Pager.Query", "Invalid settings file"),
            ('{"Pager": {}}', "Pager.Query", "Key not found"),
            ('{"Pager": {"Query": 5}}', "Pager.Query", "Value is not text"),
            ('{"Pager": {"Query": "SELECT 1"}}', "Pager.Query", "OFFSET not found"),
        ],
    )
    def test_failure_reasons(
        self, tmp_path: Path, content: str, key: str, error: str
    ) -> None:
        """Each failure is reported in the result without touching the file."""
        path = tmp_path / "settings.json"
        path.write_text(content)

        result = rewrite_paging_cursor(path, key, PagingAction.NEXT_PAGE, 10)

        assert result.failed
        assert result.error is not None
        assert result.error.startswith(error)
        assert path.read_text() == content
        assert list(tmp_path.iterdir()) == [path]

    def test_missing_file(self, tmp_path: Path) -> None:
        """A missing settings file is reported."""
        result = rewrite_paging_cursor(
            tmp_path / "nope.json", "k", PagingAction.NEXT_PAGE, 10
        )

        assert result.error == "File not found"

    def test_non_positive_page_size(self, settings_file: Path) -> None:
        """Page size must be positive."""
        result = rewrite_paging_cursor(settings_file, "Pager.Query", PagingAction.NEXT_PAGE, 0)

        assert result.error == "Page size must be positive"

    def test_failure_logged_as_warning(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Failures write a WARN audit line."""
        with caplog.at_level(logging.INFO, logger="svcctl.audit"):
            rewrite_paging_cursor(tmp_path / "nope.json", "k", PagingAction.NEXT_PAGE, 10)

        assert caplog.records[-1].levelno == logging.WARNING

    def test_utf8_bom_is_accepted(self, tmp_path: Path) -> None:
        """Settings files with a UTF-8 BOM are readable."""
        path = tmp_path / "settings.json"
        path.write_bytes(b"\xef\xbb\xbf" + json.dumps({"Q": "x OFFSET 1 ROWS"}).encode())

        result = rewrite_paging_cursor(path, "Q", PagingAction.NEXT_PAGE, 1, False)

        assert result.success
        assert json.loads(path.read_text(encoding="utf-8"))["Q"] == "x OFFSET 2 ROWS"


class TestApplyPaging:
    """Tests for apply_paging."""

    def test_uses_paging_spec(self, configuration: Configuration, settings_file: Path) -> None:
        """apply_paging reads path, key and page size from the configuration."""
        result = apply_paging(configuration.paging, PagingAction.NEXT_PAGE)

        assert result.new_offset == 1000000
        assert "OFFSET 1000000 ROWS" in _query(settings_file)
