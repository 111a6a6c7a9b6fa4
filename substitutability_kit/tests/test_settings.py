"""Tests for environment settings and logging setup."""

import logging

import pytest

from substitutability_kit.engine import SubstitutabilityChecker
from substitutability_kit.fixtures.reptiles import SAMPLES, crawling_reptile_hierarchy
from substitutability_kit.logging_setup import CheckIdFilter, check_id_ctx, configure_logging
from substitutability_kit.settings import AppSettings


class TestAppSettings:
    """Environment-driven settings."""

    def test_defaults(self, monkeypatch) -> None:
        """Defaults apply when variables are unset."""
        for name in ("MIN_SAMPLE_INPUTS", "MAX_ANCESTOR_DEPTH", "LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)

        cfg = AppSettings()

        assert cfg.min_sample_inputs == 1
        assert cfg.max_ancestor_depth == 64
        assert cfg.log_level == "INFO"

    def test_overrides(self, monkeypatch) -> None:
        """Variables override defaults."""
        monkeypatch.setenv("MIN_SAMPLE_INPUTS", "3")
        monkeypatch.setenv("MAX_ANCESTOR_DEPTH", "8")
        monkeypatch.setenv("LOG_LEVEL", "debug")

        cfg = AppSettings()

        assert cfg.min_sample_inputs == 3
        assert cfg.max_ancestor_depth == 8
        assert cfg.log_level == "DEBUG"


class TestCheckIdFilter:
    """Correlation ids in log records."""

    def test_default_check_id(self) -> None:
        """Outside a check the id is '-'."""
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)

        assert CheckIdFilter().filter(record)
        assert record.check_id == "-"

    def test_check_sets_id_for_its_records(self, caplog: pytest.LogCaptureFixture) -> None:
        """Records emitted during a check carry that check's id."""
        caplog.handler.addFilter(CheckIdFilter())
        checker = SubstitutabilityChecker(crawling_reptile_hierarchy())

        with caplog.at_level("INFO", logger="substitutability_kit.engine"):
            checker.check("Snake", SAMPLES)

        ids = {r.check_id for r in caplog.records if r.name == "substitutability_kit.engine"}
        assert len(ids) == 1
        assert len(ids.pop()) == 12
        assert check_id_ctx.get() == "-"

    def test_configure_logging_attaches_filter(self) -> None:
        """Every root handler gets exactly one CheckIdFilter."""
        configure_logging()
        configure_logging()

        for handler in logging.root.handlers:
            assert sum(isinstance(f, CheckIdFilter) for f in handler.filters) == 1
