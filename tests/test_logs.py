"""Tests for the logger factory."""

import logging

from table_engine.core import logs
from table_engine.core.logs import logger


class TestLogger:
    def test_file_paths_use_module_stem(self):
        log = logger("/srv/app/table_engine/engine/sorting.py")

        assert log.name == "sorting"

    def test_handler_added_once(self):
        first = logger("table_engine.tests.once")
        second = logger("table_engine.tests.once")

        assert first is second
        assert len(second.handlers) == 1

    def test_level_from_environment(self):
        expected = getattr(logging, logs._LOG_LEVEL, logging.WARNING)

        assert logger("table_engine.tests.level").level == expected
