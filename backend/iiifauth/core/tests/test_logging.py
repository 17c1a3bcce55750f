"""Unit tests for contextual logging and settings."""

import json
import logging

from iiifauth.core.config import LogFormat, Settings
from iiifauth.core.logging import (
    ContextualLogger,
    LoggerConfigurator,
    _JSONFormatter,
    _TextFormatter,
)


class TestContextualLogger:
    def test_with_context_merges_without_mutating_parent(self):
        parent = LoggerConfigurator.configure_logger("iiifauth.test", dimensions={"a": 1})

        child = parent.with_context(b=2, a=3)

        assert isinstance(child, ContextualLogger)
        assert child.dimensions == {"a": 3, "b": 2}
        assert parent.dimensions == {"a": 1}

    def test_dimensions_reach_records(self, caplog):
        log = LoggerConfigurator.configure_logger("iiifauth.test.records").with_context(
            data_uri="https://ex.org/info.json"
        )
        logging.getLogger("iiifauth").addHandler(caplog.handler)
        try:
            with caplog.at_level(logging.INFO, logger="iiifauth"):
                log.info("done")
        finally:
            logging.getLogger("iiifauth").removeHandler(caplog.handler)

        record = caplog.records[-1]
        assert record.dimensions == {"data_uri": "https://ex.org/info.json"}


class TestFormatters:
    def _record(self) -> logging.LogRecord:
        record = logging.LogRecord("iiifauth", logging.INFO, __file__, 1, "hello", None, None)
        record.dimensions = {"variant": "optimistic"}
        return record

    def test_text_appends_dimensions(self):
        line = _TextFormatter("%(message)s").format(self._record())

        assert line == "hello [variant=optimistic]"

    def test_json_includes_dimensions(self):
        payload = json.loads(_JSONFormatter().format(self._record()))

        assert payload["message"] == "hello"
        assert payload["variant"] == "optimistic"


class TestSettings:
    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("IIIFAUTH_HTTP_TIMEOUT_SECONDS", "5")
        monkeypatch.setenv("IIIFAUTH_LOG_FORMAT", "json")

        settings = Settings()

        assert settings.HTTP_TIMEOUT_SECONDS == 5.0
        assert settings.LOG_FORMAT == LogFormat.JSON
