"""Tests for structured logging."""

import json
import logging

import pytest

from product_indexer.logging_config import (
    StructuredJsonFormatter,
    batch_context,
    configure_logging,
    get_batch_id,
    get_correlation_id,
    log_execution_time,
    product_logger,
)


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers[:]:
        if handler not in handlers:
            root.removeHandler(handler)
    root.setLevel(level)


class TestBatchContext:
    """Tests for correlation and batch ids."""

    def test_ids_generated(self):
        """Test both ids are generated when none are given."""
        with batch_context() as batch_id:
            assert batch_id
            assert get_batch_id() == batch_id
            assert get_correlation_id()

    def test_ids_restored_on_exit(self):
        """Test the enclosing ids are back in place after the batch."""
        with batch_context("outer", correlation_id="corr-outer"):
            with batch_context("inner", correlation_id="corr-inner"):
                assert get_batch_id() == "inner"
                assert get_correlation_id() == "corr-inner"
            assert get_batch_id() == "outer"
            assert get_correlation_id() == "corr-outer"

        assert get_batch_id() == ""
        assert get_correlation_id() == ""

    def test_ids_restored_on_error(self):
        """Test a failing batch does not leave its ids behind."""
        with pytest.raises(RuntimeError):
            with batch_context("batch-1"):
                raise RuntimeError("boom")

        assert get_batch_id() == ""

    def test_caller_correlation_id_kept(self):
        """Test a correlation id bound by the caller is reused."""
        with batch_context("job", correlation_id="corr-job"):
            with batch_context("batch-2"):
                assert get_correlation_id() == "corr-job"


class TestStructuredJsonFormatter:
    """Tests for StructuredJsonFormatter."""

    def test_format_includes_context(self):
        """Test records carry service, ids and product data."""
        record = logging.LogRecord(
            "product_indexer.content", logging.WARNING, __file__, 10,
            "Feature lookup failed", None, None,
        )
        record.product_id = "P1"
        record.metrics = {"document_count": 1}

        with batch_context("batch-1", correlation_id="corr-1"):
            data = json.loads(StructuredJsonFormatter("indexer-test").format(record))

        assert data["service"] == "indexer-test"
        assert data["level"] == "WARNING"
        assert data["correlation_id"] == "corr-1"
        assert data["batch_id"] == "batch-1"
        assert data["product_id"] == "P1"
        assert data["metrics"] == {"document_count": 1}


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_json_handler(self):
        """Test JSON output is selected on request."""
        configure_logging(level="debug", json_format=True)
        root = logging.getLogger()

        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, StructuredJsonFormatter)

    def test_text_handler(self):
        """Test plain text output is the default."""
        logger = configure_logging(level="WARNING")
        root = logging.getLogger()

        assert root.level == logging.WARNING
        assert not isinstance(root.handlers[0].formatter, StructuredJsonFormatter)
        assert logger is root


class TestProductLogger:
    """Tests for product-bound logging."""

    def test_product_id_attached(self, caplog):
        """Test records carry the bound product id."""
        log = product_logger(logging.getLogger("product_indexer.test"), "P9")
        with caplog.at_level(logging.INFO, logger="product_indexer.test"):
            log.info("hello", extra={"field_name": "features"})

        assert caplog.records[0].product_id == "P9"
        assert caplog.records[0].field_name == "features"


class TestLogExecutionTime:
    """Tests for the timing decorator."""

    def test_logs_duration(self, caplog):
        """Test successful calls log their duration."""
        logger = logging.getLogger("product_indexer.timing")

        @log_execution_time(logger)
        def work():
            return 42

        with caplog.at_level(logging.INFO, logger="product_indexer.timing"):
            assert work() == 42

        assert "work completed" in caplog.text
        assert hasattr(caplog.records[0], "duration_ms")

    def test_reraises(self, caplog):
        """Test failures are logged and re-raised."""
        logger = logging.getLogger("product_indexer.timing")

        @log_execution_time(logger)
        def broken():
            raise ValueError("bad")

        with caplog.at_level(logging.ERROR, logger="product_indexer.timing"):
            with pytest.raises(ValueError):
                broken()

        assert "broken failed" in caplog.text
