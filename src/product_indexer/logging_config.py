"""
Structured logging configuration with correlation ID support.
Provides JSON logging format suitable for log aggregation of indexing runs.
"""

import functools
import json
import logging
import sys
import time
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Iterator, Optional

correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="")
batch_id_var: ContextVar[str] = ContextVar("batch_id", default="")


def get_correlation_id() -> str:
    """Get correlation ID for the current context."""
    return correlation_id_var.get()


def get_batch_id() -> str:
    """Get batch ID for the current context."""
    return batch_id_var.get()


@contextmanager
def batch_context(
    batch_id: Optional[str] = None,
    correlation_id: Optional[str] = None,
) -> Iterator[str]:
    """
    Bind a batch id, and a correlation id, for the duration of a batch.

    A correlation id already bound by the caller is kept unless one is
    passed explicitly. Both ids are restored on exit.

    Yields:
        The batch id in effect
    """
    cid = correlation_id or get_correlation_id() or str(uuid.uuid4())
    cid_token = correlation_id_var.set(cid)
    bid_token = batch_id_var.set(batch_id or str(uuid.uuid4()))
    try:
        yield batch_id_var.get()
    finally:
        batch_id_var.reset(bid_token)
        correlation_id_var.reset(cid_token)

class StructuredJsonFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.
    One JSON object per line, carrying the correlation and batch ids of the
    indexing run plus any product or timing data attached to the record.
    """

    def __init__(self, service_name: str = "product-indexer"):
        super().__init__()
        self.service_name = service_name

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "service": self.service_name,
            "correlation_id": get_correlation_id(),
            "batch_id": get_batch_id(),
        }

        if record.funcName:
            log_data["function"] = record.funcName
        if record.lineno:
            log_data["line"] = record.lineno

        if hasattr(record, "product_id"):
            log_data["product_id"] = record.product_id
        if hasattr(record, "field_name"):
            log_data["field_name"] = record.field_name

        if hasattr(record, "extra_data") and isinstance(record.extra_data, dict):
            log_data["data"] = record.extra_data
        if hasattr(record, "error") and isinstance(record.error, dict):
            log_data["error"] = record.error

        if record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
            }

        if hasattr(record, "duration_ms"):
            log_data["duration_ms"] = record.duration_ms
        if hasattr(record, "metrics"):
            log_data["metrics"] = record.metrics

        return json.dumps(log_data, default=str)


class ProductLogger(logging.LoggerAdapter):
    """Logger adapter bound to a specific product."""

    def process(self, msg, kwargs):
        kwargs["extra"] = {**kwargs.get("extra", {}), **self.extra}
        return msg, kwargs


def product_logger(logger: logging.Logger, product_id: Optional[str]) -> ProductLogger:
    """Bind a module logger to a product id."""
    return ProductLogger(logger, {"product_id": product_id})


def configure_logging(
    level: str = "INFO",
    service_name: str = "product-indexer",
    json_format: bool = False,
) -> logging.Logger:
    """
    Route every indexer log record to stdout.

    Args:
        level: Log level name; unknown names fall back to INFO
        service_name: Written to each JSON record as ``service``
        json_format: One JSON object per record instead of plain text

    Returns:
        The root logger
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    if json_format:
        handler.setFormatter(StructuredJsonFormatter(service_name))
    else:
        handler.setFormatter(
            logging.Formatter("[%(levelname)s] %(asctime)s - %(name)s - %(message)s")
        )
    root_logger.addHandler(handler)

    return root_logger


def log_execution_time(logger: logging.Logger):
    """
    Decorator to log function execution time.

    Example:
        @log_execution_time(logger)
        def transform_batch(products):
            ...
    """

    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            start_time = time.perf_counter()
            try:
                result = func(*args, **kwargs)
                duration_ms = (time.perf_counter() - start_time) * 1000
                logger.info(
                    f"{func.__name__} completed",
                    extra={"duration_ms": round(duration_ms, 2)},
                )
                return result
            except Exception as e:
                duration_ms = (time.perf_counter() - start_time) * 1000
                logger.error(
                    f"{func.__name__} failed after {duration_ms:.2f}ms: {e}",
                    extra={"duration_ms": round(duration_ms, 2)},
                    exc_info=True,
                )
                raise
        return wrapper
    return decorator
