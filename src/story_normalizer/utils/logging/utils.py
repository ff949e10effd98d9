# ABOUTME: Structured logger helpers binding story, document and operation context
# ABOUTME: Context lives in structlog contextvars so every logger inside a run carries it

import functools
import time
import uuid
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any, TypeVar

import structlog
from structlog.contextvars import bound_contextvars

F = TypeVar("F", bound=Callable[..., Any])

ROOT_LOGGER_NAME = "story_normalizer"


def get_logger(name: str = ROOT_LOGGER_NAME) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger; output follows whatever configure_logging installed."""
    return structlog.get_logger(name)


def generate_operation_id() -> str:
    """Generate a short id grouping the log events of one operation."""
    return uuid.uuid4().hex[:8]


@contextmanager
def story_context(**context: Any) -> Iterator[None]:
    """Bind story-level keys (story id, input type, ...) for the duration of a block.

    Keys whose value is ``None`` are skipped so callers can pass optional
    identifiers straight through.
    """
    with bound_contextvars(**{key: value for key, value in context.items() if value is not None}):
        yield


@contextmanager
def with_document_context(source: str) -> Iterator[structlog.stdlib.BoundLogger]:
    """Bind the document source (file path or ``<stdin>``) and yield the CLI logger."""
    with story_context(source=source, operation_id=generate_operation_id()):
        yield get_logger(f"{ROOT_LOGGER_NAME}.cli")


def with_operation_context(
    operation: str, summarize: Callable[[Any], dict[str, Any]] | None = None
) -> Callable[[F], F]:
    """Decorator logging one completed operation with its outcome.

    Every event logged while the function runs carries ``operation`` and
    ``operation_id``. On success the completion event also carries whatever
    ``summarize(result)`` returns, e.g. issue counts. Failures are logged and
    re-raised.
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            logger = get_logger(func.__module__)
            start_time = time.perf_counter()

            with story_context(operation=operation, operation_id=generate_operation_id()):
                try:
                    result = func(*args, **kwargs)
                except Exception as e:
                    logger.error(
                        f"Failed {operation}",
                        duration_seconds=round(time.perf_counter() - start_time, 3),
                        error=str(e),
                        error_type=type(e).__name__,
                    )
                    raise

                summary = summarize(result) if summarize is not None else {}
                logger.debug(
                    f"Completed {operation}",
                    duration_seconds=round(time.perf_counter() - start_time, 3),
                    **summary,
                )
                return result

        return wrapper  # type: ignore[return-value]

    return decorator
