"""Small helpers shared by the use-case services."""

import time

import structlog

from hoopstats.errors import FieldError


def bind_service_logger(
    logger: structlog.stdlib.BoundLogger, component: str
) -> structlog.stdlib.BoundLogger:
    return logger.bind(module="service", component=component)


def elapsed_ms(start: float) -> float:
    """Milliseconds since ``start``, a ``time.perf_counter()`` reading."""
    return round((time.perf_counter() - start) * 1000, 2)


def dump_field_errors(errors: list[FieldError]) -> list[dict[str, str]]:
    return [fe.to_dict() for fe in errors]
