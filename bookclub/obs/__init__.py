"""Observability utilities."""

from .metrics import (
    NOMINATIONS_COUNTER,
    POLLS_CLOSED_COUNTER,
    POLLS_STARTED_COUNTER,
    QUESTIONS_COUNTER,
    REJECTED_OPERATIONS_COUNTER,
    REQUEST_COUNTER,
    REQUEST_ERROR_COUNTER,
    REQUEST_LATENCY_SECONDS,
    VOTE_TOGGLE_COUNTER,
    WINNERS_COUNTER,
    PrometheusMiddleware,
    metrics_router,
    record_rejection,
    record_vote_toggle,
)
from .tracing import (
    initialise_tracing,
    instrument_fastapi_app,
    instrument_sqlalchemy_engine,
    service_span,
)

__all__ = [
    "NOMINATIONS_COUNTER",
    "POLLS_CLOSED_COUNTER",
    "POLLS_STARTED_COUNTER",
    "PrometheusMiddleware",
    "QUESTIONS_COUNTER",
    "REJECTED_OPERATIONS_COUNTER",
    "REQUEST_COUNTER",
    "REQUEST_ERROR_COUNTER",
    "REQUEST_LATENCY_SECONDS",
    "VOTE_TOGGLE_COUNTER",
    "WINNERS_COUNTER",
    "initialise_tracing",
    "instrument_fastapi_app",
    "instrument_sqlalchemy_engine",
    "metrics_router",
    "record_rejection",
    "record_vote_toggle",
    "service_span",
]
