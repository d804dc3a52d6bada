"""Structured logger for observability."""

import logging
from typing import Any, Optional

# Configure root logger with JSON-like structured format
_logger = logging.getLogger("buyer_leads")
_logger.setLevel(logging.INFO)

# Create console handler if not exists
if not _logger.handlers:
    handler = logging.StreamHandler()
    handler.setLevel(logging.INFO)
    formatter = logging.Formatter(
        "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler.setFormatter(formatter)
    _logger.addHandler(handler)


def log_event(
    request_id: str,
    component: str,
    level: int = logging.INFO,
    **kwargs: Any,
) -> None:
    """
    Log structured event for a request.

    Args:
        request_id: Request identifier (UUID string)
        component: Component name (e.g., 'http', 'import', 'rate_limit')
        level: Log level (default: INFO)
        **kwargs: Additional structured fields to log
    """
    fields = {
        "request_id": request_id,
        "component": component,
    }
    fields.update(kwargs)

    # Format as key=value pairs for readability
    log_parts = [f"{k}={v!r}" for k, v in fields.items()]
    log_message = " | ".join(log_parts)

    _logger.log(level, log_message)


def log_import_outcome(
    request_id: str,
    actor_id: str,
    outcome: str,
    row_count: int,
    **kwargs: Any,
) -> None:
    """
    Log the terminal state of a batch import.

    Args:
        request_id: Request identifier
        actor_id: Acting identity
        outcome: Terminal state (e.g., 'committed', 'rejected_validation')
        row_count: Number of rows submitted
        **kwargs: Additional fields
    """
    level = logging.INFO if outcome == "committed" else logging.WARNING
    log_event(
        request_id=request_id,
        component="import",
        level=level,
        actor_id=actor_id,
        import_outcome=outcome,
        import_row_count=row_count,
        **kwargs,
    )


def log_mutation(
    request_id: str,
    actor_id: str,
    action: str,
    buyer_id: Optional[str] = None,
    **kwargs: Any,
) -> None:
    """
    Log a single-record mutation.

    Args:
        request_id: Request identifier
        actor_id: Acting identity
        action: Mutation kind ('created', 'updated', 'deleted')
        buyer_id: Lead identifier
        **kwargs: Additional fields
    """
    fields = {"actor_id": actor_id, "action": action}
    if buyer_id is not None:
        fields["buyer_id"] = buyer_id
    fields.update(kwargs)

    log_event(
        request_id=request_id,
        component="mutation",
        **fields,
    )


def log_rate_limit_decision(
    request_id: str,
    limiter: str,
    key: str,
    allowed: bool,
    **kwargs: Any,
) -> None:
    """
    Log a rate limiter decision.

    Args:
        request_id: Request identifier
        limiter: Limiter name ('import' or 'create')
        key: Rate limit key
        allowed: Whether the request was allowed
        **kwargs: Additional fields
    """
    log_event(
        request_id=request_id,
        component="rate_limit",
        level=logging.INFO if allowed else logging.WARNING,
        rate_limiter=limiter,
        rate_limit_key=key,
        rate_limit_allowed=allowed,
        **kwargs,
    )


# Export logger instance for direct use
logger = _logger
