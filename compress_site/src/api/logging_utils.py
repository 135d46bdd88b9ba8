"""
Structured logging helpers shared by the API and the compression page.

Every record carries an ``event`` name plus the request context in ``extra``,
so log processors can filter on fields instead of parsing messages.
"""

import logging
import os
import time
from typing import Any

from django.core.files.uploadedfile import UploadedFile
from django.utils.text import get_valid_filename

MB = 1024 * 1024


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for a module."""
    return logging.getLogger(name)


def _elapsed(start_time: float | None) -> dict[str, float]:
    if not start_time:
        return {}
    seconds = time.time() - start_time
    return {
        "processing_time_seconds": round(seconds, 3),
        "processing_time_ms": round(seconds * 1000, 2),
    }


def _describe_upload(uploaded_file: UploadedFile) -> dict[str, Any]:
    size = uploaded_file.size or 0
    return {
        "uploaded_filename": get_valid_filename(os.path.basename(uploaded_file.name)),
        "file_size": size,
        "file_size_mb": round(size / MB, 2),
        "content_type": getattr(uploaded_file, "content_type", None) or "unknown",
    }


def build_request_context(
    request, uploaded_file: UploadedFile | None = None, **additional_context: Any
) -> dict[str, Any]:
    """
    Collect the request fields every action log line carries.

    Args:
        request: Django or DRF request
        uploaded_file: File from a multipart form, when there is one
        **additional_context: Extra fields (compression level, workflow state...)
    """
    meta = request.META
    context: dict[str, Any] = {
        "request_id": getattr(request, "id", None),
        "method": request.method,
        "path": request.path,
        "remote_addr": meta.get("HTTP_X_FORWARDED_FOR", "").split(",")[0].strip()
        or meta.get("REMOTE_ADDR", "unknown"),
        "user_agent": meta.get("HTTP_USER_AGENT", "unknown"),
    }
    if uploaded_file:
        context.update(_describe_upload(uploaded_file))
    context.update(additional_context)
    return context


def log_action_start(
    logger: logging.Logger, action_type: str, context: dict[str, Any]
) -> float:
    """Log that ``action_type`` started; the returned timestamp feeds the other helpers."""
    logger.info(
        "%s started",
        action_type,
        extra={**context, "event": "action_start", "action_type": action_type},
    )
    return time.time()


def log_action_success(
    logger: logging.Logger,
    action_type: str,
    context: dict[str, Any],
    start_time: float,
    **additional_info: Any,
):
    logger.info(
        "%s finished",
        action_type,
        extra={
            **context,
            "event": "action_success",
            "action_type": action_type,
            **_elapsed(start_time),
            **additional_info,
        },
    )


def log_action_error(
    logger: logging.Logger,
    action_type: str,
    context: dict[str, Any],
    error: Exception | str,
    start_time: float | None = None,
    level: str = "error",
    **additional_info: Any,
):
    """
    Log a failed action.

    Args:
        logger: Logger instance
        action_type: Action name, e.g. "COMPRESS_PDF"
        context: Request context from build_request_context
        error: The exception, or the message already returned to the caller
        start_time: Value returned by log_action_start
        level: "error", "warning", "info" or "exception"
        **additional_info: Extra fields
    """
    log_data = {
        **context,
        "event": "action_error",
        "action_type": action_type,
        "error_class": type(error).__name__ if isinstance(error, Exception) else None,
        "error_message": str(error),
        **_elapsed(start_time),
    }
    error_context = getattr(error, "context", None)
    if error_context:
        log_data["error_context"] = error_context
    log_data.update(additional_info)

    log_method = getattr(logger, level, logger.error)
    log_method("%s failed: %s", action_type, error, extra=log_data)


def log_validation_error(
    logger: logging.Logger, serializer_errors: dict[str, Any], context: dict[str, Any]
):
    logger.warning(
        "Request validation failed",
        extra={**context, "event": "validation_error", "validation_errors": serializer_errors},
    )


def log_file_validation_error(
    logger: logging.Logger, reason: str, context: dict[str, Any], **additional_info: Any
):
    """Log a rejected upload or payload (too large, wrong type).

    Logged at INFO: these are user mistakes.
    """
    logger.info(
        "Payload rejected: %s",
        reason,
        extra={
            **context,
            "event": "file_validation_error",
            "validation_reason": reason,
            **additional_info,
        },
    )
