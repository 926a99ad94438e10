"""
Monitoring and Tracing Configuration Module.

This module provides integration with Logfire for monitoring of the site
backend, including:
- API endpoint tracing
- Database operation monitoring
- Outbound email tracking
- Recruitment phase events (cutoffs, finalization, reverts)
- Error tracking

All helpers degrade to a debug log line when Logfire is unavailable, so they
are safe to call from request handlers.
"""

import logging
import os
from typing import Any, Optional

import logfire
from fastapi import FastAPI

logger = logging.getLogger(__name__)

# Logfire configuration from environment
LOGFIRE_ENABLED = os.getenv("LOGFIRE_ENABLED", "false").lower() in ("true", "1", "yes")
LOGFIRE_TOKEN = os.getenv("LOGFIRE_TOKEN", "")
LOGFIRE_PROJECT_NAME = os.getenv("LOGFIRE_PROJECT_NAME", "abg-site")
LOGFIRE_ENVIRONMENT = os.getenv("LOGFIRE_ENVIRONMENT", "development")
LOGFIRE_SERVICE_NAME = os.getenv("LOGFIRE_SERVICE_NAME", "abg-site-server")
LOGFIRE_SERVICE_VERSION = os.getenv("LOGFIRE_SERVICE_VERSION", "0.0.0")

# Feature flags
LOGFIRE_TRACE_SQLALCHEMY = os.getenv("LOGFIRE_TRACE_SQLALCHEMY", "true").lower() in ("true", "1", "yes")
LOGFIRE_TRACE_FASTAPI = os.getenv("LOGFIRE_TRACE_FASTAPI", "true").lower() in ("true", "1", "yes")


def initialize_logfire(app: Optional[FastAPI] = None) -> bool:
    """
    Initialize Logfire for monitoring and tracing.

    Sets up Logfire with automatic instrumentation for SQLAlchemy database
    operations and, when an application is given, FastAPI endpoints.

    Args:
        app: FastAPI application instance for endpoint instrumentation (optional).

    Returns:
        True when Logfire was configured, False when it stays disabled.
    """
    if not LOGFIRE_ENABLED:
        logger.info("Logfire monitoring is disabled. Set LOGFIRE_ENABLED=true to enable.")
        return False

    if not LOGFIRE_TOKEN:
        logger.warning(
            "Logfire is enabled but LOGFIRE_TOKEN is not set. "
            "Monitoring will not work. Set LOGFIRE_TOKEN to enable Logfire."
        )
        return False

    try:
        logfire.configure(
            token=LOGFIRE_TOKEN,
            service_name=LOGFIRE_SERVICE_NAME,
            service_version=LOGFIRE_SERVICE_VERSION,
            environment=LOGFIRE_ENVIRONMENT,
        )
    except Exception as e:
        logger.error(f"Failed to initialize Logfire: {e}", exc_info=True)
        return False

    if LOGFIRE_TRACE_SQLALCHEMY:
        try:
            logfire.instrument_sqlalchemy()
            logger.info("Logfire: SQLAlchemy instrumentation enabled")
        except Exception as e:
            logger.warning(f"Failed to instrument SQLAlchemy: {e}")

    if LOGFIRE_TRACE_FASTAPI and app is not None:
        try:
            logfire.instrument_fastapi(app=app)
            logger.info("Logfire: FastAPI instrumentation enabled")
        except Exception as e:
            logger.warning(f"Failed to instrument FastAPI: {e}")

    logger.info(
        f"Logfire monitoring initialized: "
        f"project={LOGFIRE_PROJECT_NAME}, "
        f"environment={LOGFIRE_ENVIRONMENT}, "
        f"service={LOGFIRE_SERVICE_NAME}"
    )
    return True


def log_api_request(method: str, path: str, status_code: int, duration_ms: float) -> None:
    """
    Log an API request with performance metrics.

    Args:
        method: HTTP method
        path: Request path
        status_code: HTTP status code
        duration_ms: Request duration in milliseconds
    """
    try:
        logfire.info(
            "API request completed",
            method=method,
            path=path,
            status_code=status_code,
            duration_ms=duration_ms,
        )
    except Exception:
        logger.debug(f"Could not log API request to Logfire: {method} {path}")


def log_email_sent(to_email: str, template: str, success: bool) -> None:
    """Record the outcome of a single outbound email."""
    try:
        logfire.info(
            "Email dispatched",
            to_email=to_email,
            template=template,
            success=success,
        )
    except Exception:
        logger.debug(f"Could not log email to Logfire: {to_email}")


def log_phase_event(event: str, cycle_id: int, phase: str, **attributes: Any) -> None:
    """
    Log a recruitment phase transition.

    Args:
        event: Short event name (e.g. "cutoff_applied", "phase_reverted")
        cycle_id: Recruitment cycle identifier
        phase: Review phase name
        attributes: Extra context attached to the span
    """
    try:
        logfire.info(
            "Recruitment phase {event}",
            event=event,
            cycle_id=cycle_id,
            phase=phase,
            **attributes,
        )
    except Exception:
        logger.debug(f"Could not log phase event to Logfire: {event} cycle={cycle_id} phase={phase}")


def log_error(error_type: str, error_message: str, context: Optional[dict] = None) -> None:
    """
    Log an error with context for debugging.

    Args:
        error_type: Type of error
        error_message: Error message
        context: Additional context dictionary
    """
    try:
        logfire.error(
            f"{error_type}: {error_message}",
            **(context or {}),
        )
    except Exception:
        logger.debug(f"Could not log error to Logfire: {error_type}")
