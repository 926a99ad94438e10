"""
Unit tests for the Logfire monitoring module.

This test suite covers:
- Logfire initialization with various configurations
- Feature flag handling
- Custom logging functions (API requests, emails, phase events, errors)
- Graceful degradation when Logfire calls fail
"""

from unittest.mock import MagicMock, patch

from fastapi import FastAPI

from abg_site.core import monitoring

MODULE = "abg_site.core.monitoring"


class TestInitializeLogfire:
    """Test initialize_logfire under different configurations."""

    def test_disabled(self):
        with patch(f"{MODULE}.LOGFIRE_ENABLED", False), patch(f"{MODULE}.logfire") as mock_logfire:
            assert monitoring.initialize_logfire() is False
            mock_logfire.configure.assert_not_called()

    def test_enabled_without_token(self):
        with (
            patch(f"{MODULE}.LOGFIRE_ENABLED", True),
            patch(f"{MODULE}.LOGFIRE_TOKEN", ""),
            patch(f"{MODULE}.logfire") as mock_logfire,
        ):
            assert monitoring.initialize_logfire() is False
            mock_logfire.configure.assert_not_called()

    def test_configures_and_instruments(self):
        app = FastAPI()
        with (
            patch(f"{MODULE}.LOGFIRE_ENABLED", True),
            patch(f"{MODULE}.LOGFIRE_TOKEN", "token-123"),
            patch(f"{MODULE}.LOGFIRE_TRACE_SQLALCHEMY", True),
            patch(f"{MODULE}.LOGFIRE_TRACE_FASTAPI", True),
            patch(f"{MODULE}.logfire") as mock_logfire,
        ):
            assert monitoring.initialize_logfire(app) is True

            mock_logfire.configure.assert_called_once()
            assert mock_logfire.configure.call_args.kwargs["token"] == "token-123"
            mock_logfire.instrument_sqlalchemy.assert_called_once()
            mock_logfire.instrument_fastapi.assert_called_once_with(app=app)

    def test_fastapi_not_instrumented_without_app(self):
        with (
            patch(f"{MODULE}.LOGFIRE_ENABLED", True),
            patch(f"{MODULE}.LOGFIRE_TOKEN", "token-123"),
            patch(f"{MODULE}.logfire") as mock_logfire,
        ):
            assert monitoring.initialize_logfire() is True
            mock_logfire.instrument_fastapi.assert_not_called()

    def test_configure_failure_returns_false(self):
        with (
            patch(f"{MODULE}.LOGFIRE_ENABLED", True),
            patch(f"{MODULE}.LOGFIRE_TOKEN", "token-123"),
            patch(f"{MODULE}.logfire") as mock_logfire,
        ):
            mock_logfire.configure.side_effect = RuntimeError("boom")
            assert monitoring.initialize_logfire() is False

    def test_instrumentation_failure_is_tolerated(self):
        with (
            patch(f"{MODULE}.LOGFIRE_ENABLED", True),
            patch(f"{MODULE}.LOGFIRE_TOKEN", "token-123"),
            patch(f"{MODULE}.LOGFIRE_TRACE_SQLALCHEMY", True),
            patch(f"{MODULE}.logfire") as mock_logfire,
        ):
            mock_logfire.instrument_sqlalchemy.side_effect = RuntimeError("no engine")
            assert monitoring.initialize_logfire() is True


class TestLoggingHelpers:
    """Test the custom logging helpers."""

    def test_log_api_request(self):
        with patch(f"{MODULE}.logfire") as mock_logfire:
            monitoring.log_api_request("GET", "/api/v1/events", 200, 12.5)

            mock_logfire.info.assert_called_once_with(
                "API request completed", method="GET", path="/api/v1/events", status_code=200, duration_ms=12.5
            )

    def test_log_email_sent(self):
        with patch(f"{MODULE}.logfire") as mock_logfire:
            monitoring.log_email_sent("ada@umich.edu", "application_advance", False)

            kwargs = mock_logfire.info.call_args.kwargs
            assert kwargs == {"to_email": "ada@umich.edu", "template": "application_advance", "success": False}

    def test_log_phase_event_passes_attributes(self):
        with patch(f"{MODULE}.logfire") as mock_logfire:
            monitoring.log_phase_event("cutoff_applied", 3, "application", advanced=4)

            kwargs = mock_logfire.info.call_args.kwargs
            assert kwargs["event"] == "cutoff_applied"
            assert kwargs["cycle_id"] == 3
            assert kwargs["advanced"] == 4

    def test_log_error_with_context(self):
        with patch(f"{MODULE}.logfire") as mock_logfire:
            monitoring.log_error("ValueError", "bad input", {"path": "/x"})

            mock_logfire.error.assert_called_once_with("ValueError: bad input", path="/x")

    def test_helpers_swallow_logfire_failures(self):
        broken = MagicMock()
        broken.info.side_effect = RuntimeError("exporter down")
        broken.error.side_effect = RuntimeError("exporter down")
        with patch(f"{MODULE}.logfire", broken):
            monitoring.log_api_request("GET", "/", 200, 1.0)
            monitoring.log_email_sent("ada@umich.edu", "custom", True)
            monitoring.log_phase_event("finalized", 1, "application")
            monitoring.log_error("Exception", "boom")
