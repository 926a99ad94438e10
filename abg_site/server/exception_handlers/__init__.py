"""Exception handlers registered on the FastAPI application."""

from .global_handler import global_exception_handler, setup_exception_handlers, site_error_handler

__all__ = ["global_exception_handler", "setup_exception_handlers", "site_error_handler"]
