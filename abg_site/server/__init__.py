"""
abg-site Server Package.

This package contains the web server implementation for the organization site.
It includes the API definition, service logic, and configuration.

Subpackages:
    api: FastAPI route definitions and endpoint logic.
    core: Configuration and constants.
    services: Business rules shared by the routers.
    middleware: Request tracing.
    exception_handlers: Mapping of errors to JSON responses.
"""
