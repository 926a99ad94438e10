"""Unit tests for the database layer.

This package contains unit tests for abg_site/core/database, including:

- Entity model validation tests (SQLModel)
- Repository query tests against in-memory SQLite

All tests use in-memory SQLite to ensure fast execution
without requiring external database services.
"""
