"""
Core utilities shared across the orgtrack API.

This package hosts:
- configuration helpers (env vars, database location, feature windows)
- cross-cutting helpers such as logging and timestamp/id generation

Repositories and services depend on these primitives instead of reading the
environment or formatting timestamps on their own.
"""
