"""API contract tests.

These tests pin the JSON shapes and status codes of the public endpoints so
clients keep working across releases.
"""
