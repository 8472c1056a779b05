"""Tests for the vectorizer service.

Unit tests cover configuration, validation, metrics, and vector math; the
provider and HTTP tests run against a fake backend so no model weights are
downloaded.
"""
