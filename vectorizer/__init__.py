"""Shared libraries for the vectorizer service.

Subpackages:
- ``vectorizer.common``: configuration, logging, metrics, errors, validation.
- ``vectorizer.vectors``: option/result types and pure vector math.

Notes:
- Nothing here depends on the HTTP layer or on a model-loading library, so
  vector math can be reused by any caller holding plain float sequences.
"""
