"""Test fixtures for Quotegen tests."""

from .metrics import sample
from .responses import (
    SAMPLE_COMPLETION,
    SAMPLE_ERROR_BODIES,
    SAMPLE_QUOTE_CONTENT,
    make_completion,
)

__all__ = [
    "sample",
    "SAMPLE_COMPLETION",
    "SAMPLE_ERROR_BODIES",
    "SAMPLE_QUOTE_CONTENT",
    "make_completion",
]
