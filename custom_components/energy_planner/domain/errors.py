"""Errors raised by the energy engine."""

from __future__ import annotations


class InvalidArgument(ValueError):
    """Raised when an engine operation is called with out-of-range input.

    Always fatal to the single call, never to store integrity: every
    operation validates before it mutates.
    """
