#!/usr/bin/env python3
"""
Errors raised while loading and classifying fixtures.

InputError and EmptyResultError are fatal to a run. ValidationSkip only ever
drops the one record it was raised for.
"""


class InputError(RuntimeError):
    """Source data is missing, unreadable or has no rows."""


class ValidationSkip(ValueError):
    """A single record lacks a date, home team or away team."""


class EmptyResultError(RuntimeError):
    """No league matches are left after filtering."""
