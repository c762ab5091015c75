"""
Exception hierarchy for ringfir.

Every error is a configuration or contract violation detected at setup time;
``RingFilter.feed`` raises nothing of its own.
"""


class FilterError(Exception):
    """Base class for all ringfir errors."""


class SymmetryError(FilterError, AssertionError):
    """Coefficient table is not palindromic about its centre."""


class TapCountError(FilterError, ValueError):
    """Tap count is zero or disagrees with the declared size."""


class SampleTypeError(FilterError, TypeError):
    """Sample type lacks zero, addition or scaling by a real coefficient."""


class TapFileError(FilterError, ValueError):
    """Tap file cannot be read or has an unknown format."""
