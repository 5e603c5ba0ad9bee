# ========================
# src/chronic_eda/pipeline/errors.py
# ========================

"""
Pipeline Error Types

LoadError is fatal and aborts the run. The warning classes flag per-row
policy decisions (dropped or degenerate values) that never stop processing.
"""


class LoadError(Exception):
    """Raised when the input file is missing, unreadable or has the wrong header."""


class CoercionWarning(UserWarning):
    """DataValue cells that could not be parsed as finite numbers were dropped."""


class DegenerateGroupWarning(UserWarning):
    """A group had no spread, so its statistic is NaN."""
