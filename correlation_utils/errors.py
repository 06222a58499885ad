"""
Correlation Engine Errors
Exceptions raised at the boundary of the correlation engine
"""

from typing import Optional


class CorrelationError(ValueError):
    """Base class for every error raised by the correlation engine."""


class MismatchedLengthError(CorrelationError):
    """The two samples do not contain the same number of observations."""

    def __init__(self, len_x: int, len_y: int):
        self.len_x = len_x
        self.len_y = len_y
        super().__init__(
            f"Samples must have the same length. Got {len_x} and {len_y} observations."
        )


class EmptyInputError(CorrelationError):
    """The samples contain no observations."""

    def __init__(self, message: str = "Samples must contain at least one observation."):
        super().__init__(message)


class DegenerateVarianceError(CorrelationError):
    """A sample has zero variance, so the coefficient is 0/0."""

    def __init__(self, label: Optional[str] = None, coefficient: str = "correlation"):
        self.label = label
        self.coefficient = coefficient
        if label:
            message = f"Cannot compute the {coefficient} coefficient: '{label}' has zero variance."
        else:
            message = f"Cannot compute the {coefficient} coefficient: a sample has zero variance."
        super().__init__(message)


class NegativeRadicandError(CorrelationError, ArithmeticError):
    """Square root requested for a negative number."""

    def __init__(self, value):
        self.value = value
        super().__init__(f"Cannot calculate square root from a negative number: {value}")


class InvalidSampleError(CorrelationError):
    """A sample holds a value that is not a finite number."""

    def __init__(self, value, position: int, label: Optional[str] = None):
        self.value = value
        self.position = position
        self.label = label
        where = f" in '{label}'" if label else ""
        super().__init__(
            f"Value {value!r} at position {position + 1}{where} is not a finite number."
        )


class InputTooLargeError(CorrelationError):
    """The samples exceed the configured limit for the Kendall pair sweep."""

    def __init__(self, n: int, limit: int):
        self.n = n
        self.limit = limit
        super().__init__(
            f"Kendall's tau is limited to {limit} observations; got {n}."
        )
