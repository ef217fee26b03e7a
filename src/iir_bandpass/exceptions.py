"""
Filter-specific exceptions for band-pass design and zero-phase filtering.
"""


class FilterError(ValueError):
    """Base class for filter design and processing errors"""


class FilterDesignError(FilterError):
    """Raised when filter design fails"""


class InvalidFilterSpecificationError(FilterDesignError):
    """Raised when design parameters are invalid"""


class FilterCoefficientError(FilterDesignError):
    """Raised when filter coefficients describe an undefined filter"""


class FilterProcessingError(FilterError):
    """Raised when filter processing fails"""


class SignalTooShortError(FilterProcessingError):
    """Raised when a signal is too short to pad for zero-phase filtering"""
