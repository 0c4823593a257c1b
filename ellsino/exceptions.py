"""Exception types raised by ellsino."""


class ValidationError(ValueError):
    """Raised when an input violates a precondition of a projection call.

    Covers malformed ellipse tables, mismatched sampling grids, invalid
    oversampling or downsampling factors and invalid geometry parameters.
    Subclasses ``ValueError`` so callers may catch either.
    """
