"""Exceptions raised by ftnmf."""


class ShapeMismatchError(ValueError):
    """
    Raised when the shapes of the templates, activations and input are not
    mutually consistent.

    Subclasses :class:`ValueError` so that callers catching the generic exception
    keep working.
    """


class DegenerateInputError(ArithmeticError):
    """
    Raised in strict mode when an update produces non-finite activations.

    This happens when the reconstruction :math:`WH` has exact zeros, or when a
    template cannot be reached by the input, so that the multiplicative update
    divides by zero.
    """
